from __future__ import annotations

import json
import logging
import re
from collections import defaultdict
from pathlib import Path, PurePath
from typing import Dict, List, Sequence, Union

from .errors import ManifestError
from .models import DirectLaunch, Game, IndirectLaunch, Install, LaunchDescriptor, Product
from .settings import DEFAULT_URL_SCHEME

logger = logging.getLogger(__name__)

MANIFEST = "fuel.json"

_LINE_COMMENT = re.compile(r"^\s*//.*$", re.MULTILINE)

# ──────────────────────────────────────────────────────────────────────────────
# fuel.json
# ──────────────────────────────────────────────────────────────────────────────

def read_manifest(install_directory: Union[str, Path]) -> Dict:
    path = Path(install_directory) / MANIFEST
    logger.debug("Parsing launch config file: %s", path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise ManifestError(f"cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ManifestError(f"{path} is not UTF-8: {e}") from e
    try:
        data = json.loads(_LINE_COMMENT.sub("", text))
    except ValueError as e:
        raise ManifestError(f"invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"{path} is not a JSON object")
    return data

def _str_list(value, what: str, path: PurePath) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestError(f"{what} in {path} must be a list of strings")
    return list(value)

def resolve_manifest(install_directory: Union[str, Path], *,
                     url_scheme: str = DEFAULT_URL_SCHEME) -> LaunchDescriptor:
    """
    Turn an install directory's fuel.json into a launch descriptor.

    A ClientId on the Main entry means the title authenticates through the
    client, so it is launched by URL using the directory name as the game id.
    Otherwise the Main command is run directly.
    """
    install_dir = Path(install_directory)
    data = read_manifest(install_dir)
    where = install_dir / MANIFEST

    main = data.get("Main")
    if not isinstance(main, dict):
        raise ManifestError(f"{where} has no Main entry")

    post_install = data.get("PostInstall")
    if post_install is not None and not isinstance(post_install, list):
        raise ManifestError(f"PostInstall in {where} must be a list")

    if main.get("ClientId") is not None:
        return IndirectLaunch(f"{url_scheme}://fuel-launch/{install_dir.name}")

    command = main.get("Command")
    if not isinstance(command, str) or not command.strip():
        raise ManifestError(f"{where} has no Main.Command")

    override = main.get("WorkingSubdirOverride")
    if override is not None and not isinstance(override, str):
        raise ManifestError(f"WorkingSubdirOverride in {where} must be a string")

    return DirectLaunch(
        command=str(install_dir / command),
        args=_str_list(main.get("Args"), "Args", where),
        working_subdir_override=override or None,
    )

# ──────────────────────────────────────────────────────────────────────────────
# Catalog
# ──────────────────────────────────────────────────────────────────────────────

def build_games(products: Sequence[Product], installs: Sequence[Install], *,
                url_scheme: str = DEFAULT_URL_SCHEME) -> List[Game]:
    by_asin: Dict[str, List[Install]] = defaultdict(list)
    for i in installs:
        by_asin[i.product_asin].append(i)

    games: List[Game] = []
    seen = set()
    for p in products:
        if p.product_asin in seen:
            logger.warning("Duplicate product %s (%s) ignored", p.product_asin, p.product_title)
            continue
        seen.add(p.product_asin)

        game = Game(asin=p.product_asin, title=p.product_title, image_url=p.product_icon_url or "")
        matches = by_asin.get(p.product_asin, [])
        if len(matches) == 1:
            game.installed = matches[0].installed == 1
            game.install_directory = matches[0].install_directory
        elif len(matches) > 1:
            logger.warning(
                "%s has %d install records (%s); treating as not installed",
                p.product_title, len(matches), ", ".join(m.install_directory for m in matches),
            )

        if game.installed and game.install_directory:
            try:
                game.set_launch(resolve_manifest(game.install_directory, url_scheme=url_scheme))
            except ManifestError as e:
                logger.warning("Unable to resolve launch info for %s: %s", game.title, e)
        games.append(game)
    return games
