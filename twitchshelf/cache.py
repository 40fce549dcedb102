from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from dataclasses import asdict, replace
from pathlib import Path
from typing import Dict, List, Sequence

from .errors import CacheError
from .models import REGISTRY_FIELDS, Game, Install, Product

logger = logging.getLogger(__name__)

def load_games(cache_path: Path) -> List[Game]:
    try:
        data = json.loads(cache_path.read_text("utf-8"))
    except FileNotFoundError as e:
        raise CacheError(f"No game cache at {cache_path}; run with --refresh") from e
    except (OSError, ValueError) as e:
        raise CacheError(f"Unable to read game cache {cache_path}: {e}") from e
    if not isinstance(data, list):
        raise CacheError(f"Game cache {cache_path} is not a list")
    try:
        return [Game.from_dict(item) for item in data]
    except (AttributeError, KeyError, TypeError) as e:
        raise CacheError(f"Corrupt entry in game cache {cache_path}: {e}") from e

def _write_replace(path: Path, text: str) -> None:
    """Write next to the target, then swap it in so readers never see half a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        raise

def save_games(cache_path: Path, games: Sequence[Game]) -> None:
    payload = json.dumps([g.to_dict() for g in games], indent=2)
    try:
        _write_replace(cache_path, payload)
    except OSError as e:
        raise CacheError(f"Unable to write game cache {cache_path}: {e}") from e
    logger.debug("Saved %d games to %s", len(games), cache_path)

def save_snapshot(snapshot_path: Path, products: Sequence[Product], installs: Sequence[Install]) -> None:
    """Keep the raw registry rows from the last refresh next to the cache."""
    data = {
        "products": [asdict(p) for p in products],
        "installs": [asdict(i) for i in installs],
    }
    try:
        _write_replace(snapshot_path, json.dumps(data))
    except OSError as e:
        raise CacheError(f"Unable to write registry snapshot {snapshot_path}: {e}") from e

def merge_games(persisted: Sequence[Game], fresh: Sequence[Game]) -> List[Game]:
    """
    Fold a freshly built catalog into the persisted one.

    Registry fields of matching games are replaced; local fields (kids,
    players, image_path, unknown keys) are kept. Games missing from `fresh`
    stay as they are, new ones go at the end. Neither input is modified.
    """
    merged = [replace(g, extra=dict(g.extra)) for g in persisted]
    index: Dict[str, int] = {}
    for n, g in enumerate(merged):
        index.setdefault(g.asin, n)

    added: List[Game] = []
    for new in fresh:
        n = index.get(new.asin)
        if n is None:
            added.append(replace(new, extra=dict(new.extra)))
            index[new.asin] = len(merged) + len(added) - 1
            continue
        updates = {name: getattr(new, name) for name in REGISTRY_FIELDS}
        if updates["args"] is not None:
            updates["args"] = list(updates["args"])
        if n < len(merged):
            merged[n] = replace(merged[n], **updates)
        else:
            added[n - len(merged)] = replace(added[n - len(merged)], **updates)
    return merged + added
