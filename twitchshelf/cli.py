"""
Command line entry point.

    twitchshelf --refresh
    twitchshelf --list [--installed true|false] [--json]
    twitchshelf --launch "Game Title"
    twitchshelf --launcher [--kids]
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import requests

from . import cache, catalog, registry
from .errors import CacheError, LaunchError, TwitchShelfError
from .launch import launch_game
from .models import Game
from .settings import Config, load_config
from .utils import download_thumbnail

logger = logging.getLogger(__name__)

def _bool_arg(value: str) -> bool:
    v = value.strip().lower()
    if v == "true":
        return True
    if v == "false":
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="twitchshelf", description="Launcher for Twitch Prime games.")
    p.add_argument("--refresh", action="store_true",
                   help="Refresh the list of known games from the Twitch install.")
    p.add_argument("--list", action="store_true", help="List the known games.")
    p.add_argument("-i", "--installed", type=_bool_arg, metavar="true|false",
                   help="Limit --list to installed (true) or not installed (false) games.")
    p.add_argument("--json", action="store_true", help="Output data in json format.")
    p.add_argument("-l", "--launch", metavar="TITLE", help="Launch the specified game.")
    p.add_argument("--launcher", action="store_true", help="Display the graphical launcher in a browser.")
    p.add_argument("--kids", action="store_true", help="Only show games flagged for kids in the launcher.")
    p.add_argument("--cache-dir", help="Cache directory (default ~/.twitch).")
    p.add_argument("--product-db", help="Path to GameProductInfo.sqlite.")
    p.add_argument("--install-db", help="Path to GameInstallInfo.sqlite.")
    p.add_argument("--url-scheme", help="Protocol used for client-authenticated launches.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return p

# ──────────────────────────────────────────────────────────────────────────────
# Operations
# ──────────────────────────────────────────────────────────────────────────────

def refresh(cfg: Config) -> List[Game]:
    """Rebuild from the registries and fold the result into the cache."""
    products = registry.load_products(cfg.product_db)
    installs = registry.load_installs(cfg.install_db)
    cache.save_snapshot(cfg.snapshot_path, products, installs)
    fresh = catalog.build_games(products, installs, url_scheme=cfg.url_scheme)

    persisted: List[Game] = []
    if cfg.cache_path.exists():
        try:
            persisted = cache.load_games(cfg.cache_path)
        except CacheError as e:
            logger.warning("%s; rebuilding cache from scratch", e)

    games = cache.merge_games(persisted, fresh)
    cache.save_games(cfg.cache_path, games)
    logger.info("Cached %d games (%d from registry)", len(games), len(fresh))
    return games

def load_or_refresh(cfg: Config, force: bool = False) -> List[Game]:
    if force or not cfg.cache_path.exists():
        print("Refreshing Twitch game cache...", file=sys.stderr)
        games = refresh(cfg)
    else:
        games = cache.load_games(cfg.cache_path)
    return sorted(games, key=lambda g: g.title)

def filter_installed(games: Sequence[Game], installed: Optional[bool]) -> List[Game]:
    if installed is None:
        return list(games)
    return [g for g in games if g.installed == installed]

def find_game(games: Sequence[Game], title: str) -> Optional[Game]:
    for g in games:
        if g.title == title:
            return g
    return None

def fetch_thumbnails(cfg: Config, games: Sequence[Game]) -> int:
    """Download missing icons and record their local path on each game."""
    count = 0
    with requests.Session() as session:
        for g in games:
            if g.image_path and Path(g.image_path).exists():
                continue
            path = download_thumbnail(g.image_url, cfg.image_dir, cfg.tile_size, session=session)
            if path:
                g.image_path = str(path)
                count += 1
    return count

def run_launcher(cfg: Config, games: List[Game], kids: bool = False) -> None:
    from . import create_app

    shown = [g for g in games if g.installed and (g.kids or not kids)]
    if fetch_thumbnails(cfg, shown):
        cache.save_games(cfg.cache_path, games)
    app = create_app(cfg)
    url = f"http://{cfg.bind}:{cfg.port}/" + ("?kids=1" if kids else "")
    print(f"Launcher running at {url}")
    app.run(host=cfg.bind, port=cfg.port, debug=False)

# ──────────────────────────────────────────────────────────────────────────────
# main
# ──────────────────────────────────────────────────────────────────────────────

def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg = load_config(
        cache_dir=args.cache_dir,
        product_db=args.product_db,
        install_db=args.install_db,
        url_scheme=args.url_scheme,
    )

    try:
        games = load_or_refresh(cfg, force=args.refresh)

        if args.launcher:
            run_launcher(cfg, games, kids=args.kids)
            return 0

        if args.list:
            games = filter_installed(games, args.installed)
            if args.json:
                print(json.dumps([g.to_dict() for g in games]))
            else:
                for g in games:
                    print(g.title)
            return 0

        if args.launch:
            game = find_game(games, args.launch)
            if game is None:
                print(f"Unable to find game {args.launch}", file=sys.stderr)
                return 1
            launch_game(game)
            return 0

    except LaunchError as e:
        print(str(e), file=sys.stderr)
        return 1
    except TwitchShelfError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
