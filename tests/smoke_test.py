#!/usr/bin/env python3
"""
Smoke test for Twitch Shelf.

Checks, end to end against throwaway registries:
- refresh builds the cache and the registry snapshot
- direct and URL launches are resolved from fuel.json (Popen mocked)
- local fields survive a second refresh after an uninstall
- a title dropped from the catalog stays in the cache
"""
import shutil, tempfile
from pathlib import Path

from conftest import (INSTALL_COLUMNS, PRODUCT_COLUMNS, install_row, make_db,
                      mock_popen_calls, product_row, write_fuel)
from twitchshelf.cache import load_games, save_games
from twitchshelf.cli import refresh
from twitchshelf.launch import launch_game
from twitchshelf.settings import load_config


def test_smoke():
    tmp = Path(tempfile.mkdtemp(prefix="twitchshelf_test_"))
    try:
        games = tmp / "Games"
        write_fuel(games / "Foo", {"Command": "Foo.exe", "WorkingSubdirOverride": "bin"})
        write_fuel(games / "ABC123", {"Command": "Bar.exe", "ClientId": "c"})

        products = [product_row("FOO", "Foo"), product_row("BAR", "Bar")]
        installs = [install_row("FOO", str(games / "Foo")), install_row("BAR", str(games / "ABC123"))]
        cfg = load_config(
            env={},
            cache_dir=tmp / "cache",
            product_db=make_db(tmp / "p1.sqlite", PRODUCT_COLUMNS, products),
            install_db=make_db(tmp / "i1.sqlite", INSTALL_COLUMNS, installs),
        )

        built = {g.asin: g for g in refresh(cfg)}
        assert set(built) == {"FOO", "BAR"}
        assert cfg.snapshot_path.exists(), "registry snapshot not written"

        # Launch both (mocked)
        FakePopen, calls = mock_popen_calls()
        launch_game(built["FOO"], popen=FakePopen)
        launch_game(built["BAR"], popen=FakePopen)
        assert calls[0][0] == [str(games / "Foo" / "Foo.exe")]
        assert calls[0][1]["cwd"] == str(games / "Foo" / "bin")
        assert calls[1][0][-1] == "twitch://fuel-launch/ABC123"

        # Curate locally, then uninstall Foo and drop Bar from the catalog
        cached = load_games(cfg.cache_path)
        for g in cached:
            g.kids = g.asin == "FOO"
        save_games(cfg.cache_path, cached)

        cfg.product_db = make_db(tmp / "p2.sqlite", PRODUCT_COLUMNS, [product_row("FOO", "Foo II")])
        cfg.install_db = make_db(tmp / "i2.sqlite", INSTALL_COLUMNS,
                                 [install_row("FOO", str(games / "Foo"), installed=0)])
        after = {g.asin: g for g in refresh(cfg)}

        assert after["FOO"].title == "Foo II"
        assert after["FOO"].installed is False
        assert after["FOO"].launch is None
        assert after["FOO"].kids is True, "local flag lost on refresh"
        assert after["BAR"].launch_url == "twitch://fuel-launch/ABC123", "vanished title changed"

        print("[OK] Games built:", sorted(built))
        print("[OK] Launches dispatched (mocked):", [c[0] for c in calls])
        print("[OK] Local flags kept across refresh.")
    finally:
        shutil.rmtree(tmp, ignore_errors=True)


if __name__ == "__main__":
    test_smoke()
