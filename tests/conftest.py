from __future__ import annotations

import json
import sqlite3
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

PRODUCT_COLUMNS = [
    "Id", "DateTime", "Background", "Background2", "IsDeveloper", "ProductAsin",
    "ProductAsinVersion", "ProductDescription", "ProductDomain", "ProductIconUrl",
    "ProductIdStr", "ProductLine", "ProductPublisher", "ProductSku", "ProductTitle",
    "ScreenshotsJson", "State", "VideosJson",
]
INSTALL_COLUMNS = [
    "Id", "InstallDate", "InstallDirectory", "InstallVersion", "InstallVersionName",
    "Installed", "LastKnownLatestVersion", "LastKnownLatestVersionTimestamp",
    "LastUpdated", "LastPlayed", "ProductAsin", "ProductTitle",
]


def make_db(path: Path, columns, rows) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    try:
        conn.execute(f"create table DbSet ({', '.join(columns)})")
        marks = ", ".join("?" for _ in columns)
        conn.executemany(f"insert into DbSet values ({marks})", rows)
        conn.commit()
    finally:
        conn.close()
    return path


def product_row(asin: str, title: str, icon: str = "") -> list:
    row = {c: "" for c in PRODUCT_COLUMNS}
    row.update(Id=f"p-{asin}", IsDeveloper=0, ProductAsin=asin, ProductTitle=title,
               ProductIconUrl=icon or f"https://img.example/{asin}.png",
               ProductDescription=None, ProductPublisher="Pub")
    return [row[c] for c in PRODUCT_COLUMNS]


def install_row(asin: str, directory: str, installed: int = 1) -> list:
    row = {c: "" for c in INSTALL_COLUMNS}
    row.update(Id=f"i-{asin}-{directory}", InstallDirectory=directory, Installed=installed,
               InstallVersion=None, InstallVersionName=None, ProductAsin=asin)
    return [row[c] for c in INSTALL_COLUMNS]


def write_fuel(install_dir: Path, main: dict, **extra) -> Path:
    install_dir.mkdir(parents=True, exist_ok=True)
    data = {"SchemaVersion": "2", "Main": main}
    data.update(extra)
    p = install_dir / "fuel.json"
    p.write_text(json.dumps(data), encoding="utf-8")
    return p


def mock_popen_calls():
    """A Popen stand-in and the list it records (argv, kwargs) into."""
    calls = []

    class _P:
        def __init__(self, argv, **kw):
            self.argv = argv
            self.kw = kw
            self.pid = 4242
            calls.append((argv, kw))
    return _P, calls


@pytest.fixture
def fake_popen(monkeypatch):
    import twitchshelf.launch as L
    FakePopen, calls = mock_popen_calls()
    monkeypatch.setattr(L.subprocess, "Popen", FakePopen)
    return calls


@pytest.fixture
def shelf(tmp_path):
    """Registries with three products: one direct launch, one URL launch, one not installed."""
    from twitchshelf.settings import load_config

    games_dir = tmp_path / "Games"
    write_fuel(games_dir / "Foo", {"Command": "Foo.exe", "Args": ["-windowed"], "WorkingSubdirOverride": "bin"})
    write_fuel(games_dir / "ABC123", {"Command": "Bar.exe", "ClientId": "amzn1.client", "AuthScopes": ["a"]})

    product_db = make_db(tmp_path / "GameProductInfo.sqlite", PRODUCT_COLUMNS, [
        product_row("FOO", "Foo Quest"),
        product_row("BAR", "Bar Racer"),
        product_row("BAZ", "Baz Land"),
    ])
    install_db = make_db(tmp_path / "GameInstallInfo.sqlite", INSTALL_COLUMNS, [
        install_row("FOO", str(games_dir / "Foo")),
        install_row("BAR", str(games_dir / "ABC123")),
    ])
    return load_config(
        env={},
        cache_dir=tmp_path / "cache",
        product_db=product_db,
        install_db=install_db,
    )
