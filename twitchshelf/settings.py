from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

PRODUCT_DB_REL = Path("Twitch", "Games", "Sql", "GameProductInfo.sqlite")
INSTALL_DB_REL = Path("Twitch", "Games", "Sql", "GameInstallInfo.sqlite")
GAMES_FILE = "twitch_games.json"
SNAPSHOT_FILE = "twitchdb.json"
IMAGES_DIR = "images"
DEFAULT_URL_SCHEME = "twitch"

@dataclass
class Config:
    cache_dir: Path
    product_db: Path
    install_db: Path
    url_scheme: str = DEFAULT_URL_SCHEME
    bind: str = "127.0.0.1"
    port: int = 5000
    secret_key: Optional[str] = None
    tile_size: int = 200

    @property
    def cache_path(self) -> Path:
        return self.cache_dir / GAMES_FILE

    @property
    def snapshot_path(self) -> Path:
        return self.cache_dir / SNAPSHOT_FILE

    @property
    def image_dir(self) -> Path:
        return self.cache_dir / IMAGES_DIR

def _config_dir(env: Mapping[str, str]) -> Path:
    # Roaming AppData on Windows, XDG elsewhere.
    if env.get("APPDATA"):
        return Path(env["APPDATA"])
    if env.get("XDG_CONFIG_HOME"):
        return Path(env["XDG_CONFIG_HOME"])
    return Path.home() / ".config"

def _program_data(env: Mapping[str, str]) -> Path:
    return Path(env.get("PROGRAMDATA") or "c:/programdata")

def load_config(env: Optional[Mapping[str, str]] = None, **overrides) -> Config:
    """Build the Config from defaults, then env vars, then non-None overrides."""
    env = os.environ if env is None else env
    cfg = Config(
        cache_dir=Path(env.get("TWITCH_CACHE_DIR") or Path.home() / ".twitch"),
        product_db=Path(env.get("TWITCH_PRODUCT_DB") or _config_dir(env) / PRODUCT_DB_REL),
        install_db=Path(env.get("TWITCH_INSTALL_DB") or _program_data(env) / INSTALL_DB_REL),
        url_scheme=env.get("TWITCH_URL_SCHEME") or DEFAULT_URL_SCHEME,
        bind=env.get("BIND", "127.0.0.1"),
        port=int(env.get("PORT", "5000")),
        secret_key=env.get("FLASK_SECRET"),
    )
    for key, value in overrides.items():
        if value is None:
            continue
        if not hasattr(cfg, key):
            raise TypeError(f"unknown config option: {key}")
        if key in ("cache_dir", "product_db", "install_db"):
            value = Path(value)
        setattr(cfg, key, value)
    return cfg
