from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union

@dataclass
class Product:
    id: str
    product_asin: str
    product_title: str
    product_icon_url: str = ""
    date_time: Optional[str] = None
    background: Optional[str] = None
    background2: Optional[str] = None
    is_developer: Optional[int] = None
    product_asin_version: Optional[str] = None
    product_description: Optional[str] = None
    product_domain: Optional[str] = None
    product_id_str: Optional[str] = None
    product_line: Optional[str] = None
    product_publisher: Optional[str] = None
    product_sku: Optional[str] = None
    screenshots_json: Optional[str] = None
    state: Optional[str] = None
    videos_json: Optional[str] = None

@dataclass
class Install:
    id: str
    product_asin: str
    install_directory: str
    installed: int                  # 1 = installed, anything else = not
    install_date: Optional[str] = None
    install_version: Optional[str] = None
    install_version_name: Optional[str] = None
    last_known_latest_version: Optional[str] = None
    last_known_latest_version_timestamp: Optional[str] = None
    last_updated: Optional[str] = None
    last_played: Optional[str] = None
    product_title: Optional[str] = None

@dataclass(frozen=True)
class DirectLaunch:
    command: str                    # absolute
    args: List[str] = field(default_factory=list)
    working_subdir_override: Optional[str] = None

@dataclass(frozen=True)
class IndirectLaunch:
    launch_url: str

LaunchDescriptor = Union[DirectLaunch, IndirectLaunch]

# Fields a refresh is allowed to overwrite. Everything else on a Game is local.
REGISTRY_FIELDS = (
    "title",
    "image_url",
    "install_directory",
    "installed",
    "command",
    "args",
    "working_subdir_override",
    "launch_url",
)

@dataclass
class Game:
    asin: str
    title: str
    image_url: str = ""
    installed: bool = False
    install_directory: Optional[str] = None
    # direct launch
    command: Optional[str] = None
    args: Optional[List[str]] = None
    working_subdir_override: Optional[str] = None
    # indirect launch
    launch_url: Optional[str] = None
    # local only, never touched by a refresh
    image_path: Optional[str] = None
    kids: Optional[bool] = None
    players: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def launch(self) -> Optional[LaunchDescriptor]:
        if self.command:
            return DirectLaunch(self.command, list(self.args or []), self.working_subdir_override)
        if self.launch_url:
            return IndirectLaunch(self.launch_url)
        return None

    def set_launch(self, descriptor: Optional[LaunchDescriptor]) -> None:
        self.command = None
        self.args = None
        self.working_subdir_override = None
        self.launch_url = None
        if isinstance(descriptor, DirectLaunch):
            self.command = descriptor.command
            self.args = list(descriptor.args)
            self.working_subdir_override = descriptor.working_subdir_override
        elif isinstance(descriptor, IndirectLaunch):
            self.launch_url = descriptor.launch_url

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            data[f.name] = list(value) if isinstance(value, list) else value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Game":
        known = {f.name for f in fields(cls)} - {"extra"}
        kwargs = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        if "asin" not in kwargs or "title" not in kwargs:
            raise KeyError("game entry needs 'asin' and 'title'")
        installed = kwargs.get("installed", False)
        if installed not in (True, False) or isinstance(installed, float):
            raise TypeError(f"installed must be true or false, got {installed!r}")
        kwargs["installed"] = bool(installed)
        game = cls(**kwargs)
        game.extra = extra
        return game
