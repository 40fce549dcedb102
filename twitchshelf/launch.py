# twitchshelf/launch.py
from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .errors import LaunchError
from .models import DirectLaunch, Game, IndirectLaunch
from .utils import is_windows

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Invocation:
    argv: List[str]
    cwd: Optional[str] = None

# ──────────────────────────────────────────────────────────────────────────────
# Small helpers
# ──────────────────────────────────────────────────────────────────────────────

def url_opener_argv(url: str) -> List[str]:
    """The platform's 'open this URL' command."""
    if is_windows():
        # empty title so start doesn't take the URL as the window title
        return ["cmd", "/c", "start", "", url]
    if sys.platform == "darwin":
        return ["open", url]
    return ["xdg-open", url]

def resolve_invocation(game: Game) -> Invocation:
    """Decide how a game would be started, without starting it."""
    descriptor = game.launch
    if isinstance(descriptor, DirectLaunch) and game.install_directory:
        install_dir = Path(game.install_directory)
        cwd = install_dir / descriptor.working_subdir_override if descriptor.working_subdir_override else install_dir
        command = install_dir / descriptor.command
        return Invocation(argv=[str(command)] + list(descriptor.args), cwd=str(cwd))
    if isinstance(descriptor, IndirectLaunch):
        return Invocation(argv=url_opener_argv(descriptor.launch_url))
    raise LaunchError(f"Missing launch information for {game.title}")

# ──────────────────────────────────────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────────────────────────────────────

def launch_game(game: Game, *, popen: Optional[Callable[..., subprocess.Popen]] = None) -> subprocess.Popen:
    """
    Start the game and hand back the process without waiting on it.

    Direct launches run the manifest command in the install directory (or its
    working subdir override). URL launches go through the OS opener.
    """
    inv = resolve_invocation(game)
    popen = popen or subprocess.Popen
    logger.info("Launching %s: %s (cwd=%s)", game.title, inv.argv, inv.cwd)
    try:
        return popen(inv.argv, cwd=inv.cwd)
    except OSError as e:
        raise LaunchError(f"Unable to launch game {game.title}: {e}") from e
