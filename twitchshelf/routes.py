from __future__ import annotations
import io
from pathlib import Path
from typing import List
from flask import Blueprint, current_app, render_template_string, redirect, url_for, flash, request, send_from_directory, send_file, abort, jsonify
from markupsafe import escape

from .cache import load_games
from .errors import LaunchError
from .launch import launch_game
from .models import Game
from .settings import Config

from .templates import INDEX_HTML

bp = Blueprint("twitchshelf", __name__)

def _cfg() -> Config:
    return current_app.config["SHELF"]

def _games() -> List[Game]:
    return load_games(_cfg().cache_path)

def _game_or_404(asin: str) -> Game:
    for g in _games():
        if g.asin == asin:
            return g
    abort(404)

@bp.get("/")
def index():
    kids_only = request.args.get("kids", "") in ("1", "true", "yes")
    games = [g for g in _games() if g.installed]
    if kids_only:
        games = [g for g in games if g.kids]
    games.sort(key=lambda g: g.title.lower())
    return render_template_string(
        INDEX_HTML,
        app_title=current_app.config["APP_TITLE"],
        games=games,
        kids_only=kids_only,
        tile=current_app.config["TILE_SIZE"],
    )

@bp.post("/launch/<asin>")
def launch(asin):
    game = _game_or_404(asin)
    try:
        proc = launch_game(game)
        ok, msg = True, f"Launched {game.title}."
        current_app.logger.debug("Spawned pid %s", getattr(proc, "pid", None))
    except LaunchError as e:
        ok, msg = False, str(e)

    if request.accept_mimetypes.accept_json and not request.accept_mimetypes.accept_html:
        return (jsonify({"ok": ok, ("message" if ok else "error"): msg}), 200 if ok else 500)

    flash(msg if ok else "Launch failed: " + msg)
    return redirect(url_for("twitchshelf.index", kids=request.args.get("kids") or None))

@bp.get("/cover/<asin>")
def cover(asin):
    game = _game_or_404(asin)
    if game.image_path:
        p = Path(game.image_path)
        if p.exists():
            return send_from_directory(p.parent, p.name)
    svg = f"""
    <svg xmlns="http://www.w3.org/2000/svg" width="200" height="200">
      <rect width="100%" height="100%" fill="#1f2630"/>
      <text x="50%" y="50%" fill="#e0e6ee" font-size="16" text-anchor="middle" dominant-baseline="middle">
        {escape(game.title[:24])}
      </text>
    </svg>
    """
    return send_file(io.BytesIO(svg.encode("utf-8")), mimetype="image/svg+xml")

@bp.get("/favicon.ico")
def favicon():
    return ("", 204)
