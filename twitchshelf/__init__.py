import os
from flask import Flask
from .routes import bp as routes_bp
from .settings import Config

APP_TITLE = "Twitch Shelf"

def create_app(config: Config) -> Flask:
    app = Flask(__name__)
    app.secret_key = config.secret_key or "dev-" + os.urandom(8).hex()
    app.config["SHELF"] = config
    app.config["APP_TITLE"] = APP_TITLE
    app.config["TILE_SIZE"] = config.tile_size

    app.register_blueprint(routes_bp)
    return app
