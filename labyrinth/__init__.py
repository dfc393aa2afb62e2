"""
project: Labyrinth
module: __init__.py
License: MIT

Flask application factory.

The HTTP layer is a thin wrapper over ``labyrinth.maze``. Configuration is
sourced from environment variables (optionally via a ``.env`` file) and a
local ``instance/`` directory holds the rotating server log.
"""

import os

from dotenv import load_dotenv
from flask import Flask

__version__ = "0.1.0"


def create_app(config: dict | None = None) -> Flask:
    """Build the Flask app with the maze blueprint registered."""
    # Load .env if present so MAZE_* defaults can be supplied without exporting them
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # Read-only checkouts still serve the API; only file logging needs it
        pass

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        MAZE_MAX_DIMENSION=int(os.getenv("MAZE_MAX_DIMENSION", "64")),
        MAZE_API_MAX_ATTEMPTS=int(os.getenv("MAZE_API_MAX_ATTEMPTS", "500")),
        MAZE_DISABLE_CACHE=os.getenv("MAZE_DISABLE_CACHE", "0") == "1",
        LOG_LEVEL=os.getenv("LOG_LEVEL", "info"),
        LOG_MAX_BYTES=int(os.getenv("LOG_MAX_BYTES", "1000000")),
        LOG_BACKUP_COUNT=int(os.getenv("LOG_BACKUP_COUNT", "3")),
    )
    if config:
        app.config.update(config)

    from labyrinth.routes.maze_api import bp_maze

    app.register_blueprint(bp_maze)
    return app


__all__ = ["create_app", "__version__"]
