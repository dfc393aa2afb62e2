"""
project: Labyrinth
module: server.py
License: MIT

Server bootstrap for the maze HTTP API.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from flask import Flask

from labyrinth import create_app


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (integration / runtime only)
    """Start the Flask development server.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    Also configures application logging to a rotating file and console.
    """
    app = create_app()
    _configure_logging(app)
    try:
        print(f"[INFO] Starting maze API on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


# Marks handlers installed here so a second call swaps only its own
_HANDLER_TAG = "_labyrinth_handler"


def _configure_logging(app: Flask) -> str:
    """Send stdlib logging (Flask, werkzeug) to the console and instance/app.log.

    Level, file size and backup count come from ``LOG_LEVEL``,
    ``LOG_MAX_BYTES`` and ``LOG_BACKUP_COUNT`` in the app config. Handlers
    added by an earlier call are closed and replaced; anything else on the
    root logger is left alone. Returns the log file path.
    """
    os.makedirs(app.instance_path, exist_ok=True)
    log_path = os.path.join(app.instance_path, "app.log")
    level_name = str(app.config.get("LOG_LEVEL", "info")).upper()
    level = logging.getLevelName("WARNING" if level_name == "WARN" else level_name)
    if not isinstance(level, int):
        raise ValueError(f"unknown LOG_LEVEL: {app.config.get('LOG_LEVEL')}")

    root = logging.getLogger()
    for h in list(root.handlers):
        if getattr(h, _HANDLER_TAG, False):
            root.removeHandler(h)
            h.close()

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=int(app.config.get("LOG_MAX_BYTES", 1_000_000)),
        backupCount=int(app.config.get("LOG_BACKUP_COUNT", 3)),
    )
    console = logging.StreamHandler()
    for handler in (file_handler, console):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        root.addHandler(handler)
    root.setLevel(level)
    return log_path
