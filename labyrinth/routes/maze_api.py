"""
project: Labyrinth
module: maze_api.py
License: MIT

Maze generation API routes.

GET  /api/maze          maze from the default start room, cached per seed/size
POST /api/maze          maze from a caller supplied center template
GET  /api/maze/legend   level text character -> object name
"""

import threading

from flask import Blueprint, current_app, jsonify, request

from labyrinth.logging_utils import get_logger
from labyrinth.maze import (
    GenerationError,
    MazeConfig,
    MazeGenerator,
    MazeObject,
    coerce_seed,
    default_template,
    find_object,
    maze_to_string,
    string_to_maze,
)
from labyrinth.maze.objects import CHAR_TO_OBJECT

bp_maze = Blueprint("maze", __name__)
log = get_logger("labyrinth.api")

# Simple in-process cache (seed,width,height)->payload. Guarded by a lock since the dev server is threaded.
_maze_cache = {}
_maze_cache_lock = threading.Lock()
_MAZE_CACHE_MAX = 8  # small LRU-ish manual cap


def _build_payload(seed: int, width: int, height: int, template=None) -> dict:
    cfg = MazeConfig.from_env(seed=seed)
    if cfg.max_attempts is None:
        # Never let a request spin forever on an unlucky seed
        cfg.max_attempts = current_app.config["MAZE_API_MAX_ATTEMPTS"]
    generator = MazeGenerator(width, height, template if template is not None else default_template(), cfg)
    grid = generator.generate_maze()
    portal = find_object(grid, MazeObject.PORTAL)
    return {
        "seed": seed,
        "width": width,
        "height": height,
        "rows": maze_to_string(grid).split("\n"),
        "grid": [[int(cell) for cell in row] for row in grid],
        "portal": list(portal) if portal is not None else None,
        "metrics": generator.metrics,
    }


def get_cached_maze(seed: int, width: int, height: int) -> dict:
    if current_app.config.get("MAZE_DISABLE_CACHE"):
        return _build_payload(seed, width, height)
    key = (seed, width, height)
    with _maze_cache_lock:
        payload = _maze_cache.get(key)
        if payload is not None:
            return payload
    payload = _build_payload(seed, width, height)
    with _maze_cache_lock:
        _maze_cache[key] = payload
        if len(_maze_cache) > _MAZE_CACHE_MAX:
            first_key = next(iter(_maze_cache.keys()))
            if first_key != key:
                _maze_cache.pop(first_key, None)
    return payload


def clear_cache() -> None:
    with _maze_cache_lock:
        _maze_cache.clear()


def _parse_dimension(raw, name: str) -> int:
    """Coerce a width/height parameter, enforcing the configured bounds.

    Missing values fall back to MAZE_WIDTH / MAZE_HEIGHT (or the config default).
    """
    if raw is None or raw == "":
        raw = getattr(MazeConfig.from_env(), name)
    if isinstance(raw, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer")
    limit = current_app.config["MAZE_MAX_DIMENSION"]
    if not 1 <= value <= limit:
        raise ValueError(f"{name} must be between 1 and {limit}")
    return value


@bp_maze.errorhandler(ValueError)
def _bad_request(exc):
    return jsonify({"error": str(exc)}), 400


@bp_maze.errorhandler(GenerationError)
def _generation_failed(exc):
    log.error(event="maze_generation_failed", error=str(exc))
    return jsonify({"error": str(exc)}), 503


@bp_maze.route("/api/maze", methods=["GET"])
def get_maze():
    """Return a maze built around the default start room.

    Query params (all optional): width, height (room counts), seed (int or str).
    """
    width = _parse_dimension(request.args.get("width"), "width")
    height = _parse_dimension(request.args.get("height"), "height")
    seed = coerce_seed(request.args.get("seed"))
    return jsonify(get_cached_maze(seed, width, height))


@bp_maze.route("/api/maze", methods=["POST"])
def create_maze():
    """Generate a maze from a JSON body.

    Body JSON (all optional):
      { "width": <int>, "height": <int>, "seed": <int|str|null>, "template": <level text> }
    Custom templates bypass the cache.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("request body must be a JSON object")
    width = _parse_dimension(data.get("width"), "width")
    height = _parse_dimension(data.get("height"), "height")
    seed = coerce_seed(data.get("seed"))

    template_text = data.get("template")
    if template_text is None:
        return jsonify(get_cached_maze(seed, width, height))
    if not isinstance(template_text, str) or not template_text.strip():
        raise ValueError("template must be non-empty level text")
    return jsonify(_build_payload(seed, width, height, string_to_maze(template_text)))


@bp_maze.route("/api/maze/legend", methods=["GET"])
def get_legend():
    return jsonify({ch: obj.name for ch, obj in CHAR_TO_OBJECT.items()})
