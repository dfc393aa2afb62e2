"""Minimal structured logging helper.

Emits one line per event as key=value pairs (or a compact JSON object when
``LABYRINTH_LOG_JSON`` is set) with a timestamp and level. Generation code logs
events rather than sentences so runs can be grepped and diffed.

Usage:
    from labyrinth.logging_utils import get_logger
    log = get_logger("labyrinth.maze").bind(seed=42)
    log.info(event="maze_generated", attempts=3)

Values that are None are dropped. Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
_ALIASES = {"warning": "warn"}
CURRENT_LEVEL = LEVELS.get(os.getenv("LABYRINTH_LOG_LEVEL", "warn").lower(), 30)
JSON_MODE = os.getenv("LABYRINTH_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def set_level(level: str) -> None:
    """Change the process-wide threshold (debug, info, warn, error)."""
    global CURRENT_LEVEL
    name = level.lower()
    name = _ALIASES.get(name, name)
    if name not in LEVELS:
        raise ValueError(f"unknown log level: {level}")
    CURRENT_LEVEL = LEVELS[name]


def _format(level: str, fields: dict) -> str:
    ts = int(time.time())
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = ts
        # Enum cell codes and tuples fall back to str()
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={ts}"]
    parts.extend(f"{k}={_kv_value(v)}" for k, v in fields.items() if v is not None)
    return " ".join(parts)


def _kv_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return str(value).replace(" ", "_")


class _Logger:
    def __init__(self, name: str | None = None, context: dict | None = None):
        self.name = name or "labyrinth"
        self.context = dict(context or {})

    def bind(self, **fields) -> "_Logger":
        """Child logger that adds ``fields`` to every event it emits."""
        return _Logger(self.name, {**self.context, **fields})

    def _log(self, lvl: str, fields: dict) -> None:
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        record = {**self.context, **fields}
        record.setdefault("logger", self.name)
        print(_format(lvl, record), file=sys.stderr if lvl == "error" else sys.stdout)

    def debug(self, **fields) -> None:
        self._log("debug", fields)

    def info(self, **fields) -> None:
        self._log("info", fields)

    def warn(self, **fields) -> None:
        self._log("warn", fields)

    def error(self, **fields) -> None:
        self._log("error", fields)


_LOGGER_CACHE: dict[str, _Logger] = {}


def get_logger(name: str) -> _Logger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("labyrinth")
