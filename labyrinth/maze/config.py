import os
from dataclasses import dataclass, fields
from typing import Optional

from .seeds import coerce_seed

# Environment variable -> MazeConfig attribute
ENV_MAP = {
    "MAZE_WIDTH": "width",
    "MAZE_HEIGHT": "height",
    "MAZE_SEED": "seed",
    "MAZE_NUM_ENERGY": "num_energy",
    "MAZE_NUM_DRONES": "num_drones",
    "MAZE_NUM_ROCKS": "num_rocks",
    "MAZE_MAX_ATTEMPTS": "max_attempts",
    "MAZE_ENABLE_METRICS": "enable_metrics",
}


@dataclass
class MazeConfig:
    width: int = 13
    height: int = 13
    seed: Optional[int] = None
    num_energy: int = 20
    num_drones: int = 10
    num_rocks: int = 15
    # None keeps retrying the main path until it succeeds
    max_attempts: Optional[int] = None
    enable_metrics: bool = True

    @classmethod
    def from_env(cls, **overrides) -> "MazeConfig":
        """Build a config from MAZE_* environment variables; keyword overrides win."""
        cfg = cls()
        for env_key, attr in ENV_MAP.items():
            raw = os.environ.get(env_key)
            if raw is None or raw.strip() == "":
                continue
            if attr == "enable_metrics":
                setattr(cfg, attr, raw.strip().lower() not in {"0", "false", "no", "off"})
            elif attr == "seed":
                cfg.seed = coerce_seed(raw)
            else:
                setattr(cfg, attr, int(raw))
        names = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in names:
                raise TypeError(f"unknown MazeConfig field: {key}")
            if value is not None:
                setattr(cfg, key, value)
        return cfg


__all__ = ["MazeConfig", "ENV_MAP"]
