"""Maze generation package.

Public surface:
    MazeGenerator / generate_maze  full pipeline producing a grid of MazeObject
    MazeConfig                     tunables, overridable from MAZE_* env vars
    string_to_maze / maze_to_string  level text format
"""
from .config import MazeConfig
from .errors import ExhaustedRetries, GenerationError
from .generator import MazeGenerator, generate_maze
from .objects import (
    ALL_MAIN_DOORS,
    DOOR_ITEMS,
    Grid,
    MazeObject,
    find_object,
    maze_to_string,
    string_to_maze,
)
from .seeds import coerce_seed
from .templates import default_template, load_template

__all__ = [
    "MazeGenerator",
    "generate_maze",
    "MazeConfig",
    "GenerationError",
    "ExhaustedRetries",
    "MazeObject",
    "ALL_MAIN_DOORS",
    "DOOR_ITEMS",
    "Grid",
    "find_object",
    "maze_to_string",
    "string_to_maze",
    "coerce_seed",
    "default_template",
    "load_template",
]
