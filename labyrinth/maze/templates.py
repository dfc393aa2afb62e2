"""Center templates stamped into the middle of every generated maze."""
from __future__ import annotations

from pathlib import Path
from typing import Union

from .objects import Grid, string_to_maze

# Start room: the big door on the top edge is where the maze tree is rooted.
DEFAULT_TEMPLATE_TEXT = "\n".join(
    [
        "##n##",
        "#   #",
        "# S #",
        "# P #",
        "#####",
    ]
)


def default_template() -> Grid:
    return string_to_maze(DEFAULT_TEMPLATE_TEXT)


def load_template(path: Union[str, Path]) -> Grid:
    """Read a level file; a single trailing newline is not treated as a row."""
    text = Path(path).read_text(encoding="utf-8")
    if text.endswith("\r\n"):
        text = text[:-2]
    elif text.endswith("\n"):
        text = text[:-1]
    return string_to_maze(text)


__all__ = ["DEFAULT_TEMPLATE_TEXT", "default_template", "load_template"]
