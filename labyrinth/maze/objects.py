"""Cell codes stored in the maze grid, plus the door/item requirement tables.

The text level format maps one character to one cell. Rows are separated by
newlines and padded with Empty cells to the longest row; unknown characters
become Empty.
"""
from __future__ import annotations

import re
from enum import IntEnum
from typing import Dict, List, NamedTuple, Optional


class MazeObject(IntEnum):
    EMPTY = 0
    PLAYER = 1
    WALL = 2
    ROCK = 3
    ENERGY = 4
    RED_DOOR = 5
    YELLOW_DOOR = 6
    GREEN_DOOR = 7
    BLUE_DOOR = 8
    RED_KEY = 9
    YELLOW_KEY = 10
    GREEN_KEY = 11
    BLUE_KEY = 12
    BATTERY = 13
    LEVER = 14
    TOGGLE_DOOR = 15
    INVERSE_TOGGLE_DOOR = 16
    A_DOOR = 17
    B_DOOR = 18
    C_DOOR = 19
    A_BOX = 20
    B_BOX = 21
    C_BOX = 22
    DRONE = 23
    BIG_DOOR = 24
    PORTAL = 25
    MAP = 26
    GUN = 27


class DoorItems(NamedTuple):
    one_time_item: Optional[MazeObject] = None  # consumed by a single door
    reuse_item: Optional[MazeObject] = None  # placed once, opens every door of the type


# Doors chained by the main path generator. Inverse toggle doors get their own pass.
ALL_MAIN_DOORS: List[MazeObject] = [
    MazeObject.RED_DOOR,
    MazeObject.YELLOW_DOOR,
    MazeObject.GREEN_DOOR,
    MazeObject.BLUE_DOOR,
    MazeObject.TOGGLE_DOOR,
    MazeObject.A_DOOR,
    MazeObject.B_DOOR,
    MazeObject.C_DOOR,
]

DOOR_ITEMS: Dict[MazeObject, DoorItems] = {
    MazeObject.RED_DOOR: DoorItems(one_time_item=MazeObject.RED_KEY),
    MazeObject.YELLOW_DOOR: DoorItems(one_time_item=MazeObject.YELLOW_KEY),
    MazeObject.GREEN_DOOR: DoorItems(one_time_item=MazeObject.GREEN_KEY),
    MazeObject.BLUE_DOOR: DoorItems(one_time_item=MazeObject.BLUE_KEY),
    MazeObject.TOGGLE_DOOR: DoorItems(reuse_item=MazeObject.LEVER),
    MazeObject.A_DOOR: DoorItems(one_time_item=MazeObject.BATTERY, reuse_item=MazeObject.A_BOX),
    MazeObject.B_DOOR: DoorItems(one_time_item=MazeObject.BATTERY, reuse_item=MazeObject.B_BOX),
    MazeObject.C_DOOR: DoorItems(one_time_item=MazeObject.BATTERY, reuse_item=MazeObject.C_BOX),
}

# Items whose ancestor chains make up the main path
ITEM_OBJECTS = frozenset(
    {
        MazeObject.RED_KEY,
        MazeObject.YELLOW_KEY,
        MazeObject.GREEN_KEY,
        MazeObject.BLUE_KEY,
        MazeObject.LEVER,
        MazeObject.BATTERY,
        MazeObject.A_BOX,
        MazeObject.B_BOX,
        MazeObject.C_BOX,
    }
)

COLORED_DOORS = frozenset(
    {MazeObject.RED_DOOR, MazeObject.YELLOW_DOOR, MazeObject.GREEN_DOOR, MazeObject.BLUE_DOOR}
)

CHAR_TO_OBJECT: Dict[str, MazeObject] = {
    " ": MazeObject.EMPTY,
    "S": MazeObject.PLAYER,
    "#": MazeObject.WALL,
    "@": MazeObject.ROCK,
    "*": MazeObject.ENERGY,
    "R": MazeObject.RED_DOOR,
    "Y": MazeObject.YELLOW_DOOR,
    "G": MazeObject.GREEN_DOOR,
    "L": MazeObject.BLUE_DOOR,
    "r": MazeObject.RED_KEY,
    "y": MazeObject.YELLOW_KEY,
    "g": MazeObject.GREEN_KEY,
    "l": MazeObject.BLUE_KEY,
    ":": MazeObject.BATTERY,
    "/": MazeObject.LEVER,
    "t": MazeObject.TOGGLE_DOOR,
    "T": MazeObject.INVERSE_TOGGLE_DOOR,
    "A": MazeObject.A_DOOR,
    "B": MazeObject.B_DOOR,
    "C": MazeObject.C_DOOR,
    "a": MazeObject.A_BOX,
    "b": MazeObject.B_BOX,
    "c": MazeObject.C_BOX,
    "d": MazeObject.DRONE,
    "n": MazeObject.BIG_DOOR,
    "P": MazeObject.PORTAL,
    "m": MazeObject.MAP,
    "%": MazeObject.GUN,
}

OBJECT_TO_CHAR: Dict[MazeObject, str] = {obj: ch for ch, obj in CHAR_TO_OBJECT.items()}

Grid = List[List[MazeObject]]


def string_to_maze(text: str) -> Grid:
    """Parse level text into a rectangular grid of maze objects."""
    lines = re.split(r"\r?\n", text)
    max_length = max(len(line) for line in lines)

    result: Grid = []
    for line in lines:
        row = [CHAR_TO_OBJECT.get(ch, MazeObject.EMPTY) for ch in line]
        row.extend([MazeObject.EMPTY] * (max_length - len(row)))
        result.append(row)
    return result


def maze_to_string(grid: Grid) -> str:
    return "\n".join("".join(OBJECT_TO_CHAR[MazeObject(cell)] for cell in row) for row in grid)


def find_object(grid: Grid, obj: MazeObject) -> Optional[tuple[int, int]]:
    """Return the first (row, col) holding ``obj`` scanning row-major, else None."""
    for r, row in enumerate(grid):
        for c, cell in enumerate(row):
            if cell == obj:
                return r, c
    return None


def is_door_cell(row: int, column: int) -> bool:
    """Doors live on passage cells; odd/odd coordinates are room vertices."""
    return not (row % 2 != 0 and column % 2 != 0)


__all__ = [
    "MazeObject",
    "DoorItems",
    "ALL_MAIN_DOORS",
    "DOOR_ITEMS",
    "ITEM_OBJECTS",
    "COLORED_DOORS",
    "CHAR_TO_OBJECT",
    "OBJECT_TO_CHAR",
    "Grid",
    "string_to_maze",
    "maze_to_string",
    "find_object",
    "is_door_cell",
]
