"""Inverse toggle doors: open exactly when the regular toggle doors are closed.

They must never sit between the lever and a regular toggle door, otherwise
that stretch could be walked without ever pulling the lever.
"""
from __future__ import annotations

import random
from typing import List, Optional

from ..logging_utils import get_logger
from .objects import MazeObject, is_door_cell
from .sets import HistogramSet
from .tree import TreeNode, find_path_between, iter_nodes

log = get_logger("labyrinth.maze.inverse_toggle")


class InverseToggleGenerator:
    def __init__(self, root: TreeNode, rng: random.Random):
        self.root = root
        self.rng = rng
        self.lever: Optional[TreeNode] = None
        self.regular_toggle_doors: List[TreeNode] = []
        self.allowed_spots = HistogramSet(rng)
        self.doors_placed = 0

    def generate_inverse_toggle_doors(self) -> None:
        self.find_toggle_doors()
        self.doors_placed = 0
        if self.lever is None:
            return
        self.allowed_spots = HistogramSet(self.rng, self.root)

        for toggle_door in self.regular_toggle_doors:
            self.allowed_spots.remove_all(find_path_between(toggle_door, self.lever))

        for spot in self.allowed_spots.get_all_nodes():
            if not is_door_cell(spot.row, spot.column) or spot.object != MazeObject.EMPTY:
                self.allowed_spots.remove(spot)

        # One inverse door per regular toggle door, while spots last
        for _ in range(len(self.regular_toggle_doors)):
            location = self.allowed_spots.pick_any_random()
            if location is None:
                break
            self.allowed_spots.remove(location)
            location.object = MazeObject.INVERSE_TOGGLE_DOOR
            self.doors_placed += 1
        log.debug(event="inverse_toggles_placed", doors=self.doors_placed)

    def find_toggle_doors(self) -> None:
        self.lever = None
        self.regular_toggle_doors = []
        for node in iter_nodes(self.root):
            if node.object == MazeObject.LEVER:
                self.lever = node
            elif node.object == MazeObject.TOGGLE_DOOR:
                self.regular_toggle_doors.append(node)


__all__ = ["InverseToggleGenerator"]
