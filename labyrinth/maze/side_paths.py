"""Optional side content hung off branches the main path never touches.

Each side door gets an energy orb somewhere behind it. Doors whose one-time
item is not already covered by the main path also get that item dropped on a
main path node, so the maze stays solvable.
"""
from __future__ import annotations

import random
from typing import Dict, Optional

from ..logging_utils import get_logger
from .objects import ALL_MAIN_DOORS, COLORED_DOORS, DOOR_ITEMS, ITEM_OBJECTS, MazeObject, is_door_cell
from .sets import HistogramSet, VertexSet
from .tree import TreeNode, is_parent_of, iter_nodes

WINDOW_SIZE = 2
# Side doors need at least this many ancestors
MIN_ABSOLUTE_DEPTH = 2

log = get_logger("labyrinth.maze.side_paths")


class SidePathsGenerator:
    def __init__(self, root: TreeNode, rng: random.Random):
        self.root = root
        self.rng = rng

        self.main_nodes = HistogramSet(rng)
        self.side_node_doors = HistogramSet(rng)  # door candidates only
        self.min_depth = 0
        # Main path colored door of each color
        self.colored_door: Dict[MazeObject, TreeNode] = {}
        self.doors_placed = 0

    def generate_side_paths(self) -> None:
        """Place the side doors, mutating the tree nodes. Call once per tree."""
        self.main_nodes = HistogramSet(self.rng)
        self.side_node_doors = HistogramSet(self.rng, self.root)
        self.colored_door = {}
        self.doors_placed = 0

        self.process_item_nodes()
        self.min_depth = max(0, self.side_node_doors.highest_depth - WINDOW_SIZE // 2)

        while True:
            self.add_single_random_door()
            self.shift_min_depth()
            if self.min_depth <= 0:
                break
        log.debug(event="side_paths_placed", doors=self.doors_placed)

    def process_item_nodes(self) -> None:
        """Split the tree into main path nodes and side door candidates."""
        for node in iter_nodes(self.root):
            # The main path is every item node plus all of its parents
            if node.object in ITEM_OBJECTS:
                self.main_nodes.add_parents(node)
                self.side_node_doors.remove_parents(node)
            # Only one of each colored door exists on the main path
            if node.object in COLORED_DOORS:
                self.colored_door[node.object] = node

        for node in self.main_nodes.get_all_nodes():
            if node.object != MazeObject.EMPTY:
                self.main_nodes.remove(node)

        for node in self.side_node_doors.get_all_nodes():
            if node.object != MazeObject.EMPTY or not is_door_cell(node.row, node.column):
                self.side_node_doors.remove(node)

    def add_single_random_door(self) -> None:
        # 1. Random door type
        door_type = self.rng.choice(ALL_MAIN_DOORS)

        # 2. Random location, with an energy orb behind it
        door_location = self.pick_random_door_location(self.colored_door.get(door_type))
        if door_location is None:
            return
        self.side_node_doors.remove_recursive(door_location)
        door_location.object = door_type
        energy = self.put_energy_behind(door_location)

        # 3. Reusable items were all placed by the main path
        items = DOOR_ITEMS[door_type]
        if items.one_time_item is None or items.reuse_item is not None:
            self.doors_placed += 1
            return

        # 4. One-time item somewhere on the main path, or undo the door
        item_location = self.main_nodes.pick_random(0, self.main_nodes.highest_depth)
        if item_location is None:
            door_location.object = MazeObject.EMPTY
            if energy is not None:
                energy.object = MazeObject.EMPTY
            return
        item_location.object = items.one_time_item
        self.main_nodes.remove(item_location)
        self.doors_placed += 1

    def pick_random_door_location(self, parent: Optional[TreeNode] = None) -> Optional[TreeNode]:
        """Random side door spot inside the current window.

        When ``parent`` is given the spot must lie behind it: a colored side door
        hangs below the main door of the same color, otherwise the main key could
        be spent on the side door and lock the player out.
        """
        allowed = VertexSet(self.rng)
        allowed.add_all(
            self.side_node_doors.get_all_nodes_by(self.min_depth, self.min_depth + WINDOW_SIZE, MIN_ABSOLUTE_DEPTH)
        )
        if parent is not None:
            for node in allowed.get_all_nodes():
                if not is_parent_of(parent, node):
                    allowed.remove(node)
        return allowed.pick_any_random()

    def shift_min_depth(self) -> None:
        self.min_depth = max(0, self.min_depth - 1)

    def put_energy_behind(self, door_node: TreeNode) -> Optional[TreeNode]:
        """Add an energy orb to a random empty spot behind the door."""
        available = VertexSet(self.rng, door_node)
        available.remove(door_node)
        for node in available.get_all_nodes():
            if node.object != MazeObject.EMPTY:
                # Never share a room with another door's reward
                available.remove_recursive(node)

        location = available.pick_any_random()
        if location is not None:
            location.object = MazeObject.ENERGY
        return location


__all__ = ["SidePathsGenerator", "WINDOW_SIZE"]
