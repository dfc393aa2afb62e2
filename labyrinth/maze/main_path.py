"""Main path placement: every main door chained behind the items that open it.

The algorithm works backwards from the deepest part of the tree. A door is
dropped inside a sliding depth window, its subtree sealed off, and the items
it needs are scattered over what is still available. One of those items then
gets the next door a few parents closer to the root, and so on until every
door type is used. A stall anywhere throws the whole attempt away and the
tree is reset for a fresh try.
"""
from __future__ import annotations

import random
from typing import List, Optional, Set

from ..logging_utils import get_logger
from .errors import ExhaustedRetries
from .objects import ALL_MAIN_DOORS, DOOR_ITEMS, MazeObject, is_door_cell
from .sets import HistogramSet
from .tree import TreeNode, iter_nodes

WINDOW_SIZE = 5
MIN_RANDOM_PARENT = 3
MAX_RANDOM_PARENT = 7
# Items and doors need this many ancestors so the parent walk stays in the tree
MIN_ABSOLUTE_DEPTH = 2 + MAX_RANDOM_PARENT

log = get_logger("labyrinth.maze.main_path")


class MainPathGenerator:
    def __init__(
        self,
        root: TreeNode,
        rng: random.Random,
        max_attempts: Optional[int] = None,
        widen_window: bool = True,
    ):
        self.root = root
        self.rng = rng
        self.max_attempts = max_attempts
        self.widen_window = widen_window
        self.attempts = 0

        self.hist: HistogramSet = HistogramSet(rng)
        self.min_depth = 0
        self.doors_left: List[MazeObject] = []
        self.items_needed: List[MazeObject] = []
        self.items_reused: Set[MazeObject] = set()

    def generate_main_path(self) -> None:
        """Place the main path, mutating the tree nodes. Call once per tree."""
        self.attempts = 0
        while True:
            if self.max_attempts is not None and self.attempts >= self.max_attempts:
                log.warn(event="main_path_exhausted", attempts=self.attempts)
                raise ExhaustedRetries(self.attempts)
            self.attempts += 1
            self.reset_algorithm()
            self.run_algorithm_once()
            if not self.doors_left:
                break
            log.debug(event="main_path_retry", attempt=self.attempts, doors_left=len(self.doors_left))
        log.debug(event="main_path_placed", attempts=self.attempts)

    def reset_algorithm(self) -> None:
        for node in iter_nodes(self.root):
            node.object = MazeObject.EMPTY
        self.hist = HistogramSet(self.rng, self.root)
        self.min_depth = max(0, self.hist.highest_depth - WINDOW_SIZE // 2)

        self.doors_left = list(ALL_MAIN_DOORS)
        self.items_needed = []
        self.items_reused = set()

    def run_algorithm_once(self) -> None:
        """Attempt the placement once; leaves ``doors_left`` non-empty on a stall."""
        # 1. Random location for the first door
        door_location = self.pick_random_door_location()
        if door_location is None:
            return
        self.hist.remove_recursive(door_location)
        self.shift_min_depth()

        # 2. Random door type, 3. and the items that open it
        door = self._take_random_door()
        door_location.object = door
        self.compute_items_needed(door)

        # 4. Keep adding items and doors until no doors are left
        while self.items_needed:
            needed = self.items_needed
            self.items_needed = []

            # With several items, a random one gets the next door
            door_index = self.rng.randint(0, len(needed) - 1)
            door_item_node: Optional[TreeNode] = None

            # 5. Place every item, or undo the last door and give up
            for item_index, item in enumerate(needed):
                item_location = self.pick_random_item_location()
                if item_location is None:
                    door_location.object = MazeObject.EMPTY
                    self.doors_left.append(door)
                    return

                item_location.object = item
                self.hist.remove_recursive(item_location)
                if item_index == door_index:
                    door_item_node = item_location

            # 6. Put the next door a few parents above the chosen item
            if self.doors_left:
                door_location = self.pick_random_parent_door_location(door_item_node)
                if door_location is None:
                    return
                self.hist.remove_recursive(door_location)

                door = self._take_random_door()
                door_location.object = door
                self.compute_items_needed(door)

            self.shift_min_depth()

    def _take_random_door(self) -> MazeObject:
        door = self.rng.choice(self.doors_left)
        self.doors_left.remove(door)
        return door

    def _pick_in_window(self) -> Optional[TreeNode]:
        location = self.hist.pick_random(self.min_depth, self.min_depth + WINDOW_SIZE, MIN_ABSOLUTE_DEPTH)
        if location is None and self.widen_window:
            # Window exhausted: anything between the root and the window qualifies
            location = self.hist.pick_random(0, self.min_depth + WINDOW_SIZE, MIN_ABSOLUTE_DEPTH)
        return location

    def pick_random_door_location(self) -> Optional[TreeNode]:
        location = self._pick_in_window()
        if location is None:
            return None
        if not is_door_cell(location.row, location.column):
            return location.parent
        return location

    def pick_random_parent_door_location(self, item: TreeNode) -> Optional[TreeNode]:
        """Travel a random number of parents back from ``item`` to find a door spot.

        Returns None when the spot is no longer free, e.g. an item placed in the
        same round already sits there.
        """
        parents_to_travel = self.rng.randint(MIN_RANDOM_PARENT, MAX_RANDOM_PARENT)

        location: Optional[TreeNode] = item
        for _ in range(parents_to_travel):
            if location is None:
                return None
            location = location.parent
        if location is not None and not is_door_cell(location.row, location.column):
            location = location.parent
        if location is None or not self.hist.has_node(location):
            return None
        return location

    def pick_random_item_location(self) -> Optional[TreeNode]:
        return self._pick_in_window()

    def shift_min_depth(self) -> None:
        """Slide the window toward the root so items spread over the whole maze."""
        self.min_depth = max(0, self.min_depth - 1)

    def compute_items_needed(self, door: MazeObject) -> None:
        items = DOOR_ITEMS[door]
        if items.one_time_item is not None:
            self.items_needed.append(items.one_time_item)
        if items.reuse_item is not None and items.reuse_item not in self.items_reused:
            self.items_needed.append(items.reuse_item)
            self.items_reused.add(items.reuse_item)


__all__ = [
    "MainPathGenerator",
    "WINDOW_SIZE",
    "MIN_RANDOM_PARENT",
    "MAX_RANDOM_PARENT",
    "MIN_ABSOLUTE_DEPTH",
]
