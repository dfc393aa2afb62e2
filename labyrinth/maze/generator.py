"""Procedural maze generation pipeline.

Phases, in order:
    * Carve a perfect maze, keeping a walled hole for the center template.
    * Root a tree of floor cells just outside the template's big door.
    * Main path: every main door chained behind the items that open it.
    * Side paths: optional doors with an energy orb behind each.
    * Inverse toggle doors, kept off the lever/toggle door paths.
    * Filler: energy, drones and rocks on whatever is still empty.
    * Materialize walls, template and tree objects into one grid.
"""
from __future__ import annotations

import random
import time
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..logging_utils import get_logger
from .config import MazeConfig
from .inverse_toggle import InverseToggleGenerator
from .main_path import MIN_ABSOLUTE_DEPTH, MainPathGenerator
from .metrics import init_metrics
from .objects import ALL_MAIN_DOORS, Grid, MazeObject
from .sets import HistogramSet
from .side_paths import SidePathsGenerator
from .templates import default_template
from .tree import TreeNode, build_tree_nodes, iter_nodes
from .walls import MazeWallsGenerator, template_offset

log = get_logger("labyrinth.maze")


class MazeGenerator:
    def __init__(
        self,
        width: int,
        height: int,
        center_template: Sequence[Sequence[MazeObject]],
        config: MazeConfig | None = None,
    ):
        self.config = replace(config or MazeConfig(), width=width, height=height)
        if self.config.seed is None:
            self.config.seed = random.randint(0, 2**31 - 1)
        # Local RNG so outside random usage does not affect generation
        self.rng = random.Random(self.config.seed)
        self.seed = self.config.seed
        self.log = log.bind(seed=self.seed)

        self.width = width
        self.height = height
        self.center_template: Grid = [[MazeObject(cell) for cell in row] for row in center_template]
        self._validate()

        self.root: Optional[TreeNode] = None
        self.walls: List[List[bool]] = []
        self.metrics: Dict[str, Any] = init_metrics() if self.config.enable_metrics else {}

    def _validate(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("width and height must be positive")
        if not self.center_template or not self.center_template[0]:
            raise ValueError("center template must not be empty")
        if any(len(row) != self.template_width for row in self.center_template):
            raise ValueError("center template rows must all have the same length")
        if self.template_width > self.grid_width or self.template_height > self.grid_height:
            raise ValueError(
                f"center template {self.template_width}x{self.template_height} does not fit "
                f"in a {self.grid_width}x{self.grid_height} maze"
            )

    @property
    def template_width(self) -> int:
        return len(self.center_template[0])

    @property
    def template_height(self) -> int:
        return len(self.center_template)

    @property
    def grid_width(self) -> int:
        return 2 * self.width + 1

    @property
    def grid_height(self) -> int:
        return 2 * self.height + 1

    def template_top_row(self) -> int:
        return template_offset(self.grid_height, self.template_height)

    def template_left_column(self) -> int:
        return template_offset(self.grid_width, self.template_width)

    def generate_maze(self) -> Grid:
        """Run every phase and return the finished grid of cell codes."""
        phase_times: Dict[str, int] = {}
        start = time.perf_counter()

        def _phase(label: str, fn: Callable, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            self.log.debug(event="maze_phase", phase=label, ms=phase_times[label])
            return r

        walls_gen = MazeWallsGenerator(self.width, self.height, self.template_width, self.template_height, self.rng)
        self.walls = _phase("walls", walls_gen.generate_random_maze)

        root_row, root_col = self.get_root_position()
        if not (0 <= root_row < self.grid_height and 0 <= root_col < self.grid_width):
            self.log.warn(event="maze_paths_skipped", reason="root_outside_grid")
            self.root = None
        else:
            self.root = _phase("tree", build_tree_nodes, self.walls, root_row, root_col)

        counts: Dict[str, int] = {}
        paths_placed = self.root is not None and self._can_host_main_path(self.root)
        if paths_placed:
            main = MainPathGenerator(self.root, self.rng, max_attempts=self.config.max_attempts)
            _phase("main_path", main.generate_main_path)
            counts["attempts"] = main.attempts
            counts["doors_main"] = len(ALL_MAIN_DOORS) - len(main.doors_left)

            side = SidePathsGenerator(self.root, self.rng)
            _phase("side_paths", side.generate_side_paths)
            counts["doors_side"] = side.doors_placed

            inverse = InverseToggleGenerator(self.root, self.rng)
            _phase("inverse_toggles", inverse.generate_inverse_toggle_doors)
            counts["doors_inverse"] = inverse.doors_placed

            counts.update(_phase("filler", self._add_filler, self.root))
        elif self.root is not None:
            self.log.warn(event="maze_paths_skipped", reason="tree_too_shallow")
        objects = _phase("materialize", self._materialize, paths_placed)

        if self.config.enable_metrics:
            self.metrics.update(counts)
            self.metrics["tree_nodes"] = sum(1 for _ in iter_nodes(self.root)) if self.root is not None else 0
            self.metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
            self.metrics["phase_ms"] = phase_times
        self.log.info(
            event="maze_generated",
            width=self.width,
            height=self.height,
            attempts=counts.get("attempts", 0),
            runtime_ms=int((time.perf_counter() - start) * 1000),
        )
        return objects

    def get_root_position(self) -> tuple[int, int]:
        """Cell just outside the big door on the template perimeter.

        Perimeter order: top row, bottom row, left column, right column. Without
        a big door the root is the cell above the middle of the top row.
        """
        top_row = self.template_top_row()
        bottom_row = top_row + self.template_height - 1
        left_col = self.template_left_column()
        right_col = left_col + self.template_width - 1
        template = self.center_template
        big_door = MazeObject.BIG_DOOR

        for col in range(self.template_width):
            if template[0][col] == big_door:
                return top_row - 1, left_col + col
        for col in range(self.template_width):
            if template[-1][col] == big_door:
                return bottom_row + 1, left_col + col
        for row in range(self.template_height):
            if template[row][0] == big_door:
                return top_row + row, left_col - 1
        for row in range(self.template_height):
            if template[row][-1] == big_door:
                return top_row + row, right_col + 1
        return top_row - 1, left_col + self.template_width // 2

    @staticmethod
    def _can_host_main_path(root: TreeNode) -> bool:
        return any(node.depth >= MIN_ABSOLUTE_DEPTH for node in iter_nodes(root))

    def _add_filler(self, root: TreeNode) -> Dict[str, int]:
        """Energy first, then drones, then rocks on the leftover empty nodes."""
        empty_spots = HistogramSet(self.rng, root)
        for node in empty_spots.get_all_nodes():
            if node.object != MazeObject.EMPTY:
                empty_spots.remove(node)

        placed = {}
        for key, obj, amount in (
            ("energy", MazeObject.ENERGY, self.config.num_energy),
            ("drones", MazeObject.DRONE, self.config.num_drones),
            ("rocks", MazeObject.ROCK, self.config.num_rocks),
        ):
            count = 0
            for _ in range(amount):
                node = empty_spots.pick_any_random()
                if node is None:
                    break
                empty_spots.remove(node)
                node.object = obj
                count += 1
            placed[key] = count
        return placed

    def _materialize(self, write_tree: bool = True) -> Grid:
        objects: Grid = [[MazeObject.WALL if wall else MazeObject.EMPTY for wall in row] for row in self.walls]
        self._fill_template(objects)
        if write_tree and self.root is not None:
            for node in iter_nodes(self.root):
                objects[node.row][node.column] = node.object
        return objects

    def _fill_template(self, objects: Grid) -> None:
        top_row = self.template_top_row()
        left_col = self.template_left_column()
        for r, row in enumerate(self.center_template):
            for c, cell in enumerate(row):
                objects[top_row + r][left_col + c] = cell


def generate_maze(
    width: int,
    height: int,
    template: Optional[Sequence[Sequence[MazeObject]]] = None,
    config: MazeConfig | None = None,
) -> Grid:
    """One-shot helper: build a ``MazeGenerator`` and return its grid."""
    return MazeGenerator(width, height, template if template is not None else default_template(), config).generate_maze()


__all__ = ["MazeGenerator", "generate_maze"]
