"""Wall carving: a perfect maze with a walled-off hole for the center template.

Grid layout for width=3, height=2 (``#`` wall, ``.`` room vertex, ``|``/``-``
passages that may be opened)::

    #######
    #.|.|.#
    #-#-#-#
    #.|.|.#
    #######
"""
from __future__ import annotations

import random
from typing import Callable, Dict, List, NamedTuple, Sequence, TypeVar

T = TypeVar("T")


class Vertex(NamedTuple):
    row: int
    col: int


def is_adjacent(a: Vertex, b: Vertex) -> bool:
    return abs(b.row - a.row) + abs(b.col - a.col) == 2


def template_offset(total: int, template: int) -> int:
    """First row/column of a centered template; even templates shift by one."""
    return (total - template) // 2 + (1 if template % 2 == 0 else 0)


def generate_perfect_maze(
    nodes: Sequence[T],
    adjacent: Callable[[T, T], bool],
    choose: Callable[[Sequence[T]], T],
) -> Dict[T, List[T]]:
    """Randomized depth-first spanning tree over ``nodes``.

    Returns an adjacency map holding only the tree edges. An empty node list
    yields an empty map.
    """
    maze: Dict[T, List[T]] = {n: [] for n in nodes}
    if not nodes:
        return maze

    start = choose(nodes)
    visited = {start}
    stack = [start]
    while stack:
        node = stack[-1]
        neighbors = [other for other in nodes if other not in visited and adjacent(node, other)]
        if neighbors:
            neighbor = choose(neighbors)
            maze[node].append(neighbor)
            maze[neighbor].append(node)
            visited.add(neighbor)
            stack.append(neighbor)
        else:
            stack.pop()
    return maze


class MazeWallsGenerator:
    """Generates just the walls of the maze.

    ``width``/``height`` count room vertices, not cells; the template size is
    in cells.
    """

    def __init__(self, width: int, height: int, center_width: int, center_height: int, rng: random.Random):
        self.width = width * 2 + 1
        self.height = height * 2 + 1
        self.center_width = center_width
        self.center_height = center_height
        self.rng = rng
        self.walls: List[List[bool]] = []
        self.passages_opened = 0
        self.vertex_count = 0

    def generate_random_maze(self) -> List[List[bool]]:
        self.walls = [[True] * self.width for _ in range(self.height)]
        self.passages_opened = 0

        self._chisel_holes()
        self._fill_center_template()

        vertices = self._get_all_vertices()
        self.vertex_count = len(vertices)
        maze = generate_perfect_maze(vertices, is_adjacent, self.rng.choice)
        self._place_vertex_walls(maze)
        return self.walls

    def _chisel_holes(self) -> None:
        for row in range(1, self.height - 1, 2):
            for col in range(1, self.width - 1, 2):
                self.walls[row][col] = False

    def _fill_center_template(self) -> None:
        # Even-sized templates shift by one and get an extra row/column of walls
        top_row = template_offset(self.height, self.center_height)
        bottom_row = top_row + self.center_height + (1 if self.center_height % 2 == 0 else 0)
        left_col = template_offset(self.width, self.center_width)
        right_col = left_col + self.center_width + (1 if self.center_width % 2 == 0 else 0)

        for row in range(max(0, top_row), min(self.height, bottom_row)):
            for col in range(max(0, left_col), min(self.width, right_col)):
                self.walls[row][col] = True

    def _get_all_vertices(self) -> List[Vertex]:
        return [
            Vertex(row, col)
            for row in range(1, self.height - 1)
            for col in range(1, self.width - 1)
            if not self.walls[row][col]
        ]

    def _place_vertex_walls(self, maze: Dict[Vertex, List[Vertex]]) -> None:
        for node, neighbors in maze.items():
            for neighbor in neighbors:
                mid_row = (node.row + neighbor.row) // 2
                mid_col = (node.col + neighbor.col) // 2
                if self.walls[mid_row][mid_col]:
                    self.walls[mid_row][mid_col] = False
                    self.passages_opened += 1


__all__ = ["Vertex", "is_adjacent", "template_offset", "generate_perfect_maze", "MazeWallsGenerator"]
