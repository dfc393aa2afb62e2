"""Rooted tree over the traversable cells of a carved maze.

Every path pass (main path, side paths, inverse toggles) mutates ``object`` on
the nodes of the same tree; the final grid is written from it afterwards.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from .objects import MazeObject

# Up, Down, Left, Right
DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class TreeNode:
    """Single traversable cell in the maze tree."""

    __slots__ = ("row", "column", "object", "parent", "children", "depth")

    def __init__(self, row: int, column: int, parent: Optional["TreeNode"] = None):
        self.row = row
        self.column = column
        self.object = MazeObject.EMPTY
        self.parent = parent
        self.children: List[TreeNode] = []
        self.depth = 0 if parent is None else parent.depth + 1

    @property
    def absolute_depth(self) -> int:
        # Number of ancestors between this node and the root
        return self.depth

    @property
    def position(self) -> tuple[int, int]:
        return self.row, self.column

    def __repr__(self) -> str:
        return f"TreeNode(row={self.row}, column={self.column}, depth={self.depth}, object={self.object.name})"


def build_tree_nodes(maze: Sequence[Sequence[bool]], root_row: int, root_col: int) -> TreeNode:
    """Build the tree of floor cells reachable from ``(root_row, root_col)``.

    Steps one cell Up/Down/Left/Right, skipping walls, cells outside the grid and
    the parent cell. The root itself is not required to be floor: it may be the
    wall cell that opens into the center template. Cells already visited are
    skipped as well, so a grid with loops still yields a tree.
    """
    height = len(maze)
    width = len(maze[0]) if height else 0

    root = TreeNode(root_row, root_col)
    visited = {(root_row, root_col)}
    stack = [root]
    while stack:
        node = stack.pop()
        parent_pos = node.parent.position if node.parent is not None else None
        for dr, dc in DIRECTIONS:
            r, c = node.row + dr, node.column + dc
            if not (0 <= r < height and 0 <= c < width):
                continue
            if maze[r][c] or (r, c) == parent_pos or (r, c) in visited:
                continue
            visited.add((r, c))
            child = TreeNode(r, c, node)
            node.children.append(child)
        # Reverse so children are expanded in Up, Down, Left, Right order
        stack.extend(reversed(node.children))
    return root


def iter_nodes(root: TreeNode) -> Iterator[TreeNode]:
    """Pre-order walk of the subtree rooted at ``root``."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def ancestry(node: TreeNode) -> List[TreeNode]:
    """Return ``node`` followed by all of its parents up to the root."""
    chain = []
    current: Optional[TreeNode] = node
    while current is not None:
        chain.append(current)
        current = current.parent
    return chain


def is_parent_of(parent: TreeNode, node: TreeNode) -> bool:
    """True when ``parent`` is a strict ancestor of ``node``."""
    current = node.parent
    while current is not None:
        if current is parent:
            return True
        current = current.parent
    return False


def find_path_between(left: TreeNode, right: TreeNode) -> List[TreeNode]:
    """Nodes on the unique tree path between ``left`` and ``right``.

    Both root paths are built, their common prefix stripped, and the single
    shared pivot node appended to whatever remains.
    """
    left_heritage = list(reversed(ancestry(left)))
    right_heritage = list(reversed(ancestry(right)))

    shared = 0
    while (
        shared < len(left_heritage)
        and shared < len(right_heritage)
        and left_heritage[shared] is right_heritage[shared]
    ):
        shared += 1
    left_heritage = left_heritage[shared:]
    right_heritage = right_heritage[shared:]

    nodes = left_heritage + right_heritage
    if left_heritage:
        nodes.append(left_heritage[0].parent)
    elif right_heritage:
        nodes.append(right_heritage[0].parent)
    else:
        nodes.append(left)
    return nodes


__all__ = [
    "TreeNode",
    "build_tree_nodes",
    "iter_nodes",
    "ancestry",
    "is_parent_of",
    "find_path_between",
]
