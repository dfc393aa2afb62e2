"""Vertex sets over a maze tree.

Two concrete shapes share one interface: ``VertexSet`` is a flat set and
``HistogramSet`` buckets nodes by depth so placement passes can sample inside a
depth window. Both keep insertion order so a seeded generator is repeatable.
"""
from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Iterator, List, Optional

from .tree import TreeNode


class AbstractSet(ABC):
    """Base class for all of the vertex sets."""

    @abstractmethod
    def has_node(self, node: TreeNode) -> bool:
        ...

    @abstractmethod
    def add(self, node: TreeNode) -> None:
        """Add a single node, but not its children."""

    @abstractmethod
    def remove(self, node: TreeNode) -> None:
        """Remove a single node, but not its children. Missing nodes are ignored."""

    @abstractmethod
    def get_all_nodes(self) -> List[TreeNode]:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    def __contains__(self, node: object) -> bool:
        return isinstance(node, TreeNode) and self.has_node(node)

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(self.get_all_nodes())

    @property
    def size(self) -> int:
        return len(self)

    def add_all(self, nodes: Iterable[TreeNode]) -> None:
        for node in nodes:
            self.add(node)

    def add_recursive(self, node: TreeNode) -> None:
        """Add the node and all of its children."""
        stack = [node]
        while stack:
            current = stack.pop()
            self.add(current)
            stack.extend(reversed(current.children))

    def add_parents(self, node: TreeNode) -> None:
        """Add the node and all of its parents."""
        current: Optional[TreeNode] = node
        while current is not None:
            self.add(current)
            current = current.parent

    def remove_all(self, nodes: Iterable[TreeNode]) -> None:
        for node in list(nodes):
            self.remove(node)

    def remove_recursive(self, node: TreeNode) -> None:
        """Remove the node and all of its children."""
        stack = [node]
        while stack:
            current = stack.pop()
            self.remove(current)
            stack.extend(current.children)

    def remove_parents(self, node: TreeNode) -> None:
        """Remove the node and all of its parents."""
        current: Optional[TreeNode] = node
        while current is not None:
            self.remove(current)
            current = current.parent


class VertexSet(AbstractSet):
    """Flat set of tree nodes."""

    def __init__(self, rng: random.Random, root: Optional[TreeNode] = None):
        self.rng = rng
        self._nodes: Dict[TreeNode, None] = {}
        if root is not None:
            self.add_recursive(root)

    def has_node(self, node: TreeNode) -> bool:
        return node in self._nodes

    def add(self, node: TreeNode) -> None:
        self._nodes[node] = None

    def remove(self, node: TreeNode) -> None:
        self._nodes.pop(node, None)

    def get_all_nodes(self) -> List[TreeNode]:
        return list(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def pick_any_random(self) -> Optional[TreeNode]:
        nodes = self.get_all_nodes()
        if not nodes:
            return None
        return self.rng.choice(nodes)


class HistogramSet(AbstractSet):
    """Stores tree nodes bucketed by depth.

    ``highest_depth`` is a high-water mark: it only grows on ``add`` and is left
    untouched by removals, so it does not guarantee a node exists at that depth.
    The sliding windows of the path generators start from it.
    """

    def __init__(self, rng: random.Random, root: Optional[TreeNode] = None):
        self.rng = rng
        self._buckets: Dict[int, Dict[TreeNode, None]] = {}
        self._highest = 0
        if root is not None:
            self.add_recursive(root)

    @property
    def highest_depth(self) -> int:
        return self._highest

    def has_node(self, node: TreeNode) -> bool:
        bucket = self._buckets.get(node.depth)
        return bucket is not None and node in bucket

    def add(self, node: TreeNode) -> None:
        self._buckets.setdefault(node.depth, {})[node] = None
        self._highest = max(self._highest, node.depth)

    def remove(self, node: TreeNode) -> None:
        bucket = self._buckets.get(node.depth)
        if bucket is not None:
            bucket.pop(node, None)

    def get_all_nodes(self) -> List[TreeNode]:
        return [node for bucket in self._buckets.values() for node in bucket]

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def get_all_nodes_by(self, min_depth: int, max_depth: int, min_absolute_depth: int = 0) -> List[TreeNode]:
        """All nodes with ``min_depth <= depth <= max_depth`` and enough ancestors."""
        nodes = []
        for depth in range(min_depth, max_depth + 1):
            bucket = self._buckets.get(depth)
            if not bucket:
                continue
            nodes.extend(node for node in bucket if node.absolute_depth >= min_absolute_depth)
        return nodes

    def pick_random(self, min_depth: int, max_depth: int, min_absolute_depth: int = 0) -> Optional[TreeNode]:
        """Pick (without removing) a random node with ``min_depth <= depth <= max_depth``.

        Candidates are probed linearly from a random start index, wrapping once,
        until one has ``absolute_depth >= min_absolute_depth``.
        """
        candidates: List[TreeNode] = []
        for depth in range(min_depth, max_depth + 1):
            bucket = self._buckets.get(depth)
            if bucket:
                candidates.extend(bucket)
        if not candidates:
            return None

        start = self.rng.randint(0, len(candidates) - 1)
        index = start
        while True:
            node = candidates[index]
            if node.absolute_depth >= min_absolute_depth:
                return node
            index = (index + 1) % len(candidates)
            if index == start:
                return None

    def pick_any_random(self) -> Optional[TreeNode]:
        nodes = self.get_all_nodes()
        if not nodes:
            return None
        return self.rng.choice(nodes)


__all__ = ["AbstractSet", "VertexSet", "HistogramSet"]
