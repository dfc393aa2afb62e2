import random
from collections import Counter

import pytest

from labyrinth.maze.errors import ExhaustedRetries
from labyrinth.maze.main_path import MAX_RANDOM_PARENT, MIN_ABSOLUTE_DEPTH, MainPathGenerator
from labyrinth.maze.objects import ALL_MAIN_DOORS, DOOR_ITEMS, MazeObject, is_door_cell
from labyrinth.maze.tree import is_parent_of, iter_nodes
from maze_test_utils import carved_tree, chain

O = MazeObject
SEEDS = [3, 17, 101, 2024]


def _place(seed):
    root, rng = carved_tree(seed)
    gen = MainPathGenerator(root, rng, max_attempts=2000)
    gen.generate_main_path()
    return root, gen


def test_min_absolute_depth_leaves_room_for_parent_walk():
    assert MIN_ABSOLUTE_DEPTH == 2 + MAX_RANDOM_PARENT == 9


@pytest.mark.structure
@pytest.mark.parametrize("seed", SEEDS)
def test_every_main_door_placed_once(seed):
    root, gen = _place(seed)
    counts = Counter(n.object for n in iter_nodes(root))
    for door in ALL_MAIN_DOORS:
        assert counts[door] == 1, door
    assert counts[O.INVERSE_TOGGLE_DOOR] == 0
    assert not gen.doors_left
    assert gen.attempts >= 1


@pytest.mark.structure
@pytest.mark.parametrize("seed", SEEDS)
def test_items_match_doors(seed):
    root, _ = _place(seed)
    counts = Counter(n.object for n in iter_nodes(root))
    for key in (O.RED_KEY, O.YELLOW_KEY, O.GREEN_KEY, O.BLUE_KEY):
        assert counts[key] == 1
    # Reusable items exist once, one battery per electric door
    for reuse in (O.LEVER, O.A_BOX, O.B_BOX, O.C_BOX):
        assert counts[reuse] == 1
    assert counts[O.BATTERY] == 3


@pytest.mark.structure
@pytest.mark.parametrize("seed", SEEDS)
def test_items_never_behind_their_own_door(seed):
    root, _ = _place(seed)
    nodes = list(iter_nodes(root))
    for door in (n for n in nodes if n.object in DOOR_ITEMS):
        needed = [i for i in DOOR_ITEMS[door.object] if i is not None]
        for item in needed:
            outside = [n for n in nodes if n.object == item and not is_parent_of(door, n)]
            assert outside, f"{item.name} only behind {door.object.name}"


@pytest.mark.structure
@pytest.mark.parametrize("seed", SEEDS)
def test_doors_on_passage_cells_and_items_deep(seed):
    root, _ = _place(seed)
    for node in iter_nodes(root):
        if node.object in DOOR_ITEMS:
            assert is_door_cell(node.row, node.column)
        elif node.object != O.EMPTY:
            assert node.absolute_depth >= MIN_ABSOLUTE_DEPTH


def test_same_seed_same_placement():
    a, _ = _place(55)
    b, _ = _place(55)
    assert [(n.position, n.object) for n in iter_nodes(a)] == [(n.position, n.object) for n in iter_nodes(b)]


def test_exhausted_retries_on_tiny_tree():
    nodes = chain(12)
    gen = MainPathGenerator(nodes[0], random.Random(1), max_attempts=3)
    with pytest.raises(ExhaustedRetries) as exc:
        gen.generate_main_path()
    assert exc.value.attempts == 3
    assert gen.attempts == 3


def test_reset_clears_previous_objects():
    root, gen = _place(7)
    gen.reset_algorithm()
    assert all(n.object == O.EMPTY for n in iter_nodes(root))
    assert len(gen.doors_left) == len(ALL_MAIN_DOORS)
    assert len(gen.hist) == sum(1 for _ in iter_nodes(root))


def test_compute_items_needed_adds_reuse_item_once():
    nodes = chain(3)
    gen = MainPathGenerator(nodes[0], random.Random(0))
    gen.compute_items_needed(O.A_DOOR)
    gen.compute_items_needed(O.A_DOOR)
    gen.compute_items_needed(O.TOGGLE_DOOR)
    gen.compute_items_needed(O.RED_DOOR)
    assert gen.items_needed == [O.BATTERY, O.A_BOX, O.BATTERY, O.LEVER, O.RED_KEY]


def test_parent_door_location_walks_up():
    nodes = chain(20)
    gen = MainPathGenerator(nodes[0], random.Random(4))
    gen.reset_algorithm()
    for _ in range(20):
        spot = gen.pick_random_parent_door_location(nodes[15])
        assert spot in nodes[8:13]


def test_parent_door_location_past_root_is_none():
    nodes = chain(4)
    gen = MainPathGenerator(nodes[0], random.Random(4))
    gen.reset_algorithm()
    assert gen.pick_random_parent_door_location(nodes[2]) is None
