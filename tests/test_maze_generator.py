import copy
from collections import Counter

import pytest

from labyrinth.maze import (
    ALL_MAIN_DOORS,
    MazeConfig,
    MazeGenerator,
    MazeObject,
    default_template,
    find_object,
    generate_maze,
    maze_to_string,
    string_to_maze,
)
from labyrinth.maze.walls import template_offset
from maze_test_utils import bfs_reachable

O = MazeObject


def _template_at(grid, template):
    top = template_offset(len(grid), len(template))
    left = template_offset(len(grid[0]), len(template[0]))
    return [row[left : left + len(template[0])] for row in grid[top : top + len(template)]]


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_empty_three_by_three_template_scenario(seed, make_config):
    template = [[O.EMPTY] * 3 for _ in range(3)]
    gen = MazeGenerator(13, 13, template, make_config(seed))
    grid = gen.generate_maze()
    assert len(grid) == 27
    assert all(len(row) == 27 for row in grid)
    assert _template_at(grid, template) == template

    counts = Counter(cell for row in grid for cell in row)
    for door in (O.RED_DOOR, O.YELLOW_DOOR, O.GREEN_DOOR, O.BLUE_DOOR):
        assert counts[door] >= 1
    for key in (O.RED_KEY, O.YELLOW_KEY, O.GREEN_KEY, O.BLUE_KEY):
        assert counts[key] >= 1
    assert counts[O.LEVER] == 1

    # Without a big door the root is the room vertex above the template
    root = gen.get_root_position()
    assert root == (11, 13)
    reachable = bfs_reachable(grid, root, walkable=lambda c: c not in (O.WALL, O.TOGGLE_DOOR))
    assert find_object(grid, O.LEVER) in reachable


@pytest.mark.structure
@pytest.mark.parametrize("seed", [1, 2, 3])
def test_default_template_stamped_verbatim(seed, make_config):
    template = default_template()
    original = copy.deepcopy(template)
    grid = MazeGenerator(13, 13, template, make_config(seed)).generate_maze()
    assert _template_at(grid, template) == original
    # The caller's template is never mutated
    assert template == original


@pytest.mark.structure
@pytest.mark.parametrize("seed", [4, 5])
def test_every_main_door_present(seed, make_config):
    grid = MazeGenerator(13, 13, default_template(), make_config(seed)).generate_maze()
    counts = Counter(cell for row in grid for cell in row)
    for door in ALL_MAIN_DOORS:
        assert counts[door] >= 1
    for reuse in (O.LEVER, O.A_BOX, O.B_BOX, O.C_BOX):
        assert counts[reuse] == 1


@pytest.mark.structure
def test_all_floor_connected(make_config):
    grid = MazeGenerator(13, 13, default_template(), make_config(77)).generate_maze()
    start = find_object(grid, O.PLAYER)
    floor = {(r, c) for r, row in enumerate(grid) for c, cell in enumerate(row) if cell != O.WALL}
    assert bfs_reachable(grid, start) == floor


def test_filler_counts(make_config):
    cfg = make_config(12, num_energy=5, num_drones=4, num_rocks=3)
    gen = MazeGenerator(13, 13, default_template(), cfg)
    grid = gen.generate_maze()
    counts = Counter(cell for row in grid for cell in row)
    assert counts[O.DRONE] == 4
    assert counts[O.ROCK] == 3
    # Side door rewards come on top of the filler orbs
    assert counts[O.ENERGY] >= 5
    assert gen.metrics["energy"] == 5
    assert gen.metrics["drones"] == 4
    assert gen.metrics["rocks"] == 3


def test_filler_stops_when_no_spot_left(make_config):
    cfg = make_config(3, num_energy=10_000, num_drones=5, num_rocks=5)
    gen = MazeGenerator(13, 13, default_template(), cfg)
    grid = gen.generate_maze()
    counts = Counter(cell for row in grid for cell in row)
    assert gen.metrics["drones"] == 0 and gen.metrics["rocks"] == 0
    assert counts[O.DRONE] == 0
    # Only the template can still hold empty cells
    template_empty = sum(cell == O.EMPTY for row in default_template() for cell in row)
    assert counts[O.EMPTY] == template_empty


def test_same_seed_same_maze(make_config):
    a = MazeGenerator(13, 13, default_template(), make_config(2024)).generate_maze()
    b = MazeGenerator(13, 13, default_template(), make_config(2024)).generate_maze()
    assert maze_to_string(a) == maze_to_string(b)


def test_global_random_state_is_not_used(make_config):
    import random

    random.seed(1)
    a = MazeGenerator(13, 13, default_template(), make_config(8)).generate_maze()
    random.seed(999)
    b = MazeGenerator(13, 13, default_template(), make_config(8)).generate_maze()
    assert a == b


def test_full_grid_template_returned_verbatim(make_config):
    text = "#####\n#S  #\n#   #\n#  P#\n#####"
    template = string_to_maze(text)
    gen = MazeGenerator(2, 2, template, make_config())
    grid = gen.generate_maze()
    assert maze_to_string(grid) == text
    assert gen.root is None
    assert gen.metrics["doors_main"] == 0


def test_root_outside_grid_skips_paths(make_config):
    text = "##n##\n#   #\n# S #\n#   #\n#####"
    gen = MazeGenerator(2, 2, string_to_maze(text), make_config())
    assert gen.get_root_position() == (-1, 2)
    grid = gen.generate_maze()
    assert maze_to_string(grid) == text
    assert gen.root is None
    assert gen.metrics["tree_nodes"] == 0


@pytest.mark.parametrize(
    "rows, expected",
    [
        (["#n#", "# #", "###"], (11, 13)),
        (["###", "# #", "#n#"], (15, 13)),
        (["###", "n #", "###"], (13, 11)),
        (["###", "# n", "###"], (13, 15)),
        (["###", "# #", "###"], (11, 13)),
    ],
)
def test_root_position_follows_big_door(rows, expected):
    gen = MazeGenerator(13, 13, string_to_maze("\n".join(rows)))
    assert gen.get_root_position() == expected


def test_metrics_populated(make_config):
    gen = MazeGenerator(13, 13, default_template(), make_config(31))
    gen.generate_maze()
    m = gen.metrics
    assert m["attempts"] >= 1
    assert m["doors_main"] == len(ALL_MAIN_DOORS)
    assert m["tree_nodes"] > 0
    assert set(m["phase_ms"]) >= {"walls", "tree", "main_path", "side_paths", "inverse_toggles", "filler", "materialize"}


def test_metrics_disabled(make_config):
    gen = MazeGenerator(13, 13, default_template(), make_config(31, enable_metrics=False))
    gen.generate_maze()
    assert gen.metrics == {}


@pytest.mark.parametrize(
    "width, height, template",
    [
        (0, 5, [[O.EMPTY]]),
        (5, -1, [[O.EMPTY]]),
        (5, 5, []),
        (5, 5, [[]]),
        (5, 5, [[O.EMPTY, O.EMPTY], [O.EMPTY]]),
        (1, 1, [[O.EMPTY] * 4] * 4),
    ],
)
def test_invalid_inputs_raise_value_error(width, height, template):
    with pytest.raises(ValueError):
        MazeGenerator(width, height, template)


def test_generate_maze_helper_uses_default_template():
    grid = generate_maze(13, 13, config=MazeConfig(seed=6, max_attempts=2000))
    assert find_object(grid, O.PORTAL) is not None
    assert find_object(grid, O.PLAYER) is not None


def test_shallow_tree_materializes_walls_and_template_only(make_config):
    # 7x7 grid: the start room fills the middle and its door opens onto the border
    gen = MazeGenerator(3, 3, default_template(), make_config())
    grid = gen.generate_maze()
    assert gen.root is not None
    assert gen.get_root_position() == (0, 3)
    assert all(cell == O.WALL for cell in grid[0])
    assert _template_at(grid, default_template()) == default_template()
    counts = Counter(cell for row in grid for cell in row)
    assert counts[O.ENERGY] == counts[O.DRONE] == counts[O.ROCK] == 0
    assert gen.metrics["doors_main"] == 0
