import pytest

from labyrinth.maze import ALL_MAIN_DOORS, MazeGenerator, MazeObject, default_template, find_object
from maze_test_utils import bfs_reachable, find_all, solve

O = MazeObject


@pytest.mark.structure
@pytest.mark.parametrize("seed", [1, 7, 19, 123, 4242, 99991])
def test_player_can_open_every_main_door(seed, make_config):
    grid = MazeGenerator(13, 13, default_template(), make_config(seed)).generate_maze()
    start = find_object(grid, O.PLAYER)
    visited, opened = solve(grid, start)

    for door in ALL_MAIN_DOORS:
        assert any(pos in opened for pos in find_all(grid, door)), door.name

    floor = {(r, c) for r, row in enumerate(grid) for c, cell in enumerate(row) if cell != O.WALL}
    assert visited == floor


@pytest.mark.structure
@pytest.mark.parametrize("size", [(10, 10), (16, 12), (20, 20)])
def test_other_sizes_are_solvable(size, make_config):
    width, height = size
    grid = MazeGenerator(width, height, default_template(), make_config(size[0] * 31 + size[1])).generate_maze()
    visited, _ = solve(grid, find_object(grid, O.PLAYER))
    for r, c in find_all(grid, O.ENERGY):
        assert (r, c) in visited
    assert find_object(grid, O.PORTAL) in visited


def test_solver_stops_at_locked_door():
    from labyrinth.maze import string_to_maze

    grid = string_to_maze("#####\n#S R#\n#####")
    visited, opened = solve(grid, (1, 1))
    assert (1, 3) not in visited and not opened

    grid = string_to_maze("######\n#SrR #\n######")
    visited, opened = solve(grid, (1, 1))
    assert opened == {(1, 3)}
    assert (1, 4) in visited


def test_solver_models_lever_state():
    from labyrinth.maze import string_to_maze

    # Lever, toggle door, gap, inverse door, energy
    grid = string_to_maze("########\n#S/t T*#\n########")
    visited, _ = solve(grid, (1, 1), toggle_state=True)
    assert (1, 4) in visited
    assert (1, 6) not in visited
    visited, _ = solve(grid, (1, 1))
    assert (1, 6) in visited

    # Inverse door is open until the lever is flipped
    grid = string_to_maze("#######\n#S T/t*#\n########")
    visited, _ = solve(grid, (1, 1), toggle_state=True)
    assert {(1, 4), (1, 6)} <= visited


@pytest.mark.structure
@pytest.mark.parametrize("seed", [3, 11, 2024])
def test_inverse_doors_never_cut_lever_from_toggle_doors(seed, make_config):
    grid = MazeGenerator(13, 13, default_template(), make_config(seed)).generate_maze()
    lever = find_object(grid, O.LEVER)
    reachable = bfs_reachable(grid, lever, walkable=lambda c: c not in (O.WALL, O.INVERSE_TOGGLE_DOOR))
    for door in find_all(grid, O.TOGGLE_DOOR):
        assert door in reachable
