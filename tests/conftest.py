import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from labyrinth import create_app  # noqa: E402
from labyrinth.maze import MazeConfig  # noqa: E402
from labyrinth.routes.maze_api import clear_cache  # noqa: E402

# Cap used by tests so an unlucky seed fails fast instead of hanging
TEST_MAX_ATTEMPTS = 2000


@pytest.fixture(autouse=True)
def _clean_maze_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("MAZE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def test_app(tmp_path, monkeypatch):
    app = create_app({"TESTING": True, "MAZE_API_MAX_ATTEMPTS": TEST_MAX_ATTEMPTS})
    monkeypatch.setattr(app, "instance_path", str(tmp_path))
    clear_cache()
    yield app
    clear_cache()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def make_config():
    def _make(seed=1234, **overrides):
        overrides.setdefault("max_attempts", TEST_MAX_ATTEMPTS)
        return MazeConfig(seed=seed, **overrides)

    return _make
