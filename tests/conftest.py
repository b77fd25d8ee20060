"""
Shared pytest fixtures for knockout bracket tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from knockout.models import Player


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the web app at a temporary data directory."""
    import app as app_module

    directory = tmp_path / "data"
    monkeypatch.setattr(app_module, 'DATA_DIR', str(directory))
    monkeypatch.setattr(app_module, 'LOCK_TIMEOUT', 2.0)
    return directory


@pytest.fixture
def client(data_dir):
    """Create a test client bound to the temporary data directory."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def four_players():
    """Four roster entries, in join order."""
    return [
        Player(id="alice", alias="Alice"),
        Player(id="bob", alias="Bob"),
        Player(id="carol", alias="Carol"),
        Player(id="dave", alias="Dave", avatar="dave.png"),
    ]


@pytest.fixture
def three_players():
    """Three roster entries; seeding them needs one bye."""
    return [
        Player(id="alice", alias="Alice"),
        Player(id="bob", alias="Bob"),
        Player(id="carol", alias="Carol"),
    ]
