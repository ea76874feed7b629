"""
Integration Test Configuration

Engines wired to a JSONL store in a temporary directory, so a test can
restart the engine on the same files.
"""

import pytest

from worklife_coach.coaching_engine import CoachingEngine
from worklife_coach.utils.data_store import JsonlDataStore
from worklife_coach.utils.ids import SequentialIdFactory


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "coach-data"


@pytest.fixture
def make_engine(data_dir):
    """
    Build a coaching engine over the shared data directory.

    Each call returns a fresh engine with empty session state, the way a
    restarted process would see the files.
    """

    def _make(id_factory=None) -> CoachingEngine:
        return CoachingEngine(data_store=JsonlDataStore(data_dir), id_factory=id_factory)

    return _make


@pytest.fixture
def sequential_ids():
    return SequentialIdFactory()
