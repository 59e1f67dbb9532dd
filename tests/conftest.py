"""
Pytest configuration and shared fixtures.
"""

import itertools
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root and this directory to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent))

from helpers import streaming_model, title_model


def pytest_configure(config):
    config.option.asyncio_mode = "auto"


@pytest.fixture
def clock():
    """Deterministic millisecond clock: every call is one second later."""
    ticks = itertools.count(1_700_000_000_000, 1000)
    return lambda: next(ticks)


@pytest.fixture
def store(tmp_path, clock):
    from kbchat.storage.knowledge_base import KnowledgeBaseStore
    return KnowledgeBaseStore(tmp_path / "knowledge_base", clock=clock)


@pytest.fixture
def make_client(store):
    """Build a test client around the given fakes; the store fixture is shared."""
    from kbchat.server import create_app

    def _make(chat_model=None, title=None):
        app = create_app(
            chat_model=chat_model or streaming_model("Hello from the model"),
            title_model=title or title_model("A Title"),
            store=store,
            api_prefix="/api",
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
