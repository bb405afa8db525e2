import itertools
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from onemap.collaborators import StaticConfirm
from onemap.editor import MindMapEditor
from onemap.mutations import new_map
from onemap.persistence import PersistenceAdapter
from onemap.storage import MemoryBackend


class SequentialIds:
    """Deterministic id generator: n1, n2, n3, ..."""

    def __init__(self, prefix="n"):
        self._counter = itertools.count(1)
        self.prefix = prefix

    def generate(self):
        return f"{self.prefix}{next(self._counter)}"


class TickingClock:
    """Clock that advances one second per call."""

    def __init__(self):
        self._counter = itertools.count(0)

    def now(self):
        seconds = next(self._counter)
        return f"2026-01-14T12:{seconds // 60:02d}:{seconds % 60:02d}Z"


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, title, message, severity="info"):
        self.messages.append((title, message, severity))

    @property
    def titles(self):
        return [m[0] for m in self.messages]


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def mind_map(ids, clock):
    return new_map("Test Map", ids=ids, clock=clock)


@pytest.fixture
def snapshot(mind_map):
    return mind_map.snapshot


@pytest.fixture
def store():
    return MemoryBackend()


@pytest.fixture
def persistence(store, clock):
    return PersistenceAdapter(store, clock=clock)


@pytest.fixture
def editor(persistence, notifier, ids, clock):
    return MindMapEditor(
        persistence=persistence,
        confirm=StaticConfirm(True),
        notifier=notifier,
        ids=ids,
        clock=clock,
    )
