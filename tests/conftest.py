"""Shared fakes: an in-memory graph surface and a manual clock."""

import asyncio

import pytest

from graphstate import StateStore


class FakeItem:
    def __init__(self, item_id, model=None):
        self._id = item_id
        self.model = {"id": item_id, **(model or {})}

    def get_id(self):
        return self._id

    def get_model(self):
        return self.model


class FakeGraph:
    """Records every adapter call the core makes."""

    def __init__(self, nodes=(), edges=()):
        self.nodes = [FakeItem(n) for n in nodes]
        self.edges = [FakeItem(e) for e in edges]
        self.auto_paint = True
        self.auto_paint_log = []
        self.paint_count = 0
        self.painted_while_auto = []
        self.updates = []

    def find_by_id(self, item_id):
        for item in self.nodes + self.edges:
            if item.get_id() == item_id:
                return item
        return None

    def update_item(self, item, patch):
        item.model.update(patch)
        self.updates.append((item.get_id(), dict(patch)))

    def set_auto_paint(self, enabled):
        self.auto_paint = enabled
        self.auto_paint_log.append(enabled)

    def paint(self):
        self.paint_count += 1
        self.painted_while_auto.append(self.auto_paint)

    def get_nodes(self):
        return list(self.nodes)

    def get_edges(self):
        return list(self.edges)

    def updated_ids(self):
        return [item_id for item_id, _ in self.updates]

    def model(self, item_id):
        return self.find_by_id(item_id).get_model()


async def settle():
    """Let woken tasks run until they suspend again."""
    for _ in range(10):
        await asyncio.sleep(0)


class ManualClock:
    """Drop-in for asyncio.sleep whose time only moves on advance()."""

    def __init__(self):
        self.now = 0
        self._sleepers = []

    async def sleep(self, delay):
        future = asyncio.get_running_loop().create_future()
        self._sleepers.append((self.now + delay, future))
        await future

    @property
    def pending(self):
        return len(self._sleepers)

    async def advance(self, delta):
        target = self.now + delta
        await settle()
        while True:
            due = [wake for wake, _ in self._sleepers if wake <= target]
            if not due:
                break
            self.now = min(due)
            woken = [s for s in self._sleepers if s[0] <= self.now]
            for sleeper in woken:
                self._sleepers.remove(sleeper)
                if not sleeper[1].done():
                    sleeper[1].set_result(None)
            await settle()
        self.now = target


@pytest.fixture
def store():
    return StateStore()


@pytest.fixture
def graph():
    return FakeGraph(nodes=["A", "B", "C"], edges=["e1", "e2"])


@pytest.fixture
def make_graph():
    return FakeGraph


@pytest.fixture
def clock():
    return ManualClock()
