import asyncio
from pathlib import Path

import pendulum
import pytest

from aika.error import PersistenceError
from aika.model.time_entry import TimeEntry, TimeEntryUpdate
from aika.repository.time_entry import YamlEntryStore

T0 = pendulum.datetime(2024, 3, 5, 9, 0, 0, tz="UTC")


class FakeClock:
    def __init__(self, now: pendulum.DateTime = T0) -> None:
        self.now = now

    def __call__(self) -> pendulum.DateTime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now.add(**kwargs)


class FlakyStore:
    """Delegates to another store, failing the operations named in `failing`."""

    def __init__(self, inner: YamlEntryStore) -> None:
        self.inner = inner
        self.failing: set[str] = set()

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise PersistenceError(f"{operation}: store unavailable")

    async def list_entries(self, scope_owner: str) -> list[TimeEntry]:
        self._check("list")
        return await self.inner.list_entries(scope_owner)

    async def insert(
        self, scope_owner: str, description: str, start_time: pendulum.DateTime
    ) -> TimeEntry:
        self._check("insert")
        return await self.inner.insert(scope_owner, description, start_time)

    async def update(self, id: str, fields: TimeEntryUpdate) -> None:
        self._check("update")
        await self.inner.update(id, fields)

    async def delete(self, id: str) -> None:
        self._check("delete")
        await self.inner.delete(id)


class GatedStore(FlakyStore):
    """Holds every update until the gate is opened."""

    def __init__(self, inner: YamlEntryStore) -> None:
        super().__init__(inner)
        self.gate = asyncio.Event()

    async def update(self, id: str, fields: TimeEntryUpdate) -> None:
        await self.gate.wait()
        await super().update(id, fields)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def entries_dir(tmp_path: Path) -> Path:
    path = tmp_path / "time_entries"
    path.mkdir()
    return path


@pytest.fixture
def store(entries_dir: Path) -> YamlEntryStore:
    return YamlEntryStore(entries_dir, created_by="alice")


@pytest.fixture
def flaky_store(store: YamlEntryStore) -> FlakyStore:
    return FlakyStore(store)
