"""Shared in-memory fakes for service-level unit tests."""

import asyncio
from contextlib import aclosing
from datetime import datetime

import pytest

from cuadrante.application.interfaces import (
    CalendarEntryRepository,
    ChangeLogRepository,
    UnitOfWork,
    UserRepository,
)
from cuadrante.application.services import (
    CalendarEntryService,
    ChangeLogService,
    SyncBus,
    UserService,
)
from cuadrante.domain.entities import CalendarEntry, ChangeLogRecord, User


class FakeCalendarEntryRepository(CalendarEntryRepository):
    """In-memory fake repository keyed by date."""

    def __init__(self):
        self._entries: dict[str, CalendarEntry] = {}
        self._committed: dict[str, CalendarEntry] = {}

    def checkpoint(self) -> None:
        self._committed = dict(self._entries)

    def restore(self) -> None:
        self._entries = dict(self._committed)

    async def get_by_date_key(self, date_key: str) -> CalendarEntry | None:
        stored = self._entries.get(date_key)
        return CalendarEntry.from_snapshot(stored.snapshot()) if stored else None

    async def list_between(self, start_key: str, end_key: str) -> list[CalendarEntry]:
        return [
            CalendarEntry.from_snapshot(e.snapshot())
            for k, e in sorted(self._entries.items())
            if start_key <= k <= end_key
        ]

    async def claim(self, date_key: str) -> bool:
        if date_key in self._entries:
            return False
        self._entries[date_key] = CalendarEntry.blank(date_key)
        return True

    async def get_for_update(self, date_key: str) -> CalendarEntry | None:
        return await self.get_by_date_key(date_key)

    async def save(self, entry: CalendarEntry) -> CalendarEntry:
        self._entries[entry.date_key] = CalendarEntry.from_snapshot(entry.snapshot())
        return CalendarEntry.from_snapshot(entry.snapshot())

    async def delete(self, date_key: str) -> bool:
        return self._entries.pop(date_key, None) is not None


class FakeUnitOfWork(UnitOfWork):
    """Counts commits and rollbacks; can be told to fail the next commit.

    A rollback restores every given fake to its state at the last commit.
    """

    def __init__(self, *repositories):
        self._repositories = repositories
        self.commits = 0
        self.rollbacks = 0
        self.fail_next_commit: Exception | None = None

    async def commit(self) -> None:
        if self.fail_next_commit is not None:
            exc, self.fail_next_commit = self.fail_next_commit, None
            raise exc
        self.commits += 1
        for repository in self._repositories:
            repository.checkpoint()

    async def rollback(self) -> None:
        self.rollbacks += 1
        for repository in self._repositories:
            repository.restore()


class FakeChangeLogRepository(ChangeLogRepository):
    """In-memory append-only log."""

    def __init__(self):
        self.records: list[ChangeLogRecord] = []
        self._committed = 0

    def checkpoint(self) -> None:
        self._committed = len(self.records)

    def restore(self) -> None:
        del self.records[self._committed:]

    async def append(self, record: ChangeLogRecord) -> ChangeLogRecord:
        record.id = len(self.records) + 1
        self.records.append(record)
        return record

    async def list_between(self, start: datetime, end: datetime) -> list[ChangeLogRecord]:
        matching = [r for r in self.records if start <= r.timestamp < end]
        return sorted(matching, key=lambda r: (r.timestamp, r.id), reverse=True)


class FakeUserRepository(UserRepository):

    def __init__(self):
        self._users: dict[str, User] = {}
        self._committed: dict[str, User] = {}

    def checkpoint(self) -> None:
        self._committed = dict(self._users)

    def restore(self) -> None:
        self._users = dict(self._committed)

    async def get_by_identifier(self, identifier: str) -> User | None:
        return next((u for u in self._users.values() if u.identifier == identifier), None)

    async def get_by_name(self, name: str) -> User | None:
        return next((u for u in self._users.values() if u.name == name), None)

    async def get_all(self) -> list[User]:
        return list(self._users.values())

    async def count(self) -> int:
        return len(self._users)

    async def create(self, user: User) -> User:
        self._users[user.id] = user
        return user

    async def delete(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None


async def collect_events(bus: SyncBus, count: int) -> list[str]:
    """Subscribe to *bus* and return the next *count* raw SSE messages."""
    events: list[str] = []
    async with aclosing(bus.subscribe()) as stream:
        async for message in stream:
            events.append(message)
            if len(events) == count:
                break
    return events


@pytest.fixture
def start_collecting(sync_bus):
    """Start a subscriber task on the bus and let it register before returning."""

    async def _start(count: int) -> asyncio.Task:
        task = asyncio.create_task(collect_events(sync_bus, count))
        await asyncio.sleep(0)
        return task

    return _start


@pytest.fixture
def entry_repo() -> FakeCalendarEntryRepository:
    return FakeCalendarEntryRepository()


@pytest.fixture
def log_repo() -> FakeChangeLogRepository:
    return FakeChangeLogRepository()


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def unit_of_work(entry_repo, log_repo, user_repo) -> FakeUnitOfWork:
    return FakeUnitOfWork(entry_repo, log_repo, user_repo)


@pytest.fixture
def sync_bus() -> SyncBus:
    return SyncBus(queue_size=16)


@pytest.fixture
def change_log(log_repo) -> ChangeLogService:
    return ChangeLogService(log_repo)


@pytest.fixture
def entry_service(entry_repo, change_log, sync_bus, unit_of_work) -> CalendarEntryService:
    return CalendarEntryService(entry_repo, change_log, sync_bus, unit_of_work)


@pytest.fixture
def user_service(user_repo, sync_bus, unit_of_work) -> UserService:
    return UserService(user_repo, sync_bus, unit_of_work)
