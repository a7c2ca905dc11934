"""Unit tests for the client session façade."""

from datetime import date

import pytest

from cuadrante.client import CalendarSession
from cuadrante.client.session import GENERIC_FAILURE, IDENTIFIER_NOT_FOUND
from cuadrante.domain.entities import CalendarEntry, ChangeLogRecord, User, UserRole
from cuadrante.domain.exceptions import ApiRequestError


class FakeApiClient:
    """Records calls and fails on demand."""

    def __init__(self, user: User | None = None):
        self.user = user or User(name="Bob", identifier="2", role=UserRole.EDITOR)
        self.month: list[CalendarEntry] = []
        self.saved: list[tuple[str, dict]] = []
        self.fail_with: ApiRequestError | None = None
        self.login_error: ApiRequestError | None = None
        self.admin_calls: list[str] = []

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def login(self, identifier: str) -> User:
        if self.login_error is not None:
            raise self.login_error
        return self.user

    async def list_users(self) -> list[User]:
        return [self.user]

    async def load_month(self, year: int, month: int) -> list[CalendarEntry]:
        self._maybe_fail()
        return list(self.month)

    async def save_entry(self, date_key: str, payload: dict) -> CalendarEntry:
        self._maybe_fail()
        self.saved.append((date_key, payload))
        return CalendarEntry(date_key=date_key)

    async def upload_image(self, content: bytes, filename: str) -> str:
        self._maybe_fail()
        return f"/uploads/{filename}"

    async def add_user(self, name: str, identifier: str, role: UserRole) -> User:
        self._maybe_fail()
        self.admin_calls.append("add_user")
        return User(name=name, identifier=identifier, role=role)

    async def delete_user(self, user_id: str) -> None:
        self._maybe_fail()
        self.admin_calls.append("delete_user")

    async def report(self, year: int, month: int) -> list[ChangeLogRecord]:
        self._maybe_fail()
        self.admin_calls.append("report")
        return []


async def _logged_in(client: FakeApiClient, messages: list[str]) -> CalendarSession:
    session = CalendarSession(client, notify=messages.append)
    assert await session.login("2", today=date(2025, 9, 18))
    return session


@pytest.mark.asyncio
async def test_login_loads_users_and_current_month():
    client = FakeApiClient()
    client.month = [CalendarEntry(date_key="2025-09-18", name="Ana")]
    session = await _logged_in(client, [])

    assert session.user.name == "Bob"
    assert (session.view.year, session.view.month) == (2025, 9)
    assert session.view.entries["2025-09-18"].name == "Ana"
    assert session.view.users == [client.user]


@pytest.mark.asyncio
async def test_login_unknown_identifier_message():
    client = FakeApiClient()
    client.login_error = ApiRequestError(404, "Identifier not found")
    messages = []
    session = CalendarSession(client, notify=messages.append)

    assert not await session.login("0000")
    assert messages == [IDENTIFIER_NOT_FOUND]
    assert session.view is None


@pytest.mark.asyncio
async def test_login_other_failure_shows_generic_message():
    client = FakeApiClient()
    client.login_error = ApiRequestError(500, "Storage unavailable")
    messages = []

    assert not await CalendarSession(client, notify=messages.append).login("2")
    assert messages == [GENERIC_FAILURE]


@pytest.mark.asyncio
async def test_blank_identifier_never_reaches_server():
    client = FakeApiClient()
    client.login_error = AssertionError("should not be called")
    messages = []

    assert not await CalendarSession(client, notify=messages.append).login("   ")
    assert len(messages) == 1


@pytest.mark.asyncio
async def test_edit_saves_full_payload():
    client = FakeApiClient()
    session = await _logged_in(client, [])

    assert await session.edit_field("2025-09-18", "phone", "555-1234")
    date_key, payload = client.saved[0]
    assert date_key == "2025-09-18"
    assert payload["phone"] == "555-1234"
    assert payload["editor"] == "Bob"


@pytest.mark.asyncio
async def test_failed_save_keeps_optimistic_state_and_notifies():
    client = FakeApiClient()
    messages = []
    session = await _logged_in(client, messages)
    client.fail_with = ApiRequestError(500, "Storage unavailable")

    assert not await session.edit_field("2025-09-18", "name", "Ana")
    assert session.view.entries["2025-09-18"].name == "Ana"
    assert messages == [GENERIC_FAILURE]


@pytest.mark.asyncio
async def test_failed_month_load_shows_empty_month():
    client = FakeApiClient()
    client.month = [CalendarEntry(date_key="2025-09-18", name="Ana")]
    session = await _logged_in(client, [])
    client.fail_with = ApiRequestError(0, "Request failed")

    await session.open_month(2025, 10)
    assert (session.view.year, session.view.month) == (2025, 10)
    assert session.view.entries == {}


@pytest.mark.asyncio
async def test_viewer_edit_is_refused_locally():
    client = FakeApiClient(User(name="Val", identifier="9", role=UserRole.VIEWER))
    messages = []
    session = await _logged_in(client, messages)

    assert not await session.edit_field("2025-09-18", "name", "Ana")
    assert not await session.add_image("2025-09-18", b"img", "a.jpg")
    assert client.saved == []
    assert len(messages) == 2


@pytest.mark.asyncio
async def test_add_image_uploads_then_saves():
    client = FakeApiClient()
    session = await _logged_in(client, [])

    assert await session.add_image("2025-09-18", b"img", "a.jpg")
    assert client.saved[0][1]["image_urls"] == ["/uploads/a.jpg"]

    assert await session.remove_image("2025-09-18", "/uploads/a.jpg")
    assert client.saved[1][1]["image_urls"] == []


@pytest.mark.asyncio
async def test_cannot_delete_own_user():
    client = FakeApiClient(User(name="Gustavo", identifier="3434", role=UserRole.ADMIN))
    messages = []
    session = await _logged_in(client, messages)

    assert not await session.delete_user(client.user.id)
    assert messages == ["You cannot delete your own user."]
    assert await session.delete_user("someone-else")


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [UserRole.EDITOR, UserRole.VIEWER])
async def test_user_management_and_report_are_admin_only(role):
    client = FakeApiClient(User(name="Bob", identifier="2", role=role))
    messages = []
    session = await _logged_in(client, messages)

    assert not await session.add_user("Eva", "5678", UserRole.VIEWER)
    assert not await session.delete_user("someone-else")
    assert await session.report() == []

    assert client.admin_calls == []
    assert messages == [
        f"Role '{role.value}' may not add users",
        f"Role '{role.value}' may not delete users",
        f"Role '{role.value}' may not view the change report",
    ]


@pytest.mark.asyncio
async def test_admin_can_manage_users_and_read_report():
    client = FakeApiClient(User(name="Gustavo", identifier="3434", role=UserRole.ADMIN))
    messages = []
    session = await _logged_in(client, messages)

    assert await session.add_user("Eva", "5678", UserRole.VIEWER)
    assert await session.delete_user("someone-else")
    assert await session.report() == []

    assert client.admin_calls == ["add_user", "delete_user", "report"]
    assert messages == []
