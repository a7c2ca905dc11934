"""Unit tests for the per-client month projection."""

import pytest

from cuadrante.client import SessionView
from cuadrante.domain.entities import CalendarEntry, User, UserRole
from cuadrante.domain.exceptions import ActionNotAllowedError, InvalidEntityError


def _user(role: UserRole = UserRole.EDITOR, name: str = "Bob") -> User:
    return User(name=name, identifier=f"id-{name}", role=role)


def _view(year: int = 2025, month: int = 9, role: UserRole = UserRole.EDITOR) -> SessionView:
    return SessionView(_user(role), year, month)


def test_event_outside_month_is_discarded():
    september = _view(2025, 9)
    october = _view(2025, 10)
    entry = CalendarEntry(date_key="2025-10-01", name="Ana", editor="Bob")

    assert september.on_entry_upserted(entry) is False
    assert october.on_entry_upserted(entry) is True

    assert september.entries == {}
    assert october.entries == {"2025-10-01": entry}


def test_upsert_event_replaces_local_entry():
    view = _view()
    view.select_month(2025, 9, [CalendarEntry(date_key="2025-09-18", name="Ana")])
    view.on_entry_upserted(CalendarEntry(date_key="2025-09-18", name="Eva", editor="Carla"))
    assert view.entries["2025-09-18"].name == "Eva"


def test_delete_event_respects_month():
    view = _view()
    view.select_month(2025, 9, [CalendarEntry(date_key="2025-09-18", name="Ana")])

    assert view.on_entry_deleted("2025-10-18") is False
    assert "2025-09-18" in view.entries
    assert view.on_entry_deleted("2025-09-18") is True
    assert view.entries == {}


def test_select_month_drops_entries_from_other_months():
    view = _view()
    view.select_month(
        2025,
        10,
        [
            CalendarEntry(date_key="2025-09-30", name="old"),
            CalendarEntry(date_key="2025-10-02", name="new"),
        ],
    )
    assert (view.year, view.month) == (2025, 10)
    assert list(view.entries) == ["2025-10-02"]


def test_refresh_callback_only_for_applied_events():
    refreshes = []
    view = SessionView(_user(), 2025, 9, on_refresh=lambda v: refreshes.append(v.month))
    view.on_entry_upserted(CalendarEntry(date_key="2025-10-01"))
    view.on_entry_upserted(CalendarEntry(date_key="2025-09-01"))
    assert refreshes == [9]


def test_user_events_always_apply_but_refresh_only_when_panel_open():
    panel_refreshes = []
    view = SessionView(
        _user(UserRole.ADMIN), 2025, 9, on_users_refresh=lambda v: panel_refreshes.append(1)
    )
    ana = _user(name="Ana")
    view.on_user_added(ana)
    assert view.users == [ana]
    assert panel_refreshes == []

    view.user_panel_open = True
    view.on_user_deleted(ana.id)
    assert view.users == []
    assert panel_refreshes == [1]


def test_apply_event_dispatches_raw_payloads():
    view = _view()
    assert view.apply_event(
        "entry_upserted", {"date_key": "2025-09-18", "name": "Ana", "editor": "Bob"}
    )
    assert view.entries["2025-09-18"].name == "Ana"
    assert not view.apply_event("entry_upserted", {"date_key": "2025-11-18"})
    assert view.apply_event(
        "user_added", {"id": "u1", "name": "Ana", "identifier": "1", "role": "viewer"}
    )
    assert view.users[0].role == UserRole.VIEWER
    assert view.apply_event("user_deleted", {"id": "u1"})
    assert view.users == []
    assert view.apply_event("entry_deleted", {"date_key": "2025-09-18"})
    assert not view.apply_event("something_else", {})


def test_edit_field_is_optimistic_and_returns_full_payload():
    view = _view()
    payload = view.edit_field("2025-09-18", "name", "Ana")

    assert view.entries["2025-09-18"].name == "Ana"
    assert view.entries["2025-09-18"].editor == "Bob"
    assert payload == {
        "name": "Ana",
        "address": "",
        "phone": "",
        "editor": "Bob",
        "image_urls": [],
    }


def test_edit_outside_selected_month_rejected():
    view = _view()
    with pytest.raises(InvalidEntityError):
        view.edit_field("2025-10-01", "name", "Ana")


def test_edit_unknown_field_rejected():
    view = _view()
    with pytest.raises(InvalidEntityError):
        view.edit_field("2025-09-18", "editor", "Mallory")


def test_viewer_cannot_edit():
    view = _view(role=UserRole.VIEWER)
    with pytest.raises(ActionNotAllowedError):
        view.edit_field("2025-09-18", "name", "Ana")
    with pytest.raises(ActionNotAllowedError):
        view.add_image("2025-09-18", "/uploads/a.jpg")
    assert view.entries == {}


def test_add_and_remove_images():
    view = _view()
    view.add_image("2025-09-18", "/uploads/a.jpg")
    payload = view.add_image("2025-09-18", "/uploads/b.jpg")
    assert payload["image_urls"] == ["/uploads/a.jpg", "/uploads/b.jpg"]

    payload = view.remove_image("2025-09-18", "/uploads/a.jpg")
    assert payload["image_urls"] == ["/uploads/b.jpg"]
    assert view.remove_image("2025-09-19", "/uploads/a.jpg") is None


def test_independent_views_do_not_share_state():
    first = _view()
    second = _view()
    first.edit_field("2025-09-18", "name", "Ana")
    assert second.entries == {}
