"""Per-session projection of the month a client has on screen.

All state lives on the :class:`SessionView` instance, so several
independent sessions can coexist in one process.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from cuadrante.application.services.sync_bus import SyncEventType
from cuadrante.domain.date_keys import is_in_month, validate_month
from cuadrante.domain.entities import CalendarEntry, EDITABLE_FIELDS, User, UserRole
from cuadrante.domain.exceptions import ActionNotAllowedError, InvalidEntityError

logger = logging.getLogger(__name__)

_TEXT_FIELDS = tuple(f for f in EDITABLE_FIELDS if f != "image_urls")


class SessionView:
    """Selected month, its entries, and the user list for one client.

    Bus events are applied only when they concern the selected month; user
    events always apply. Local edits mutate state optimistically and return
    the payload to send to the server; nothing is rolled back if the save
    later fails.
    """

    def __init__(
        self,
        user: User,
        year: int,
        month: int,
        on_refresh: Callable[["SessionView"], None] | None = None,
        on_users_refresh: Callable[["SessionView"], None] | None = None,
    ):
        validate_month(year, month)
        self.user = user
        self.year = year
        self.month = month
        self.entries: dict[str, CalendarEntry] = {}
        self.users: list[User] = []
        self.user_panel_open = False
        self._on_refresh = on_refresh
        self._on_users_refresh = on_users_refresh

    # ── Month selection ─────────────────────────────────────────────

    def select_month(self, year: int, month: int, entries: Iterable[CalendarEntry]) -> None:
        """Replace the local state with a freshly fetched month."""
        validate_month(year, month)
        self.year = year
        self.month = month
        self.entries = {e.date_key: e for e in entries if is_in_month(e.date_key, year, month)}
        self._refresh()

    def contains(self, date_key: str) -> bool:
        return is_in_month(date_key, self.year, self.month)

    def entry_for(self, date_key: str) -> CalendarEntry:
        """The stored entry for a day, or a blank one if none exists."""
        return self.entries.get(date_key) or CalendarEntry.blank(date_key)

    # ── Bus events ──────────────────────────────────────────────────

    def on_entry_upserted(self, entry: CalendarEntry) -> bool:
        if not self.contains(entry.date_key):
            return False
        self.entries[entry.date_key] = entry
        self._refresh()
        return True

    def on_entry_deleted(self, date_key: str) -> bool:
        if not self.contains(date_key):
            return False
        self.entries.pop(date_key, None)
        self._refresh()
        return True

    def on_user_added(self, user: User) -> None:
        self.users.append(user)
        self._refresh_users()

    def on_user_deleted(self, user_id: str) -> None:
        self.users = [u for u in self.users if u.id != user_id]
        self._refresh_users()

    def set_users(self, users: Iterable[User]) -> None:
        self.users = list(users)
        self._refresh_users()

    def apply_event(self, event_type: str, data: Any) -> bool:
        """Dispatch a raw bus event. Returns True if local state changed."""
        if event_type == SyncEventType.ENTRY_UPSERTED.value:
            return self.on_entry_upserted(CalendarEntry.from_snapshot(data))
        if event_type == SyncEventType.ENTRY_DELETED.value:
            return self.on_entry_deleted(data["date_key"])
        if event_type == SyncEventType.USER_ADDED.value:
            self.on_user_added(
                User(
                    id=data["id"],
                    name=data["name"],
                    identifier=data["identifier"],
                    role=UserRole(data["role"]),
                )
            )
            return True
        if event_type == SyncEventType.USER_DELETED.value:
            self.on_user_deleted(data["id"])
            return True
        logger.debug("Ignoring unknown event type %r", event_type)
        return False

    # ── Optimistic local edits ──────────────────────────────────────

    def edit_field(self, date_key: str, field: str, value: str) -> dict[str, Any]:
        if field not in _TEXT_FIELDS:
            raise InvalidEntityError("field", f"'{field}' is not editable")
        entry = self._editable_entry(date_key, f"edit {field}")
        setattr(entry, field, value)
        return self._save_payload(entry)

    def add_image(self, date_key: str, url: str) -> dict[str, Any]:
        entry = self._editable_entry(date_key, "add images")
        entry.image_urls.append(url)
        return self._save_payload(entry)

    def remove_image(self, date_key: str, url: str) -> dict[str, Any] | None:
        """Drop *url* from the entry. Returns None if the day has no images."""
        self._require_edit("remove images")
        entry = self.entries.get(date_key)
        if entry is None or not entry.image_urls:
            return None
        entry.image_urls = [u for u in entry.image_urls if u != url]
        return self._save_payload(entry)

    def _require_edit(self, action: str) -> None:
        if not self.user.can_edit:
            raise ActionNotAllowedError(self.user.role.value, action)

    def _editable_entry(self, date_key: str, action: str) -> CalendarEntry:
        self._require_edit(action)
        if not self.contains(date_key):
            raise InvalidEntityError(
                "date_key", f"{date_key} is outside {self.year}-{self.month:02d}"
            )
        return self.entries.setdefault(date_key, CalendarEntry.blank(date_key))

    def _save_payload(self, entry: CalendarEntry) -> dict[str, Any]:
        entry.editor = self.user.name
        self._refresh()
        payload = entry.snapshot()
        del payload["date_key"]
        return payload

    def _refresh(self) -> None:
        if self._on_refresh is not None:
            self._on_refresh(self)

    def _refresh_users(self) -> None:
        if self.user_panel_open and self._on_users_refresh is not None:
            self._on_users_refresh(self)
