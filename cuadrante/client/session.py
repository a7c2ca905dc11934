"""Client session — ties a SessionView to the API and reports failures.

Remote failures are logged, shown to the user through ``notify`` and then
abandoned: no retry and no offline queue.
"""

import logging
from collections.abc import Callable
from datetime import date

from cuadrante.client.api_client import CalendarApiClient
from cuadrante.client.session_view import SessionView
from cuadrante.client.sync_listener import SyncListener
from cuadrante.domain.entities import ChangeLogRecord, User, UserRole
from cuadrante.domain.exceptions import (
    ActionNotAllowedError,
    ApiRequestError,
    InvalidEntityError,
)

logger = logging.getLogger(__name__)

IDENTIFIER_NOT_FOUND = "Identifier not found."
GENERIC_FAILURE = "Something went wrong. Please try again."


class CalendarSession:
    """One logged-in client: login, month navigation and optimistic edits."""

    def __init__(
        self,
        client: CalendarApiClient,
        notify: Callable[[str], None] | None = None,
        on_refresh: Callable[[SessionView], None] | None = None,
        on_users_refresh: Callable[[SessionView], None] | None = None,
    ):
        self._client = client
        self._notify = notify
        self._on_refresh = on_refresh
        self._on_users_refresh = on_users_refresh
        self.view: SessionView | None = None

    @property
    def user(self) -> User | None:
        return self.view.user if self.view else None

    def _report(self, message: str) -> None:
        if self._notify is not None:
            self._notify(message)

    def _require_view(self) -> SessionView:
        if self.view is None:
            raise RuntimeError("Not logged in")
        return self.view

    def _require_admin(self, action: str) -> SessionView | None:
        view = self._require_view()
        if not view.user.is_admin:
            self._report(str(ActionNotAllowedError(view.user.role.value, action)))
            return None
        return view

    async def login(self, identifier: str, today: date | None = None) -> bool:
        """Log in and load the current month. Returns False on failure."""
        identifier = identifier.strip()
        if not identifier:
            self._report("The identifier cannot be empty.")
            return False
        try:
            user = await self._client.login(identifier)
        except ApiRequestError as exc:
            logger.info("Login failed for identifier: %s", exc)
            self._report(IDENTIFIER_NOT_FOUND if exc.is_not_found else GENERIC_FAILURE)
            return False

        today = today or date.today()
        self.view = SessionView(
            user,
            today.year,
            today.month,
            on_refresh=self._on_refresh,
            on_users_refresh=self._on_users_refresh,
        )
        await self.load_users()
        await self.open_month(today.year, today.month)
        return True

    async def load_users(self) -> None:
        view = self._require_view()
        try:
            view.set_users(await self._client.list_users())
        except ApiRequestError:
            logger.exception("Failed to load users")

    async def open_month(self, year: int, month: int) -> None:
        """Switch months with a full refetch; a failed load shows an empty month."""
        view = self._require_view()
        try:
            entries = await self._client.load_month(year, month)
        except ApiRequestError:
            logger.exception("Failed to load %d-%02d", year, month)
            entries = []
        view.select_month(year, month, entries)

    async def edit_field(self, date_key: str, field: str, value: str) -> bool:
        view = self._require_view()
        try:
            payload = view.edit_field(date_key, field, value)
        except (ActionNotAllowedError, InvalidEntityError) as exc:
            self._report(str(exc))
            return False
        return await self._save(date_key, payload)

    async def add_image(self, date_key: str, content: bytes, filename: str) -> bool:
        view = self._require_view()
        if not view.user.can_edit:
            self._report(str(ActionNotAllowedError(view.user.role.value, "upload images")))
            return False
        try:
            url = await self._client.upload_image(content, filename)
        except ApiRequestError as exc:
            logger.error("Image upload failed: %s", exc)
            self._report(f"Image upload failed: {exc.message}")
            return False
        try:
            payload = view.add_image(date_key, url)
        except InvalidEntityError as exc:
            self._report(str(exc))
            return False
        return await self._save(date_key, payload)

    async def remove_image(self, date_key: str, url: str) -> bool:
        view = self._require_view()
        try:
            payload = view.remove_image(date_key, url)
        except ActionNotAllowedError as exc:
            self._report(str(exc))
            return False
        if payload is None:
            return False
        return await self._save(date_key, payload)

    async def _save(self, date_key: str, payload: dict) -> bool:
        try:
            await self._client.save_entry(date_key, payload)
        except ApiRequestError as exc:
            # The optimistic local state is left as is.
            logger.error("Saving %s failed: %s", date_key, exc)
            self._report(GENERIC_FAILURE)
            return False
        return True

    # ── Admin actions ───────────────────────────────────────────────

    async def add_user(self, name: str, identifier: str, role: UserRole) -> bool:
        """The new user reaches the local list through the ``user_added`` event."""
        if self._require_admin("add users") is None:
            return False
        if not name.strip() or not identifier.strip():
            self._report("Name and identifier are required.")
            return False
        try:
            await self._client.add_user(name.strip(), identifier.strip(), role)
        except ApiRequestError as exc:
            logger.error("Creating user %s failed: %s", name, exc)
            self._report("Could not create the user.")
            return False
        return True

    async def delete_user(self, user_id: str) -> bool:
        view = self._require_admin("delete users")
        if view is None:
            return False
        if user_id == view.user.id:
            self._report("You cannot delete your own user.")
            return False
        try:
            await self._client.delete_user(user_id)
        except ApiRequestError as exc:
            logger.error("Deleting user %s failed: %s", user_id, exc)
            self._report("Could not delete the user.")
            return False
        return True

    async def report(self) -> list[ChangeLogRecord]:
        """Change log for the month on screen; empty on failure."""
        view = self._require_admin("view the change report")
        if view is None:
            return []
        try:
            return await self._client.report(view.year, view.month)
        except ApiRequestError:
            logger.exception("Failed to load the change report")
            self._report("Could not load the report.")
            return []

    def listener(self) -> SyncListener:
        return SyncListener(self._client, self._require_view())
