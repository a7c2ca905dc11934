"""HTTP client for the calendar API — implements every call a session makes.

Uses httpx for JSON requests, multipart uploads and the SSE event stream.
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from cuadrante.application.schemas import (
    CalendarEntryResponse,
    ChangeLogResponse,
    UserResponse,
)
from cuadrante.domain.entities import (
    CalendarEntry,
    ChangeLogRecord,
    User,
    UserRole,
)
from cuadrante.domain.exceptions import ApiRequestError

logger = logging.getLogger(__name__)


def _to_user(payload: dict[str, Any]) -> User:
    data = UserResponse.model_validate(payload)
    return User(id=data.id, name=data.name, identifier=data.identifier, role=data.role)


def _to_entry(payload: dict[str, Any]) -> CalendarEntry:
    data = CalendarEntryResponse.model_validate(payload)
    return CalendarEntry(**data.model_dump())


def _to_record(payload: dict[str, Any]) -> ChangeLogRecord:
    data = ChangeLogResponse.model_validate(payload)
    return ChangeLogRecord(
        id=data.id,
        timestamp=data.timestamp,
        user=data.user,
        action=data.action,
        entry_date_key=data.entry_date_key,
        previous_data=data.previous_data,
        new_data=data.new_data,
    )


async def iter_sse_events(lines: AsyncIterator[str]) -> AsyncIterator[tuple[str, Any]]:
    """Group raw SSE lines into ``(event_type, decoded_data)`` pairs.

    Comment lines (``:``) are skipped; a blank line ends each event.
    """
    event_type = "message"
    data_lines: list[str] = []
    async for line in lines:
        if not line:
            if data_lines:
                raw = "\n".join(data_lines)
                try:
                    yield event_type, json.loads(raw)
                except json.JSONDecodeError:
                    logger.warning("Dropping undecodable %s event: %r", event_type, raw)
            event_type = "message"
            data_lines = []
            continue
        if line.startswith(":"):
            continue
        if line.startswith("event:"):
            event_type = line[len("event:"):].strip()
        elif line.startswith("data:"):
            data_lines.append(line[len("data:"):].lstrip())
    if data_lines:
        try:
            yield event_type, json.loads("\n".join(data_lines))
        except json.JSONDecodeError:
            logger.warning("Dropping undecodable trailing %s event", event_type)


class CalendarApiClient:
    """Infrastructure adapter — talks to the calendar HTTP API.

    Pass ``http_client`` to share a connection pool (or a mock transport in
    tests); otherwise a short-lived client is created per call.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._base_url = base_url.rstrip("/") + "/api/v1"
        self._http_client = http_client
        self._timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.request(method, f"{self._base_url}{path}", **kwargs)
            except httpx.HTTPError as exc:
                raise ApiRequestError(0, f"Request failed: {exc}") from exc

            if response.status_code >= 400:
                self._raise_api_error(response)
            return response.json()
        finally:
            if should_close:
                await client.aclose()

    @staticmethod
    def _raise_api_error(response: httpx.Response) -> None:
        try:
            detail = response.json().get("detail", response.text)
        except (json.JSONDecodeError, AttributeError):
            detail = response.text
        raise ApiRequestError(response.status_code, str(detail))

    # ── Users ───────────────────────────────────────────────────────

    async def login(self, identifier: str) -> User:
        return _to_user(await self._request("POST", "/login", json={"identifier": identifier}))

    async def list_users(self) -> list[User]:
        return [_to_user(u) for u in await self._request("GET", "/users")]

    async def add_user(self, name: str, identifier: str, role: UserRole) -> User:
        payload = {"name": name, "identifier": identifier, "role": role.value}
        return _to_user(await self._request("POST", "/users", json=payload))

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}")

    # ── Calendar ────────────────────────────────────────────────────

    async def load_month(self, year: int, month: int) -> list[CalendarEntry]:
        return [_to_entry(e) for e in await self._request("GET", f"/calendar/{year}/{month}")]

    async def get_entry(self, date_key: str) -> CalendarEntry:
        return _to_entry(await self._request("GET", f"/calendar/{date_key}"))

    async def save_entry(self, date_key: str, payload: dict[str, Any]) -> CalendarEntry:
        return _to_entry(await self._request("PUT", f"/calendar/{date_key}", json=payload))

    async def delete_entry(self, date_key: str) -> None:
        await self._request("DELETE", f"/calendar/{date_key}")

    async def upload_image(self, content: bytes, filename: str) -> str:
        files = {"image": (filename, content)}
        data = await self._request("POST", "/upload", files=files)
        return data["image_url"]

    async def report(self, year: int, month: int) -> list[ChangeLogRecord]:
        return [_to_record(r) for r in await self._request("GET", f"/logs/{year}/{month}")]

    # ── Sync stream ─────────────────────────────────────────────────

    async def events(self) -> AsyncIterator[tuple[str, Any]]:
        """Yield ``(event_type, data)`` from the server's SSE stream until it closes."""
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            async with client.stream(
                "GET", f"{self._base_url}/events", timeout=None
            ) as response:
                if response.status_code != 200:
                    body = await response.aread()
                    raise ApiRequestError(response.status_code, body.decode(errors="replace"))

                async for event in iter_sse_events(response.aiter_lines()):
                    yield event
        finally:
            if should_close:
                await client.aclose()
