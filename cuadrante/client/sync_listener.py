"""Consumes the server's event stream and feeds it into a SessionView."""

import logging

from cuadrante.client.api_client import CalendarApiClient
from cuadrante.client.session_view import SessionView

logger = logging.getLogger(__name__)


class SyncListener:
    """Applies every streamed event to one view until the stream ends.

    Events for other months are discarded by the view itself. A dropped
    connection is not retried here; callers reconnect and refetch the
    month, since state is rebuilt from scratch on reconnect.
    """

    def __init__(self, client: CalendarApiClient, view: SessionView):
        self._client = client
        self._view = view
        self.applied = 0
        self.ignored = 0

    async def run(self) -> None:
        logger.info("Listening for sync events")
        async for event_type, data in self._client.events():
            try:
                changed = self._view.apply_event(event_type, data)
            except (KeyError, TypeError, ValueError):
                logger.warning("Malformed %s event: %r", event_type, data)
                self.ignored += 1
                continue
            if changed:
                self.applied += 1
            else:
                self.ignored += 1
        logger.info(
            "Sync stream closed (applied=%d, ignored=%d)", self.applied, self.ignored
        )
