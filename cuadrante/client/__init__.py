from .api_client import CalendarApiClient, iter_sse_events
from .session import CalendarSession
from .session_view import SessionView
from .sync_listener import SyncListener

__all__ = [
    "CalendarApiClient",
    "iter_sse_events",
    "CalendarSession",
    "SessionView",
    "SyncListener",
]
