from .calendar_entry_service import CalendarEntryService
from .change_log_service import ChangeLogService
from .sync_bus import SyncBus, SyncEventType
from .user_service import UserService

__all__ = [
    "CalendarEntryService",
    "ChangeLogService",
    "SyncBus",
    "SyncEventType",
    "UserService",
]
