from .calendar_entry import CalendarEntry, EDITABLE_FIELDS
from .change_log import ChangeAction, ChangeLogRecord, FieldChange, UNKNOWN_ACTOR
from .user import User, UserRole

__all__ = [
    "CalendarEntry",
    "EDITABLE_FIELDS",
    "ChangeAction",
    "ChangeLogRecord",
    "FieldChange",
    "UNKNOWN_ACTOR",
    "User",
    "UserRole",
]
