from .calendar_entry import CalendarEntryModel
from .change_log import ChangeLogModel
from .user import UserModel

__all__ = [
    "CalendarEntryModel",
    "ChangeLogModel",
    "UserModel",
]
