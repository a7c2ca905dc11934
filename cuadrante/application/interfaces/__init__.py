from .calendar_entry_repository import CalendarEntryRepository
from .change_log_repository import ChangeLogRepository
from .unit_of_work import UnitOfWork
from .user_repository import UserRepository

__all__ = [
    "CalendarEntryRepository",
    "ChangeLogRepository",
    "UnitOfWork",
    "UserRepository",
]
