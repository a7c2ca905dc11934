from .calendar_entry_repository import SQLAlchemyCalendarEntryRepository
from .change_log_repository import SQLAlchemyChangeLogRepository
from .user_repository import SQLAlchemyUserRepository

__all__ = [
    "SQLAlchemyCalendarEntryRepository",
    "SQLAlchemyChangeLogRepository",
    "SQLAlchemyUserRepository",
]
