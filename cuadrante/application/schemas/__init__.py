from .calendar_entry import (
    CalendarEntryCreate,
    CalendarEntryResponse,
    CalendarEntryUpsert,
    ImageChange,
    MessageResponse,
    UploadResponse,
)
from .change_log import ChangeLogResponse, FieldChangeResponse
from .user import LoginRequest, UserCreate, UserResponse

__all__ = [
    "CalendarEntryCreate",
    "CalendarEntryResponse",
    "CalendarEntryUpsert",
    "ImageChange",
    "MessageResponse",
    "UploadResponse",
    "ChangeLogResponse",
    "FieldChangeResponse",
    "LoginRequest",
    "UserCreate",
    "UserResponse",
]
