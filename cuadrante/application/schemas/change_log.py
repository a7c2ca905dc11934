"""Pydantic DTOs for the change log report."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from cuadrante.domain.entities import ChangeAction, ChangeLogRecord


class FieldChangeResponse(BaseModel):
    field: str
    previous: Any = None
    new: Any = None


class ChangeLogResponse(BaseModel):
    """A log record plus the field-level diff computed for display."""

    id: int | None
    timestamp: datetime
    user: str
    action: ChangeAction
    entry_date_key: str
    previous_data: dict[str, Any] | None
    new_data: dict[str, Any] | None
    changes: list[FieldChangeResponse]

    @classmethod
    def from_record(cls, record: ChangeLogRecord) -> "ChangeLogResponse":
        return cls(
            id=record.id,
            timestamp=record.timestamp,
            user=record.user,
            action=record.action,
            entry_date_key=record.entry_date_key,
            previous_data=record.previous_data,
            new_data=record.new_data,
            changes=[
                FieldChangeResponse(field=c.field, previous=c.previous, new=c.new)
                for c in record.field_changes()
            ],
        )
