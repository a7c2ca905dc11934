"""Domain entity — immutable audit record of a single calendar mutation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

UNKNOWN_ACTOR = "unknown"

# Snapshot keys that identify the record rather than describe it.
_IDENTITY_KEYS = frozenset({"date_key"})


class ChangeAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class FieldChange:
    """One field that differs between two snapshots."""

    field: str
    previous: Any
    new: Any


@dataclass
class ChangeLogRecord:
    """Raw before/after snapshots of one write.

    ``previous_data`` is absent for creates and ``new_data`` is absent for
    deletes. Field-level differences are computed on demand by
    :meth:`field_changes`; they are never persisted.
    """

    action: ChangeAction
    entry_date_key: str
    user: str = UNKNOWN_ACTOR
    previous_data: dict[str, Any] | None = None
    new_data: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: int | None = None

    def field_changes(self) -> list[FieldChange]:
        """Fields of ``new_data`` whose value differs from ``previous_data``.

        Only meaningful for updates; creates and deletes return an empty list.
        """
        if self.action != ChangeAction.UPDATE or self.new_data is None:
            return []
        previous = self.previous_data or {}
        changes: list[FieldChange] = []
        for key, new_value in self.new_data.items():
            if key in _IDENTITY_KEYS:
                continue
            old_value = previous.get(key)
            if old_value != new_value:
                changes.append(FieldChange(field=key, previous=old_value, new=new_value))
        return changes
