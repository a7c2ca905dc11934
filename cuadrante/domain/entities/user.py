"""Domain entity — a team member who can log in to the calendar."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4


class UserRole(str, Enum):
    """Controls which affordances the client shows. Not enforced server-side."""

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


@dataclass
class User:
    """Team member identified at login by a short ``identifier`` alone."""

    name: str
    identifier: str
    role: UserRole = UserRole.VIEWER
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def can_edit(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.EDITOR)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "identifier": self.identifier,
            "role": self.role.value,
        }
