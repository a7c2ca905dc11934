"""Domain entity — one scheduling record per calendar day."""

from dataclasses import dataclass, field, fields
from typing import Any

# Fields a caller may overwrite through an upsert.
EDITABLE_FIELDS = ("name", "address", "phone", "image_urls")


@dataclass
class CalendarEntry:
    """Scheduling details for a single date.

    A date without a stored record behaves exactly like an entry whose
    fields are all empty, so "empty" is derived rather than stored.
    """

    date_key: str
    name: str = ""
    address: str = ""
    phone: str = ""
    editor: str | None = None
    image_urls: list[str] = field(default_factory=list)

    @classmethod
    def blank(cls, date_key: str) -> "CalendarEntry":
        return cls(date_key=date_key)

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "CalendarEntry":
        """Rebuild an entry from a stored snapshot, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["image_urls"] = list(values.get("image_urls") or [])
        return cls(**values)

    @property
    def is_empty(self) -> bool:
        return not (
            self.name.strip()
            or self.address.strip()
            or self.phone.strip()
            or self.image_urls
        )

    def apply(self, changes: dict[str, Any], editor: str | None) -> None:
        """Replace the supplied top-level fields and stamp the editor.

        Lists are replaced whole; there is no deep merge.
        """
        for key, value in changes.items():
            if key not in EDITABLE_FIELDS:
                continue
            if key == "image_urls":
                value = list(value or [])
            elif value is None:
                value = ""
            setattr(self, key, value)
        self.editor = editor

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict copy suitable for the change log and event payloads."""
        return {
            "date_key": self.date_key,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "editor": self.editor,
            "image_urls": list(self.image_urls),
        }
