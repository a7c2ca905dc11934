"""SQLAlchemy ORM model for the CalendarEntry entity."""

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cuadrante.infrastructure.database.base import Base


class CalendarEntryModel(Base):
    """ORM model — maps to the 'calendar_entries' table."""

    __tablename__ = "calendar_entries"

    # Zero-padded YYYY-MM-DD; string order equals date order.
    date_key: Mapped[str] = mapped_column(String(10), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    editor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    image_urls: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<CalendarEntryModel(date_key='{self.date_key}', editor='{self.editor}')>"
