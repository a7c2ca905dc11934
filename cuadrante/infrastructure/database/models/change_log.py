"""SQLAlchemy ORM model for change log records."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from cuadrante.infrastructure.database.base import Base


class ChangeLogModel(Base):
    """ORM model — maps to the 'change_logs' table. Insert-only."""

    __tablename__ = "change_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    user: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(10), nullable=False)
    entry_date_key: Mapped[str] = mapped_column(String(10), nullable=False)
    previous_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    new_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index("ix_change_logs_timestamp", "timestamp"),
        Index("ix_change_logs_entry_date_key", "entry_date_key"),
    )

    def __repr__(self) -> str:
        return (
            f"<ChangeLogModel(id={self.id}, action='{self.action}', "
            f"entry='{self.entry_date_key}', user='{self.user}')>"
        )
