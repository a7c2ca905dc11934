"""Pydantic DTOs (Data Transfer Objects) for calendar entries."""

from typing import Any

from pydantic import BaseModel, Field

from cuadrante.domain.entities import EDITABLE_FIELDS


class CalendarEntryUpsert(BaseModel):
    """Partial write — only the fields actually sent are replaced."""

    name: str | None = Field(None, max_length=500, examples=["Ana"])
    address: str | None = Field(None, max_length=1000)
    phone: str | None = Field(None, max_length=100, examples=["555-1234"])
    image_urls: list[str] | None = None
    editor: str = Field(..., min_length=1, max_length=255, examples=["Bob"])

    def changes(self) -> dict[str, Any]:
        """The supplied editable fields, excluding anything left unset."""
        return self.model_dump(exclude_unset=True, include=set(EDITABLE_FIELDS))


class CalendarEntryCreate(CalendarEntryUpsert):
    """Explicit create — fails if the date already has an entry."""

    date_key: str = Field(..., examples=["2025-09-18"])


class ImageChange(BaseModel):
    url: str = Field(..., min_length=1, examples=["/uploads/image-1726650000-42.jpg"])
    editor: str = Field(..., min_length=1, max_length=255)


class CalendarEntryResponse(BaseModel):
    """Schema returned to the client."""

    date_key: str
    name: str
    address: str
    phone: str
    editor: str | None
    image_urls: list[str]

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str


class UploadResponse(BaseModel):
    image_url: str
