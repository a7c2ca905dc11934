"""Pydantic DTOs for users and login."""

from pydantic import BaseModel, Field

from cuadrante.domain.entities import UserRole


class LoginRequest(BaseModel):
    identifier: str = Field(..., min_length=1, max_length=100, examples=["3434"])


class UserCreate(BaseModel):
    """Schema for creating a new team member."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Ana"])
    identifier: str = Field(..., min_length=1, max_length=100, examples=["1234"])
    role: UserRole = UserRole.VIEWER


class UserResponse(BaseModel):
    id: str
    name: str
    identifier: str
    role: UserRole

    model_config = {"from_attributes": True}
