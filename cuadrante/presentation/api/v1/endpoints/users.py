"""Login and user management endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from cuadrante.application.schemas import (
    LoginRequest,
    MessageResponse,
    UserCreate,
    UserResponse,
)
from cuadrante.application.services import UserService
from cuadrante.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from cuadrante.infrastructure.dependencies import get_user_service

router = APIRouter(tags=["Users"])


def _to_response(user) -> UserResponse:
    return UserResponse.model_validate(user, from_attributes=True)


@router.post("/login", response_model=UserResponse)
async def login(
    data: LoginRequest,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Look a user up by identifier. There is no password."""
    try:
        user = await service.login(data.identifier)
    except EntityNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Identifier not found"
        )
    return _to_response(user)


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    return [_to_response(u) for u in await service.list_users()]


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    try:
        user = await service.create_user(data)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _to_response(user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    try:
        await service.delete_user(user_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return MessageResponse(message="User deleted")
