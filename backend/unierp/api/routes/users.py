"""User Routes — account CRUD, role filtering and head counts.

Invariants:
    - Duplicate email or student ID -> 409 (DuplicateResourceError)
    - PATCH bodies are explicit partial updates (UserUpdate); unknown fields -> 400
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from unierp.api.dependencies import get_user_service
from unierp.core.domain_types import UserRole
from unierp.schemas.users import UserCreate, UserResponse, UserStatistics, UserUpdate
from unierp.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    role: UserRole | None = None,
    users: UserService = Depends(get_user_service),
):
    """All users newest first, or one role ordered by name."""
    return await users.list_users(role)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate, users: UserService = Depends(get_user_service),
):
    return await users.create_user(body)


@router.get("/statistics", response_model=UserStatistics)
async def user_statistics(users: UserService = Depends(get_user_service)):
    return await users.statistics()


@router.get("/lookup", response_model=UserResponse)
async def find_user_by_email(
    email: str, users: UserService = Depends(get_user_service),
):
    return await users.get_by_email(email)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    return await users.get_user(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    users: UserService = Depends(get_user_service),
):
    return await users.update_user(user_id, body)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    await users.delete_user(user_id)
