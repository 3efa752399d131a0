"""User Service — accounts for students, professors and admins.

Invariants:
    - email is unique (case-insensitive, stored lower-cased); student_id is unique when set
    - Duplicates raise DuplicateResourceError (409) before any write
    - Listing by role orders by name; the full listing is newest first
    - Deleting a user cascades to their enrollments and submissions
"""

import logging
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from unierp.core.domain_types import UserRole
from unierp.core.errors import DuplicateResourceError, ResourceNotFoundError
from unierp.models.user import User
from unierp.schemas.partial_update import apply_update
from unierp.schemas.users import (
    UserCreate, UserResponse, UserStatistics, UserUpdate,
)

logger = logging.getLogger(__name__)

RECENT_USERS = 5


class UserService:
    """CRUD and head counts over the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(self, role: UserRole | None = None) -> list[User]:
        query = select(User)
        if role is None:
            query = query.order_by(User.created_at.desc())
        else:
            query = query.where(User.role == role.value).order_by(User.name)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_user(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def get_by_email(self, email: str) -> User:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower()),
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", email)
        return user

    async def create_user(self, body: UserCreate) -> User:
        await self._ensure_unique(body.email, body.student_id)
        user = User(**body.model_dump())
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"User created with role {user.role}", extra={"user_id": user.id})
        return user

    async def update_user(self, user_id: UUID, body: UserUpdate) -> User:
        user = await self.get_user(user_id)
        changes = body.changes()
        await self._ensure_unique(
            changes.get("email"), changes.get("student_id"), exclude=user.id,
        )
        apply_update(user, body, "user")
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def delete_user(self, user_id: UUID) -> None:
        user = await self.get_user(user_id)
        await self.db.delete(user)
        await self.db.commit()
        logger.info("User deleted", extra={"user_id": user_id})

    async def statistics(self) -> UserStatistics:
        result = await self.db.execute(
            select(User.role, func.count()).group_by(User.role),
        )
        counts = dict(result.all())
        recent = await self.db.execute(
            select(User).order_by(User.created_at.desc()).limit(RECENT_USERS),
        )
        return UserStatistics(
            total_users=sum(counts.values()),
            student_count=counts.get(UserRole.STUDENT.value, 0),
            professor_count=counts.get(UserRole.PROFESSOR.value, 0),
            admin_count=counts.get(UserRole.ADMIN.value, 0),
            recent_users=[
                UserResponse.model_validate(u) for u in recent.scalars().all()
            ],
        )

    async def _ensure_unique(
        self,
        email: str | None,
        student_id: str | None,
        exclude: UUID | None = None,
    ) -> None:
        for column, field_name, value in (
            (User.email, "email", email),
            (User.student_id, "student ID", student_id),
        ):
            if value is None:
                continue
            query = select(User.id).where(column == value)
            if exclude is not None:
                query = query.where(User.id != exclude)
            if (await self.db.execute(query)).first() is not None:
                raise DuplicateResourceError("user", field_name, value)
