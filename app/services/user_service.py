"""Users bridged from the external identity provider."""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging import logger
from app.models.college import College
from app.models.user import USER_TYPES, User
from app.schemas import UserUpdate
from app.services.common import get_or_404

DETAIL_LOAD_OPTIONS = (selectinload(User.college), selectinload(User.colleges_created))


def profile_from_event(data: Dict[str, Any]) -> Dict[str, Any]:
    """Pull email, name and avatar out of an identity-provider user payload."""
    emails = data.get("email_addresses") or []
    email = data.get("email") or (emails[0].get("email_address") if emails else None)
    name = data.get("name") or " ".join(
        part for part in (data.get("first_name"), data.get("last_name")) if part
    )
    return {
        "email": email or "",
        "name": name or None,
        "image": data.get("image_url") or data.get("image"),
    }


class UserService:
    """Find-or-create on sign-in, plus admin management of roles and membership."""

    async def get_by_clerk_id(self, db: AsyncSession, clerk_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.clerk_id == clerk_id))
        return result.scalar_one_or_none()

    async def find_or_create(
        self, db: AsyncSession, clerk_id: str, profile: Optional[Dict[str, Any]] = None
    ) -> User:
        """Idempotent under concurrent first sign-ins for the same identity.

        A unique-constraint violation means another request created the row
        first; it is re-fetched instead of failing.
        """
        user = await self.get_by_clerk_id(db, clerk_id)
        if user is not None:
            return user

        profile = profile or {}
        try:
            async with db.begin_nested():
                user = User(
                    clerk_id=clerk_id,
                    email=profile.get("email") or "",
                    name=profile.get("name"),
                    image=profile.get("image"),
                    onboarded=False,
                    user_type="GUEST",
                )
                db.add(user)
        except IntegrityError:
            logger.info(f"User {clerk_id} was created concurrently, re-fetching")
            user = await self.get_by_clerk_id(db, clerk_id)
            if user is None:
                raise
            return user

        await db.refresh(user)
        logger.info(f"User created from identity provider: {clerk_id}")
        return user

    async def get_detail(self, db: AsyncSession, user_id: UUID) -> User:
        result = await db.execute(
            select(User)
            .where(User.id == user_id)
            .options(*DETAIL_LOAD_OPTIONS)
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def get_detail_by_clerk_id(self, db: AsyncSession, clerk_id: str) -> User:
        result = await db.execute(
            select(User).where(User.clerk_id == clerk_id).options(*DETAIL_LOAD_OPTIONS)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(self, db: AsyncSession, user_type: Optional[str] = None) -> List[User]:
        query = select(User).options(*DETAIL_LOAD_OPTIONS)
        if user_type:
            query = query.where(User.user_type == user_type.upper())
        result = await db.execute(query.order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def set_role(self, db: AsyncSession, user_id: UUID, role: Optional[str]) -> User:
        if not role:
            raise ValidationError("Role is required")
        role = role.upper()
        if role not in USER_TYPES:
            raise ValidationError("Invalid role", {"allowed": list(USER_TYPES)})

        user = await get_or_404(db, User, user_id, "User")
        if user.user_type == role:
            raise ValidationError("User already has this role")

        user.user_type = role
        await db.flush()
        await db.refresh(user)
        logger.info(f"User {user.email or user.clerk_id} is now {role}")
        return user

    async def move_to_college(
        self, db: AsyncSession, user_id: UUID, college_id: Optional[UUID]
    ) -> User:
        if not college_id:
            raise ValidationError("College ID is required")
        await get_or_404(db, College, college_id, "College")
        user = await get_or_404(db, User, user_id, "User")

        user.college_id = college_id
        await db.flush()
        return await self.get_detail(db, user_id)

    async def update(self, db: AsyncSession, user_id: UUID, data: UserUpdate) -> User:
        user = await self.get_detail(db, user_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(user, key, value)
        await db.flush()
        return await self.get_detail(db, user_id)

    async def delete(self, db: AsyncSession, user_id: UUID) -> User:
        user = await get_or_404(db, User, user_id, "User")
        await db.delete(user)
        await db.flush()
        return user


user_service = UserService()
