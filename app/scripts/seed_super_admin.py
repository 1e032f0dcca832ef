"""Seed the database with a SUPERADMIN user and print a development token.

Usage:
    source .venv/bin/activate
    python -m app.scripts.seed_super_admin [clerk_id] [email]
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from sqlalchemy import select

import app.models  # noqa: F401
from app.core.database import Base, async_session, engine
from app.dependencies import create_access_token
from app.models.user import User


async def seed(clerk_id: str = "dev_superadmin", email: str = "superadmin@campus.local"):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        result = await session.execute(select(User).where(User.clerk_id == clerk_id))
        user = result.scalar_one_or_none()

        if user is None:
            user = User(
                clerk_id=clerk_id,
                email=email,
                name="Super Admin",
                onboarded=True,
                user_type="SUPERADMIN",
            )
            session.add(user)
            print("Super admin created!")
        elif user.user_type != "SUPERADMIN":
            user.user_type = "SUPERADMIN"
            print(f"Existing user {user.email} promoted to SUPERADMIN")
        else:
            print(f"Super admin already exists: {user.email}")

        await session.commit()
        await session.refresh(user)

        token = create_access_token(user.clerk_id, email=user.email, name=user.name)
        print(f"  Clerk ID: {user.clerk_id}")
        print(f"  ID: {user.id}")
        print(f"\nDevelopment bearer token:\n{token}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed(*sys.argv[1:3]))
