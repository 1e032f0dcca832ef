"""JWT authentication and role-based authorization.

Tokens are issued by the external identity provider; ``sub`` carries the
provider's user id. The matching local user is created on first sight.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.models.user import User
from app.services.user_service import user_service


# ─── JWT tokens ──────────────────────────────────────────────────────────────

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    subject: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT access token (development and tests; production tokens come from the provider)."""
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES))
    payload: Dict[str, Any] = {"sub": subject, "exp": expire}
    if email:
        payload["email"] = email
    if name:
        payload["name"] = name
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Invalid or expired token")
    if not payload.get("sub"):
        raise UnauthorizedError("Invalid or expired token")
    return payload


# ─── Auth dependency ─────────────────────────────────────────────────────────

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode the bearer token and return (or create) the matching user."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    payload = decode_token(credentials.credentials)
    profile = {
        "email": payload.get("email"),
        "name": payload.get("name"),
        "image": payload.get("picture"),
    }
    return await user_service.find_or_create(db, payload["sub"], profile)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but anonymous callers get None."""
    if credentials is None:
        return None
    try:
        payload = decode_token(credentials.credentials)
    except UnauthorizedError:
        return None
    return await user_service.get_by_clerk_id(db, payload["sub"])


# ─── Role guards ─────────────────────────────────────────────────────────────

def require_role(*allowed_roles: str):
    """Dependency factory: require the current user to have one of the allowed roles."""

    async def _guard(current_user: User = Depends(get_current_user)) -> User:
        if current_user.user_type not in allowed_roles:
            raise ForbiddenError(
                f"Requires role: {', '.join(allowed_roles)}. You have: {current_user.user_type}"
            )
        return current_user

    return _guard


require_super_admin = require_role("SUPERADMIN")
require_admin = require_role("ADMIN", "SUPERADMIN")
