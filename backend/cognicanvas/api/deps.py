"""
FastAPI dependencies for the request user and database session.

Key patterns:
1. get_current_user: resolves the User explicitly for every request
2. User-scoped queries: all crud functions accept user_id to enforce ownership
3. No global "current user" state - always pass user explicitly

Resolution order:
- JWT in the 'access_token' cookie or an Authorization: Bearer header
- otherwise the configured default user, when allow_default_user is on
- otherwise 401
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated
from uuid import UUID

from fastapi import Cookie, Depends, Header, HTTPException, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from cognicanvas.config import get_settings
from cognicanvas.db import crud
from cognicanvas.db.models import User
from cognicanvas.db.session import get_db

settings = get_settings()


# =============================================================================
# JWT UTILITIES
# =============================================================================


def create_access_token(user_id: UUID) -> str:
    """
    Create a JWT access token for a user.

    Payload holds only 'sub' (the user id) and 'exp'.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {
        "sub": str(user_id),
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID | None:
    """
    Decode and validate a JWT access token.

    Returns user_id if valid, None if invalid/expired.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        user_id_str = payload.get("sub")
        if user_id_str is None:
            return None
        return UUID(user_id_str)
    except (JWTError, ValueError):
        return None


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> str | None:
    """Token from the cookie, then the Authorization header. None if absent."""
    if access_token:
        return access_token

    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    return None


async def get_current_user(
    token: Annotated[str | None, Depends(get_token_from_request)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Return the user every operation runs as.

    Raises 401 if a token is present but invalid, names an unknown user, or
    no token is present and default-user mode is off.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if token is None:
        if not settings.allow_default_user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return await crud.get_or_create_user(
            db, settings.default_user_email, settings.default_user_name
        )

    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_exception

    user = await crud.get_user(db, user_id)
    if user is None:
        raise credentials_exception

    return user


# Type alias for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
