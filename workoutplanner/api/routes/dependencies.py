"""Shared dependencies for API routes."""
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from workoutplanner.core.exceptions import AuthenticationError
from workoutplanner.db.database import get_db
from workoutplanner.models.user import User
from workoutplanner.security.access import AccessContext
from workoutplanner.security.jwt_utils import decode_access_token
from workoutplanner.services.user_service import UserService


async def get_current_user(
    authorization: str | None = Header(None, alias="Authorization"),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user, syncing it on first sign-in.

    Raises:
        AuthenticationError: If the header is missing or the token is invalid
    """
    if not authorization:
        raise AuthenticationError("No authorization header provided")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise AuthenticationError("Invalid authorization header format")
    if scheme.lower() != "bearer":
        raise AuthenticationError("Invalid authentication scheme")

    claims = decode_access_token(token)
    if claims is None or not claims.get("sub"):
        raise AuthenticationError("Invalid or expired token", code="AUTH_002")

    return await UserService(db).sync_user(claims)


async def get_access_context(user: User = Depends(get_current_user)) -> AccessContext:
    return AccessContext.for_user(user)
