"""JWT access tokens issued by the identity provider."""
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from workoutplanner.config.settings import get_settings
from workoutplanner.models.enums import UserRole

settings = get_settings()


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT access token.

    Args:
        data: Claims to encode, at least ``{"sub": external_id}``. ``role``,
            ``username``, ``email``, ``given_name`` and ``family_name`` are
            used to populate the user on first sign-in.
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    role = data.get("role", UserRole.USER)
    to_encode.update({"exp": expire, "role": getattr(role, "value", role)})

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode a JWT access token, returning None if it is invalid or expired."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
