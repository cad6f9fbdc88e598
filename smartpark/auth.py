"""
Password hashing, JWT tokens and the current-user dependencies.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from smartpark.config import get_settings
from smartpark.database import get_db
from smartpark.models.user import RevokedToken, User

log = logging.getLogger(__name__)

settings = get_settings()

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class TokenData:
    """Claims read back from a verified token."""
    username: str
    jti: str
    expires_at: datetime


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(username: str, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed access token for a user."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {"sub": username, "jti": uuid.uuid4().hex, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def credentials_exception(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> TokenData:
    """Verify a token's signature and expiry and return its claims."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.ExpiredSignatureError:
        raise credentials_exception("Session expired, please log in again")
    except jwt.InvalidTokenError:
        raise credentials_exception("Invalid authentication token")

    username = payload.get("sub")
    jti = payload.get("jti")
    if not username or not jti:
        raise credentials_exception("Invalid authentication token")

    return TokenData(
        username=username,
        jti=jti,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


async def purge_expired_revocations(db: AsyncSession) -> int:
    """Forget revoked token ids whose tokens have expired anyway. Returns the number removed."""
    result = await db.execute(
        delete(RevokedToken).where(RevokedToken.expires_at < datetime.now(timezone.utc))
    )
    return result.rowcount


async def get_token_data(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> TokenData:
    """Read the bearer token from the request and reject revoked ones."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise credentials_exception()

    token_data = decode_access_token(credentials.credentials)

    revoked = await db.get(RevokedToken, token_data.jti)
    if revoked is not None:
        log.warning("Rejected revoked token for user %s", token_data.username)
        raise credentials_exception("Session has been logged out")

    return token_data


async def get_current_user(
    token_data: TokenData = Depends(get_token_data),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Load the user named by the bearer token."""
    result = await db.execute(select(User).where(User.username == token_data.username))
    user = result.scalar_one_or_none()
    if user is None:
        raise credentials_exception("User no longer exists")
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Reject users that have been deactivated."""
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
        )
    return current_user
