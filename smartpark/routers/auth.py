"""
Authentication routes.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from smartpark.auth import (
    TokenData,
    create_access_token,
    get_current_active_user,
    get_token_data,
    hash_password,
    purge_expired_revocations,
    verify_password,
)
from smartpark.database import get_db
from smartpark.models.user import RevokedToken, User
from smartpark.schemas.base import ItemResponse, MessageResponse
from smartpark.schemas.user import (
    AuthenticatedUser,
    LoginRequest,
    User as UserSchema,
    UserCreate,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _with_token(user: User) -> AuthenticatedUser:
    data = UserSchema.model_validate(user).model_dump()
    return AuthenticatedUser(**data, token=create_access_token(user.username))


@router.post(
    "/register",
    response_model=ItemResponse[AuthenticatedUser],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new staff account and log it in.
    """
    result = await db.execute(
        select(User).where(
            or_(User.username == user_in.username, User.email == user_in.email)
        )
    )
    existing = result.scalars().first()
    if existing:
        field = "Username" if existing.username == user_in.username else "Email"
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{field} already registered"
        )

    db_user = User(
        username=user_in.username,
        email=user_in.email,
        hashed_password=hash_password(user_in.password),
    )
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)

    log.info("Registered user %s", db_user.username)
    return {"data": _with_token(db_user), "message": "Registration successful"}


@router.post("/login", response_model=ItemResponse[AuthenticatedUser])
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Exchange a username and password for a bearer token.
    """
    result = await db.execute(select(User).where(User.username == credentials.username))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(credentials.password, user.hashed_password):
        log.warning("Failed login for %s", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
        )

    log.info("User %s logged in", user.username)
    return {"data": _with_token(user), "message": "Login successful"}


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token_data: TokenData = Depends(get_token_data),
    db: AsyncSession = Depends(get_db),
):
    """
    Revoke the token used for this request.
    """
    purged = await purge_expired_revocations(db)
    if purged:
        log.info("Purged %d expired revoked tokens", purged)
    db.add(RevokedToken(jti=token_data.jti, expires_at=token_data.expires_at))
    await db.commit()

    log.info("User %s logged out", token_data.username)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=ItemResponse[UserSchema])
async def me(current_user: User = Depends(get_current_active_user)):
    """
    Get the authenticated user.
    """
    return {"data": UserSchema.model_validate(current_user), "message": ""}
