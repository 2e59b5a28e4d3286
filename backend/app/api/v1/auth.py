"""Auth API router — Google sign-in, token refresh, current user."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_active_user
from app.auth.jwt import REFRESH, create_token_pair, decode_token
from app.auth.oauth import get_google_user_info, oauth
from app.config import settings
from app.database import get_db
from app.models.user import User
from app.schemas.auth import RefreshRequest, TokenResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


async def find_or_create_google_user(
    db: AsyncSession,
    email: str,
    name: str,
    avatar_url: str | None,
    provider_id: str,
) -> User:
    """Look up user by email; create if missing, refresh profile fields if found."""
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is not None:
        user.auth_provider = "google"
        user.auth_provider_id = provider_id
        if avatar_url:
            user.avatar_url = avatar_url
        await db.flush()
        return user

    # New users start on the free tier, with no ledger entry until checkout
    user = User(
        email=email,
        name=name,
        avatar_url=avatar_url,
        auth_provider="google",
        auth_provider_id=provider_id,
        is_premium=False,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    logger.info("Created user %s for %s", user.id, email)
    return user


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)) -> TokenResponse:
    """Exchange a valid refresh token for a new token pair."""
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired refresh token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_token(body.refresh_token)
    except JWTError:
        raise invalid from None

    if payload.get("type") != REFRESH:
        raise invalid

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise invalid from None

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise invalid

    return TokenResponse(**create_token_pair(str(user.id)))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_active_user)) -> UserResponse:
    """Return the currently authenticated user's profile."""
    return UserResponse.model_validate(current_user)


@router.get("/google")
async def google_login(request: Request) -> RedirectResponse:
    """Redirect to Google's OAuth consent screen."""
    return await oauth.google.authorize_redirect(request, settings.google_redirect_uri)  # type: ignore[return-value]


@router.get("/google/callback")
async def google_callback(request: Request, db: AsyncSession = Depends(get_db)) -> RedirectResponse:
    """Handle Google's callback, find or create the user, redirect to the web app with tokens."""
    try:
        token = await oauth.google.authorize_access_token(request)
    except Exception as exc:
        logger.warning("Google OAuth callback failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No se pudo iniciar sesión con Google. Intentá nuevamente.",
        ) from None

    user_info = get_google_user_info(token)
    if not user_info["email"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="La cuenta de Google no informó un email.",
        )

    user = await find_or_create_google_user(
        db=db,
        email=user_info["email"],
        name=user_info["name"],
        avatar_url=user_info["avatar_url"],
        provider_id=user_info["provider_id"],
    )

    tokens = create_token_pair(str(user.id))
    redirect_url = (
        f"{settings.frontend_url}/auth/callback"
        f"?access_token={tokens['access_token']}"
        f"&refresh_token={tokens['refresh_token']}"
    )
    return RedirectResponse(url=redirect_url)
