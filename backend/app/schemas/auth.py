"""Pydantic v2 request/response schemas for authentication endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RefreshRequest(BaseModel):
    """Schema for token refresh."""

    refresh_token: str


class TokenResponse(BaseModel):
    """JWT token pair returned on successful authentication."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Public user profile, including the cached premium flag."""

    id: uuid.UUID
    email: str
    name: str
    avatar_url: str | None = None
    auth_provider: str
    is_active: bool
    is_premium: bool
    premium_since: datetime | None = None
    premium_ended_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
