"""Shared API dependencies — single import point for all routers.

Re-exports database session, authentication and plan gating dependencies so
that router modules can import everything they need from one place::

    from app.api.deps import get_db, get_current_active_user
"""

from app.auth.dependencies import get_current_active_user, get_current_user
from app.billing.dependencies import check_image_quota, require_premium
from app.database import get_db

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "require_premium",
    "check_image_quota",
]
