"""Search history API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.models.user import User
from app.schemas.recipe import AddHistoryRequest, HistoryResponse
from app.services.history_service import add_to_history, get_history

router = APIRouter(prefix="/api/v1/history", tags=["history"])


@router.get("", response_model=HistoryResponse)
async def read_history(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> HistoryResponse:
    """Recent ingredient sets, newest first."""
    return HistoryResponse(history=await get_history(db, current_user))


@router.post("", response_model=HistoryResponse)
async def add_history(
    body: AddHistoryRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> HistoryResponse:
    """Remember an ingredient set; an empty list changes nothing."""
    return HistoryResponse(history=await add_to_history(db, current_user, body.ingredients))
