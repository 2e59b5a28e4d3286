"""Search history — the last few ingredient sets a user searched with."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import utcnow
from app.models.search_history import SearchHistory
from app.models.user import User

logger = logging.getLogger(__name__)

MAX_HISTORY_ITEMS = 3


def _signature(ingredients: list[str]) -> tuple[str, ...]:
    """Order-insensitive identity of an ingredient set."""
    return tuple(sorted(ingredients))


async def _entries(db: AsyncSession, user: User) -> list[SearchHistory]:
    result = await db.execute(
        select(SearchHistory)
        .where(SearchHistory.user_id == user.id)
        .order_by(SearchHistory.created_at.desc())
    )
    return list(result.scalars().all())


async def get_history(db: AsyncSession, user: User) -> list[list[str]]:
    """Newest first. Rows that are not lists of strings are skipped."""
    return [
        list(entry.ingredients)
        for entry in await _entries(db, user)
        if isinstance(entry.ingredients, list) and all(isinstance(i, str) for i in entry.ingredients)
    ]


async def add_to_history(db: AsyncSession, user: User, ingredients: list[str]) -> list[list[str]]:
    """Put a set on top, dropping an equal older set and anything past the limit."""
    cleaned = [i.strip() for i in ingredients if i and i.strip()]
    if not cleaned:
        return await get_history(db, user)

    signature = _signature(cleaned)
    for entry in await _entries(db, user):
        if isinstance(entry.ingredients, list) and _signature([str(i) for i in entry.ingredients]) == signature:
            await db.delete(entry)
    await db.flush()

    db.add(SearchHistory(user_id=user.id, ingredients=cleaned, created_at=utcnow()))
    await db.flush()

    for stale in (await _entries(db, user))[MAX_HISTORY_ITEMS:]:
        await db.delete(stale)
    await db.flush()

    return await get_history(db, user)
