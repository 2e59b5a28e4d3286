"""Shared recipe model — public permalinks keyed by recipe id."""

from datetime import datetime

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class SharedRecipe(Base):
    """A recipe published under ``/recipe/{recipe_id}``. Never carries an image."""

    __tablename__ = "shared_recipes"

    recipe_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    recipe: Mapped[dict] = mapped_column(JSON, nullable=False)
    shared_at: Mapped[datetime] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return f"<SharedRecipe(recipe_id={self.recipe_id!r})>"
