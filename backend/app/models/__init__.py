"""SQLAlchemy models for Qué cocino hoy.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from app.models.favorite import Favorite
from app.models.image_usage import ImageUsage
from app.models.search_history import SearchHistory
from app.models.shared_recipe import SharedRecipe
from app.models.subscription import Subscription
from app.models.user import User

__all__ = [
    "Favorite",
    "ImageUsage",
    "SearchHistory",
    "SharedRecipe",
    "Subscription",
    "User",
]
