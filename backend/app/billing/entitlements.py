"""Entitlement gate — free vs. Chef Pro capability checks.

Pure functions of the cached premium flag and static plan constants. Every
feature that behaves differently for premium users asks here.
"""

from app.billing.plans import FREE_FAVORITES_LIMIT

FREE_DIET_FILTERS: frozenset[str] = frozenset({"vegetarian"})
PREMIUM_DIET_FILTERS: frozenset[str] = frozenset({"vegan", "gluten_free"})

_DIET_FILTER_ALIASES = {
    "vegetarian": "vegetarian",
    "vegetariano": "vegetarian",
    "vegan": "vegan",
    "vegano": "vegan",
    "gluten_free": "gluten_free",
    "gluten-free": "gluten_free",
    "glutenfree": "gluten_free",
    "sin_tacc": "gluten_free",
}


def normalize_diet_filter(filter_kind: str) -> str | None:
    """Canonical filter name (``glutenFree`` → ``gluten_free``), None if unknown."""
    return _DIET_FILTER_ALIASES.get(filter_kind.strip().lower().replace(" ", "_"))


def can_add_favorite(current_favorite_count: int, is_premium: bool) -> bool:
    """Premium users have no cap; free users stop at FREE_FAVORITES_LIMIT."""
    if is_premium:
        return True
    return current_favorite_count < FREE_FAVORITES_LIMIT


def can_use_diet_filter(filter_kind: str, is_premium: bool) -> bool:
    """Vegetarian is free; vegan and gluten-free require premium. Unknown filters are refused."""
    kind = normalize_diet_filter(filter_kind)
    if kind in FREE_DIET_FILTERS:
        return True
    if kind in PREMIUM_DIET_FILTERS:
        return is_premium
    return False


def can_generate_image(is_premium: bool, requested_by_user: bool) -> bool:
    """Images are generated only for premium users who asked for one."""
    return is_premium and requested_by_user
