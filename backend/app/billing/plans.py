"""Plan definitions — Chef Pro pricing and free-tier limits."""

from dataclasses import dataclass

from app.config import settings

FREE_FAVORITES_LIMIT = 3


@dataclass(frozen=True)
class Plan:
    """A paid Chef Pro plan as offered at checkout."""

    plan_type: str
    plan_name: str
    amount: int  # whole currency units (ARS has no cents in practice)
    currency: str
    frequency: int
    frequency_type: str  # Mercado Pago auto_recurring: "months" or "days"


PLANS: dict[str, Plan] = {
    "monthly": Plan(
        plan_type="monthly",
        plan_name="Chef Pro Mensual",
        amount=3500,
        currency=settings.mercadopago_currency,
        frequency=1,
        frequency_type="months",
    ),
    "yearly": Plan(
        plan_type="yearly",
        plan_name="Chef Pro Anual",
        amount=29400,
        currency=settings.mercadopago_currency,
        frequency=12,
        frequency_type="months",
    ),
}

VALID_PLAN_TYPES: set[str] = set(PLANS.keys())


def get_plan(plan_type: str) -> Plan | None:
    """Get a plan by type. Returns None for anything not in the catalogue."""
    return PLANS.get(plan_type)
