"""
Billing Models — subscription plans shown on the pricing screen.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Plan(BaseModel):
    """A monthly subscription tier."""

    id: str
    name: str
    monthly_price: float
    description: str
    features: list[str] = Field(default_factory=list)
    popular: bool = False


class PlanCatalog(BaseModel):
    """All plans plus the per-conversation overage price."""

    currency_symbol: str
    overage_price_per_conversation: float
    plans: list[Plan]
