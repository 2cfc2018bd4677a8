"""
Subscription plans offered on the pricing screen.
"""

from __future__ import annotations

from whatscommerce.config import settings
from whatscommerce.models.billing import Plan, PlanCatalog

OVERAGE_PRICE_PER_CONVERSATION = 0.05

PLANS: tuple[Plan, ...] = (
    Plan(
        id="starter",
        name="Starter",
        monthly_price=9.0,
        description="Perfect for small businesses getting started",
        features=[
            "100 conversations per month",
            "Basic AI responses",
            "Product catalog management",
            "WhatsApp integration",
            "Email support",
            "Basic analytics",
        ],
    ),
    Plan(
        id="pro",
        name="Pro",
        monthly_price=19.0,
        description="Ideal for growing businesses",
        features=[
            "1,000 conversations per month",
            "Advanced AI features",
            "Custom AI training",
            "Analytics dashboard",
            "Priority support",
            "Multi-language support",
            "Custom responses",
            "Order processing",
        ],
        popular=True,
    ),
    Plan(
        id="business",
        name="Business",
        monthly_price=29.0,
        description="For established businesses with high volume",
        features=[
            "Unlimited conversations",
            "Advanced AI customization",
            "Custom integrations",
            "Advanced analytics",
            "24/7 phone support",
            "Dedicated account manager",
            "API access",
            "White-label options",
        ],
    ),
)


def get_plan_catalog() -> PlanCatalog:
    return PlanCatalog(
        currency_symbol=settings.currency_symbol,
        overage_price_per_conversation=OVERAGE_PRICE_PER_CONVERSATION,
        plans=list(PLANS),
    )
