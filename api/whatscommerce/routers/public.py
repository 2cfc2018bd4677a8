"""
Public Router — unauthenticated endpoints for the landing and pricing pages.
"""

from __future__ import annotations

from fastapi import APIRouter

from whatscommerce.models.billing import PlanCatalog
from whatscommerce.services.plans import get_plan_catalog

router = APIRouter()


@router.get("/plans")
async def list_plans() -> PlanCatalog:
    """Subscription tiers and overage pricing."""
    return get_plan_catalog()
