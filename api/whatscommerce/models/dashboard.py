"""
Dashboard Models — Pydantic response models for metrics endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

# =============================================================================
# SUMMARY (KPI CARDS)
# =============================================================================


class DashboardMetrics(BaseModel):
    """Aggregate KPIs for the dashboard summary cards."""

    total_revenue: float  # completed + delivered orders only
    active_customers: int  # distinct phones with an active conversation
    total_conversations: int
    ai_response_rate: float  # percentage, 0–100
    total_products: int
    active_products: int
    total_orders: int
    pending_orders: int


# =============================================================================
# ACTIVITY FEED
# =============================================================================


class ActivityEntry(BaseModel):
    """One row in the recent activity feed."""

    kind: Literal["message", "order"]
    customer_label: str
    action_text: str
    relative_time_label: str
    amount_label: str | None = None


# =============================================================================
# CATALOG
# =============================================================================


class ProductStats(BaseModel):
    """Header numbers for the products screen."""

    total_products: int
    active_products: int
    low_stock: int
    total_value: float  # sum of price × stock
