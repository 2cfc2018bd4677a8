"""
Dashboard Metrics — KPI aggregation over conversations, orders and products.

compute_dashboard_metrics() is pure. get_dashboard_stats() does the fetching
and substitutes fallback_metrics() when any of the three reads fails, so the
dashboard always has something to render.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from uuid import UUID

from whatscommerce.config import settings
from whatscommerce.models.commerce import Conversation, Order, Product
from whatscommerce.models.dashboard import DashboardMetrics
from whatscommerce.services.commerce.catalog import list_products
from whatscommerce.services.commerce.conversations import list_conversations
from whatscommerce.services.commerce.orders import list_orders

logger = logging.getLogger(__name__)

# Only these statuses count toward revenue; anything else is ignored
COMPLETED_ORDER_STATUSES: frozenset[str] = frozenset({"completed", "delivered"})

AI_RESPONSE_RATE_FALLBACK = 94.2


def compute_dashboard_metrics(
    conversations: Sequence[Conversation],
    orders: Sequence[Order],
    products: Sequence[Product],
    ai_rate_fallback: float = AI_RESPONSE_RATE_FALLBACK,
) -> DashboardMetrics:
    """Reduce the three collections to the dashboard KPI record."""
    total_revenue = sum(
        (o.total_amount for o in orders if o.status in COMPLETED_ORDER_STATUSES),
        0.0,
    )

    active_customers = len(
        {c.customer_phone for c in conversations if c.status == "active"}
    )

    total_conversations = len(conversations)
    ai_handled = sum(1 for c in conversations if c.status == "ai_handled")
    if total_conversations > 0:
        ai_response_rate = 100 * ai_handled / total_conversations
    else:
        ai_response_rate = ai_rate_fallback

    # No per-product activity flag feeds the KPI card yet
    total_products = len(products)

    return DashboardMetrics(
        total_revenue=total_revenue,
        active_customers=active_customers,
        total_conversations=total_conversations,
        ai_response_rate=ai_response_rate,
        total_products=total_products,
        active_products=total_products,
        total_orders=len(orders),
        pending_orders=sum(1 for o in orders if o.status == "pending"),
    )


def fallback_metrics(
    ai_rate_fallback: float = AI_RESPONSE_RATE_FALLBACK,
) -> DashboardMetrics:
    """Zeroed metrics shown when the source data can't be read."""
    return DashboardMetrics(
        total_revenue=0.0,
        active_customers=0,
        total_conversations=0,
        ai_response_rate=ai_rate_fallback,
        total_products=0,
        active_products=0,
        total_orders=0,
        pending_orders=0,
    )


async def get_dashboard_stats(owner_id: UUID) -> DashboardMetrics:
    """Fetch the account's records concurrently and aggregate them.

    Never raises for a fetch failure: any failed read yields the fallback
    record, never a partial mix.
    """
    try:
        conversations, orders, products = await asyncio.gather(
            list_conversations(owner_id),
            list_orders(owner_id),
            list_products(owner_id),
        )
    except Exception:
        logger.exception("Dashboard: failed to load records for %s", owner_id)
        return fallback_metrics(settings.ai_response_rate_fallback)

    return compute_dashboard_metrics(
        conversations,
        orders,
        products,
        ai_rate_fallback=settings.ai_response_rate_fallback,
    )
