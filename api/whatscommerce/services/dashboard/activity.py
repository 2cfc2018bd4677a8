"""
Recent Activity — merges the latest conversations and orders into one feed.

Entries are ordered by their original timestamps and only labelled
afterwards; the human-readable labels are never compared.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from uuid import UUID

from whatscommerce.config import settings
from whatscommerce.models.commerce import Conversation, Order
from whatscommerce.models.dashboard import ActivityEntry
from whatscommerce.services.commerce.conversations import list_conversations
from whatscommerce.services.commerce.orders import list_orders
from whatscommerce.services.dashboard.recency import (
    format_currency,
    format_relative_age,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

CONVERSATIONS_IN_FEED = 3
ORDERS_IN_FEED = 2
MAX_FEED_ENTRIES = 4


def default_order_label(order: Order) -> str:
    return order.customer_name or order.customer_phone or "Customer"


def collect_activity(
    conversations: Sequence[Conversation],
    orders: Sequence[Order],
    order_label: Callable[[Order], str] | None = None,
    currency_symbol: str = "€",
) -> list[tuple[datetime | None, ActivityEntry]]:
    """Conversation entries then order entries, each paired with its timestamp.

    relative_time_label is left empty; build_recent_activity fills it in
    after sorting.
    """
    label_for = order_label or default_order_label
    collected: list[tuple[datetime | None, ActivityEntry]] = []

    for conv in conversations[:CONVERSATIONS_IN_FEED]:
        collected.append(
            (
                parse_timestamp(conv.last_message_at or conv.created_at),
                ActivityEntry(
                    kind="message",
                    customer_label=conv.customer_name or conv.customer_phone,
                    action_text=conv.last_message or "started a conversation",
                    relative_time_label="",
                ),
            )
        )

    for order in orders[:ORDERS_IN_FEED]:
        collected.append(
            (
                parse_timestamp(order.created_at),
                ActivityEntry(
                    kind="order",
                    customer_label=label_for(order),
                    action_text="placed an order",
                    relative_time_label="",
                    amount_label=format_currency(order.total_amount, currency_symbol),
                ),
            )
        )

    return collected


def build_recent_activity(
    conversations: Sequence[Conversation],
    orders: Sequence[Order],
    order_label: Callable[[Order], str] | None = None,
    now: datetime | None = None,
    currency_symbol: str = "€",
    limit: int = MAX_FEED_ENTRIES,
) -> list[ActivityEntry]:
    """Newest-first feed of at most `limit` (never more than 4) entries."""
    collected = collect_activity(conversations, orders, order_label, currency_symbol)

    # Stable sort: newest first, undated entries last
    dated = [item for item in collected if item[0] is not None]
    undated = [item for item in collected if item[0] is None]
    dated.sort(key=lambda item: item[0], reverse=True)  # type: ignore[arg-type, return-value]

    feed: list[ActivityEntry] = []
    for ts, entry in (dated + undated)[: max(0, min(limit, MAX_FEED_ENTRIES))]:
        feed.append(
            entry.model_copy(
                update={"relative_time_label": format_relative_age(ts, now=now)}
            )
        )
    return feed


async def get_recent_activity(owner_id: UUID) -> list[ActivityEntry]:
    """Fetch and merge the feed; an unreadable source gives an empty feed."""
    try:
        conversations, orders = await asyncio.gather(
            list_conversations(owner_id),
            list_orders(owner_id),
        )
    except Exception:
        logger.exception("Dashboard: failed to load activity for %s", owner_id)
        return []

    return build_recent_activity(
        conversations,
        orders,
        currency_symbol=settings.currency_symbol,
        limit=settings.activity_feed_limit,
    )
