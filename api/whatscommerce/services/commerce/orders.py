"""
Order Service — orders placed through the WhatsApp assistant.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException

from whatscommerce.models.admin import OrderCreate
from whatscommerce.models.commerce import Order
from whatscommerce.services.records import RecordSourceError, get_record_store

logger = logging.getLogger(__name__)

_TABLE = "orders"


async def list_orders(owner_id: UUID, status: str | None = None) -> list[Order]:
    """Orders newest first."""
    store = await get_record_store()
    filters = {"user_id": str(owner_id)}
    if status:
        filters["status"] = status

    try:
        rows = await store.fetch_all(_TABLE, filters, order_by="created_at", desc=True)
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to fetch orders")

    return [Order(**row) for row in rows]


async def create_order(owner_id: UUID, body: OrderCreate) -> Order:
    store = await get_record_store()
    record = {**body.model_dump(mode="json", exclude_none=True), "user_id": str(owner_id)}
    try:
        row = await store.insert(_TABLE, record)
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to create order")

    logger.info("Orders: order %s created (%s)", row.get("id"), body.status)
    return Order(**row)


async def update_order_status(owner_id: UUID, order_id: UUID, status: str) -> Order:
    """Order statuses are free-form; only the owner can change them."""
    store = await get_record_store()
    try:
        row = await store.update(
            _TABLE, str(order_id), {"status": status}, filters={"user_id": str(owner_id)}
        )
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to update order")

    if row is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return Order(**row)
