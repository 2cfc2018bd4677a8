"""
Catalog Service — product CRUD and the stats shown on the products screen.

Products are scoped to the owning account when settings.scope_products_by_owner
is on. With it off every account sees the whole products table, which is how
the legacy schema (no user_id column) behaved.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from fastapi import HTTPException

from whatscommerce.config import settings
from whatscommerce.models.admin import ProductCreate, ProductUpdate, changes
from whatscommerce.models.commerce import Product
from whatscommerce.models.dashboard import ProductStats
from whatscommerce.services.records import RecordSourceError, get_record_store

logger = logging.getLogger(__name__)

_TABLE = "products"


def _owner_filter(owner_id: UUID) -> dict[str, Any]:
    if settings.scope_products_by_owner:
        return {"user_id": str(owner_id)}
    return {}


def matches_search(product: Product, search: str | None) -> bool:
    """Case-insensitive match on name or description."""
    if not search:
        return True
    needle = search.lower()
    return needle in product.name.lower() or needle in (product.description or "").lower()


async def list_products(
    owner_id: UUID,
    search: str | None = None,
    category_id: int | None = None,
) -> list[Product]:
    """Products newest first, optionally filtered by search text and category."""
    store = await get_record_store()
    filters = _owner_filter(owner_id)
    if category_id is not None:
        filters["category_id"] = category_id

    try:
        rows = await store.fetch_all(_TABLE, filters, order_by="created_at", desc=True)
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to fetch products")

    products = [Product(**row) for row in rows]
    return [p for p in products if matches_search(p, search)]


async def create_product(owner_id: UUID, body: ProductCreate) -> Product:
    store = await get_record_store()
    record = body.model_dump(mode="json")
    if settings.scope_products_by_owner:
        record["user_id"] = str(owner_id)

    try:
        row = await store.insert(_TABLE, record)
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to create product")

    logger.info("Catalog: product %s created", row.get("id"))
    return Product(**row)


async def update_product(
    owner_id: UUID, product_id: UUID, body: ProductUpdate
) -> Product:
    """Apply a partial update. 404 when the product isn't visible to the owner."""
    store = await get_record_store()
    filters = _owner_filter(owner_id)

    payload = changes(body)
    try:
        if not payload:
            row = await store.fetch_one(_TABLE, {"id": str(product_id), **filters})
        else:
            row = await store.update(_TABLE, str(product_id), payload, filters=filters)
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to update product")

    if row is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return Product(**row)


async def delete_product(owner_id: UUID, product_id: UUID) -> None:
    store = await get_record_store()
    filters = _owner_filter(owner_id)

    try:
        existing = await store.fetch_one(_TABLE, {"id": str(product_id), **filters})
        if existing is None:
            raise HTTPException(status_code=404, detail="Product not found")
        await store.delete(_TABLE, str(product_id), filters=filters)
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to delete product")

    logger.info("Catalog: product %s deleted", product_id)


# =============================================================================
# PRESENTATION HELPERS
# =============================================================================


def compute_product_stats(
    products: Sequence[Product], low_stock_threshold: int = 10
) -> ProductStats:
    """Totals for the products screen header."""
    return ProductStats(
        total_products=len(products),
        active_products=sum(1 for p in products if p.is_active),
        low_stock=sum(
            1 for p in products if 0 < p.stock_quantity < low_stock_threshold
        ),
        total_value=sum((p.price * p.stock_quantity for p in products), 0.0),
    )


def product_status_label(product: Product, low_stock_threshold: int = 10) -> str:
    if not product.is_active:
        return "Inactive"
    if product.stock_quantity == 0:
        return "Out of Stock"
    if product.stock_quantity < low_stock_threshold:
        return "Low Stock"
    return "Active"
