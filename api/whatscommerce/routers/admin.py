"""
Dashboard Admin Router — Authenticated endpoints for the dashboard screens.

Endpoints:
  GET   /admin/me                               — Profile
  PATCH /admin/me                               — Update profile
  GET   /admin/dashboard/summary                — KPI cards
  GET   /admin/dashboard/activity               — Recent activity feed
  GET   /admin/products                         — Catalog (search / category)
  GET   /admin/products/stats                   — Catalog header numbers
  POST  /admin/products                         — Add product
  PATCH /admin/products/{id}                    — Edit product
  DELETE /admin/products/{id}                   — Remove product
  GET   /admin/conversations                    — Conversations (status / search)
  POST  /admin/conversations                    — Open conversation
  GET   /admin/conversations/{id}               — Conversation detail
  PATCH /admin/conversations/{id}               — Change status
  GET   /admin/conversations/{id}/messages      — Transcript
  POST  /admin/conversations/{id}/messages      — Send message
  GET   /admin/orders                           — Orders (status)
  POST  /admin/orders                           — Record order
  PATCH /admin/orders/{id}                      — Change order status
  GET   /admin/settings/assistant               — Assistant settings
  PUT   /admin/settings/assistant               — Save assistant settings
"""

from __future__ import annotations

import hashlib
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from whatscommerce.config import settings
from whatscommerce.models.admin import (
    AISettingsUpdate,
    AuthenticatedUser,
    ConversationCreate,
    ConversationListItem,
    ConversationUpdate,
    MessageCreate,
    OrderCreate,
    OrderUpdate,
    ProductCreate,
    ProductListItem,
    ProductUpdate,
    ProfileUpdate,
)
from whatscommerce.models.commerce import (
    AISettings,
    Conversation,
    Message,
    Order,
    Product,
    Profile,
)
from whatscommerce.models.dashboard import ActivityEntry, DashboardMetrics, ProductStats
from whatscommerce.services.auth import verify_dashboard_jwt
from whatscommerce.services.commerce import assistant, catalog, conversations, orders
from whatscommerce.services.dashboard.activity import get_recent_activity
from whatscommerce.services.dashboard.metrics import get_dashboard_stats
from whatscommerce.services.dashboard.recency import format_relative_age
from whatscommerce.services.rate_limiter import get_rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# RATE LIMITING DEPENDENCY
# =============================================================================


async def _admin_rate_limit(request: Request) -> None:
    """Rate limit dashboard requests per access token."""
    auth_header = request.headers.get("Authorization", "")
    token_hash = hashlib.sha256(auth_header.encode()).hexdigest()[:16]

    limiter = get_rate_limiter()
    if not limiter.check("admin", token_hash):
        raise HTTPException(
            status_code=429,
            detail="Rate limit exceeded",
            headers={"Retry-After": str(limiter.retry_after("admin", token_hash))},
        )


# =============================================================================
# PROFILE
# =============================================================================


@router.get("/me")
async def get_me(
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Profile:
    """Get the signed-in account's profile."""
    return await assistant.get_profile(user.id)


@router.patch("/me")
async def update_me(
    body: ProfileUpdate,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Profile:
    return await assistant.update_profile(user.id, body)


# =============================================================================
# DASHBOARD
# =============================================================================


@router.get("/dashboard/summary")
async def dashboard_summary(
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> DashboardMetrics:
    """KPI cards. Falls back to zeroed metrics when the data can't be read."""
    return await get_dashboard_stats(user.id)


@router.get("/dashboard/activity")
async def dashboard_activity(
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> list[ActivityEntry]:
    """Latest conversations and orders, newest first."""
    return await get_recent_activity(user.id)


# =============================================================================
# PRODUCTS
# =============================================================================


@router.get("/products")
async def list_products(
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
    search: str | None = Query(default=None, max_length=200),
    category_id: int | None = Query(default=None),
) -> list[ProductListItem]:
    products = await catalog.list_products(user.id, search=search, category_id=category_id)
    return [
        ProductListItem(
            **p.model_dump(),
            status_label=catalog.product_status_label(p, settings.low_stock_threshold),
        )
        for p in products
    ]


@router.get("/products/stats")
async def product_stats(
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> ProductStats:
    products = await catalog.list_products(user.id)
    return catalog.compute_product_stats(products, settings.low_stock_threshold)


@router.post("/products", status_code=201)
async def create_product(
    body: ProductCreate,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Product:
    return await catalog.create_product(user.id, body)


@router.patch("/products/{product_id}")
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Product:
    return await catalog.update_product(user.id, product_id, body)


@router.delete("/products/{product_id}", status_code=204)
async def delete_product(
    product_id: UUID,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Response:
    await catalog.delete_product(user.id, product_id)
    return Response(status_code=204)


# =============================================================================
# CONVERSATIONS
# =============================================================================


@router.get("/conversations")
async def list_conversations(
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
    status: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
) -> list[ConversationListItem]:
    """List conversations, most recently active first."""
    items = await conversations.list_conversations(user.id, status=status, search=search)
    return [
        ConversationListItem(
            **c.model_dump(),
            status_label=conversations.status_label(c.status),
            last_activity_label=format_relative_age(c.last_message_at or c.created_at),
        )
        for c in items
    ]


@router.post("/conversations", status_code=201)
async def create_conversation(
    body: ConversationCreate,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Conversation:
    return await conversations.create_conversation(user.id, body)


@router.get("/conversations/{conversation_id}")
async def get_conversation(
    conversation_id: UUID,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Conversation:
    return await conversations.get_conversation(user.id, conversation_id)


@router.patch("/conversations/{conversation_id}")
async def update_conversation(
    conversation_id: UUID,
    body: ConversationUpdate,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Conversation:
    return await conversations.update_conversation_status(
        user.id, conversation_id, body.status
    )


@router.get("/conversations/{conversation_id}/messages")
async def list_messages(
    conversation_id: UUID,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> list[Message]:
    return await conversations.list_messages(user.id, conversation_id)


@router.post("/conversations/{conversation_id}/messages", status_code=201)
async def send_message(
    conversation_id: UUID,
    body: MessageCreate,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Message:
    """Post a reply (typically from a human agent) into the thread."""
    return await conversations.create_message(user.id, conversation_id, body)


# =============================================================================
# ORDERS
# =============================================================================


@router.get("/orders")
async def list_orders(
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
    status: str | None = Query(default=None),
) -> list[Order]:
    return await orders.list_orders(user.id, status=status)


@router.post("/orders", status_code=201)
async def create_order(
    body: OrderCreate,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Order:
    return await orders.create_order(user.id, body)


@router.patch("/orders/{order_id}")
async def update_order(
    order_id: UUID,
    body: OrderUpdate,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> Order:
    return await orders.update_order_status(user.id, order_id, body.status)


# =============================================================================
# ASSISTANT SETTINGS
# =============================================================================


@router.get("/settings/assistant")
async def get_assistant_settings(
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> AISettings:
    return await assistant.get_ai_settings(user.id)


@router.put("/settings/assistant")
async def save_assistant_settings(
    body: AISettingsUpdate,
    _rate: None = Depends(_admin_rate_limit),
    user: AuthenticatedUser = Depends(verify_dashboard_jwt),
) -> AISettings:
    return await assistant.update_ai_settings(user.id, body)
