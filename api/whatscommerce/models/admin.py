"""
Admin Models — Pydantic request bodies for the dashboard CRUD endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from whatscommerce.models.commerce import (
    Conversation,
    ConversationStatus,
    CustomResponse,
    MessageMetadata,
    MessageType,
    Product,
    SenderType,
)

# =============================================================================
# LIST ITEMS
# =============================================================================


class ProductListItem(Product):
    """Product row with its display status."""

    status_label: str


class ConversationListItem(Conversation):
    """Conversation row with its display status and age."""

    status_label: str
    last_activity_label: str


# =============================================================================
# PRODUCTS
# =============================================================================


class ProductCreate(BaseModel):
    """Request body for adding a catalog item."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    price: float = Field(..., ge=0)
    category_id: int | None = None
    stock_quantity: int = Field(default=0, ge=0)
    is_active: bool = True


class ProductUpdate(BaseModel):
    """Request body for editing a catalog item. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    price: float | None = Field(None, ge=0)
    category_id: int | None = None
    stock_quantity: int | None = Field(None, ge=0)
    is_active: bool | None = None


# =============================================================================
# CONVERSATIONS / MESSAGES
# =============================================================================


class ConversationCreate(BaseModel):
    """Request body for opening a conversation manually."""

    customer_phone: str = Field(..., min_length=1, max_length=50)
    customer_name: str | None = Field(None, max_length=200)
    status: ConversationStatus = "active"
    last_message: str | None = None
    last_message_at: datetime | None = None


class ConversationUpdate(BaseModel):
    """Request body for changing a conversation's status."""

    status: str


class MessageCreate(BaseModel):
    """Request body for posting a message into a conversation."""

    sender_type: SenderType = "human"
    content: str = Field(..., min_length=1, max_length=4000)
    message_type: MessageType = "text"
    metadata: MessageMetadata | None = None

    @model_validator(mode="after")
    def _metadata_matches_type(self) -> MessageCreate:
        if self.metadata is not None and self.metadata.kind != self.message_type:
            raise ValueError(
                f"metadata of kind {self.metadata.kind!r} on a {self.message_type!r} message"
            )
        return self


# =============================================================================
# ORDERS
# =============================================================================


class OrderCreate(BaseModel):
    """Request body for recording an order."""

    status: str = Field(default="pending", min_length=1, max_length=50)
    total_amount: float = Field(..., ge=0)
    customer_name: str | None = Field(None, max_length=200)
    customer_phone: str | None = Field(None, max_length=50)


class OrderUpdate(BaseModel):
    """Request body for moving an order to another status."""

    status: str = Field(..., min_length=1, max_length=50)


# =============================================================================
# SETTINGS / PROFILE
# =============================================================================


class AISettingsUpdate(BaseModel):
    """Partial update of the assistant configuration."""

    assistant_name: str | None = Field(None, min_length=1, max_length=100)
    tone_of_voice: str | None = Field(None, max_length=50)
    language: str | None = Field(None, max_length=20)
    auto_respond: bool | None = None
    product_recommendations: bool | None = None
    order_processing: bool | None = None
    welcome_message: str | None = Field(None, max_length=1000)
    away_message: str | None = Field(None, max_length=1000)
    custom_responses: list[CustomResponse] | None = Field(None, max_length=100)


class ProfileUpdate(BaseModel):
    """Partial update of the account profile."""

    username: str | None = Field(None, max_length=100)
    avatar_url: str | None = Field(None, max_length=500)
    bio: str | None = Field(None, max_length=1000)


def changes(body: BaseModel) -> dict[str, Any]:
    """Fields explicitly set on a partial-update body, JSON-ready."""
    return body.model_dump(mode="json", exclude_unset=True, exclude_none=True)


class AuthenticatedUser(BaseModel):
    """Dashboard user resolved from a verified access token."""

    id: UUID
    email: str | None = None
