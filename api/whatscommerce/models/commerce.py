"""
Commerce Models — rows from the Supabase tables behind the dashboard.

Read models trust the source: amounts and quantities are not range-checked
here. Request bodies in models/admin.py carry the validation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

ConversationStatus = Literal["active", "resolved", "pending", "ai_handled"]
SenderType = Literal["customer", "ai", "human"]
MessageType = Literal["text", "product_recommendation", "order_summary"]

CONVERSATION_STATUSES: frozenset[str] = frozenset(
    {"active", "resolved", "pending", "ai_handled"}
)

# =============================================================================
# CONVERSATIONS
# =============================================================================


class Conversation(BaseModel):
    """One customer dialogue thread."""

    id: UUID
    user_id: UUID | None = None
    customer_phone: str
    customer_name: str | None = None
    status: ConversationStatus = "active"
    last_message: str | None = None
    last_message_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# =============================================================================
# MESSAGES
# =============================================================================


class TextMetadata(BaseModel):
    """Plain text messages carry no structured payload."""

    kind: Literal["text"] = "text"


class ProductRecommendationMetadata(BaseModel):
    """Products the assistant recommended in this message."""

    kind: Literal["product_recommendation"] = "product_recommendation"
    product_ids: list[UUID] = Field(default_factory=list)


class OrderSummaryMetadata(BaseModel):
    """Order the assistant summarised in this message."""

    kind: Literal["order_summary"] = "order_summary"
    order_id: UUID | None = None
    total_amount: float | None = None


MessageMetadata = Annotated[
    Union[TextMetadata, ProductRecommendationMetadata, OrderSummaryMetadata],
    Field(discriminator="kind"),
]


def _tag_metadata(data: Any) -> Any:
    """Stored metadata has no tag; derive it from message_type."""
    if isinstance(data, dict):
        meta = data.get("metadata")
        if isinstance(meta, dict) and "kind" not in meta:
            kind = data.get("message_type") or "text"
            data = {**data, "metadata": {**meta, "kind": kind}}
    return data


class Message(BaseModel):
    """A single message inside a conversation."""

    id: UUID
    conversation_id: UUID | None = None
    sender_type: SenderType
    content: str
    message_type: MessageType = "text"
    metadata: MessageMetadata | None = None
    created_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_metadata_kind(cls, data: Any) -> Any:
        return _tag_metadata(data)

    @model_validator(mode="after")
    def _metadata_matches_type(self) -> Message:
        if self.metadata is not None and self.metadata.kind != self.message_type:
            raise ValueError(
                f"metadata of kind {self.metadata.kind!r} on a {self.message_type!r} message"
            )
        return self


# =============================================================================
# ORDERS / PRODUCTS
# =============================================================================


class Order(BaseModel):
    """One commerce transaction."""

    id: UUID
    user_id: UUID | None = None
    status: str = ""
    total_amount: float = 0.0
    customer_name: str | None = None
    customer_phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _null_columns_are_empty(cls, data: Any) -> Any:
        # NULL columns read as the empty status and a zero amount
        if isinstance(data, dict):
            if data.get("status") is None:
                data = {**data, "status": ""}
            if data.get("total_amount") is None:
                data = {**data, "total_amount": 0.0}
        return data


class Product(BaseModel):
    """One catalog item."""

    id: UUID
    user_id: UUID | None = None
    name: str
    description: str | None = None
    price: float = 0.0
    category_id: int | None = None
    stock_quantity: int = 0
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _null_stock_is_zero(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("stock_quantity") is None:
            data = {**data, "stock_quantity": 0}
        return data


# =============================================================================
# SETTINGS / PROFILE
# =============================================================================


class CustomResponse(BaseModel):
    """Canned reply the assistant sends when a trigger phrase matches."""

    trigger: str = Field(..., min_length=1, max_length=200)
    response: str = Field(..., min_length=1, max_length=2000)


class AISettings(BaseModel):
    """Per-account configuration of the WhatsApp assistant."""

    id: UUID | None = None
    user_id: UUID
    assistant_name: str = "Assistant"
    tone_of_voice: str = "friendly"
    language: str = "en"
    auto_respond: bool = True
    product_recommendations: bool = True
    order_processing: bool = True
    welcome_message: str = "Hi! How can I help you today?"
    away_message: str = "Thanks for your message, we will get back to you soon."
    custom_responses: list[CustomResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _null_custom_responses(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("custom_responses") is None:
            data = {**data, "custom_responses": []}
        return data


class Profile(BaseModel):
    """Account profile shown in the settings screen."""

    id: UUID
    username: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    updated_at: datetime | None = None
