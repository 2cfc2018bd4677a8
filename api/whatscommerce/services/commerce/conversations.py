"""
Conversation Service — WhatsApp conversation threads and their messages.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import HTTPException

from whatscommerce.models.admin import ConversationCreate, MessageCreate
from whatscommerce.models.commerce import CONVERSATION_STATUSES, Conversation, Message
from whatscommerce.services.records import RecordSourceError, get_record_store

logger = logging.getLogger(__name__)

_CONVERSATIONS = "conversations"
_MESSAGES = "messages"

_STATUS_LABELS = {
    "active": "Active",
    "ai_handled": "AI Handled",
    "resolved": "Resolved",
    "pending": "Pending",
}


def status_label(status: str) -> str:
    return _STATUS_LABELS.get(status, "Unknown")


def matches_search(conversation: Conversation, search: str | None) -> bool:
    """Case-insensitive match on customer name, phone or last message."""
    if not search:
        return True
    needle = search.lower()
    haystack = (
        conversation.customer_name or "",
        conversation.customer_phone,
        conversation.last_message or "",
    )
    return any(needle in field.lower() for field in haystack)


async def list_conversations(
    owner_id: UUID,
    status: str | None = None,
    search: str | None = None,
) -> list[Conversation]:
    """Conversations by most recent message, threads without messages last."""
    store = await get_record_store()
    filters = {"user_id": str(owner_id)}
    if status:
        filters["status"] = status

    try:
        rows = await store.fetch_all(
            _CONVERSATIONS,
            filters,
            order_by="last_message_at",
            desc=True,
            nulls_last=True,
        )
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to fetch conversations")

    conversations = [Conversation(**row) for row in rows]
    return [c for c in conversations if matches_search(c, search)]


async def get_conversation(owner_id: UUID, conversation_id: UUID) -> Conversation:
    """Single conversation owned by the account, else 404."""
    store = await get_record_store()
    try:
        row = await store.fetch_one(
            _CONVERSATIONS,
            {"id": str(conversation_id), "user_id": str(owner_id)},
        )
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to fetch conversation")

    if row is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return Conversation(**row)


async def create_conversation(owner_id: UUID, body: ConversationCreate) -> Conversation:
    store = await get_record_store()
    record = {**body.model_dump(mode="json", exclude_none=True), "user_id": str(owner_id)}
    try:
        row = await store.insert(_CONVERSATIONS, record)
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to create conversation")
    return Conversation(**row)


async def update_conversation_status(
    owner_id: UUID, conversation_id: UUID, status: str
) -> Conversation:
    """Move a conversation to another status (422 on an unknown status)."""
    if status not in CONVERSATION_STATUSES:
        raise HTTPException(
            status_code=422,
            detail=f"Invalid status. Must be one of: {', '.join(sorted(CONVERSATION_STATUSES))}",
        )

    store = await get_record_store()
    try:
        row = await store.update(
            _CONVERSATIONS,
            str(conversation_id),
            {"status": status},
            filters={"user_id": str(owner_id)},
        )
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to update conversation")

    if row is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return Conversation(**row)


# =============================================================================
# MESSAGES
# =============================================================================


async def list_messages(owner_id: UUID, conversation_id: UUID) -> list[Message]:
    """Transcript in chronological order."""
    await get_conversation(owner_id, conversation_id)

    store = await get_record_store()
    try:
        rows = await store.fetch_all(
            _MESSAGES,
            {"conversation_id": str(conversation_id)},
            order_by="created_at",
            desc=False,
        )
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to fetch messages")

    return [Message(**row) for row in rows]


async def create_message(
    owner_id: UUID, conversation_id: UUID, body: MessageCreate
) -> Message:
    """Append a message and bump the conversation's last-message preview."""
    await get_conversation(owner_id, conversation_id)

    store = await get_record_store()
    record = body.model_dump(mode="json", exclude_none=True)
    record["conversation_id"] = str(conversation_id)
    if "metadata" in record:
        # kind is derived from message_type on read
        record["metadata"].pop("kind", None)

    try:
        row = await store.insert(_MESSAGES, record)
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to create message")

    try:
        await store.update(
            _CONVERSATIONS,
            str(conversation_id),
            {
                "last_message": body.content,
                "last_message_at": row.get("created_at")
                or datetime.now(timezone.utc).isoformat(),
            },
            filters={"user_id": str(owner_id)},
        )
    except RecordSourceError:
        logger.warning("Conversations: failed to update preview for %s", conversation_id)

    return Message(**row)
