"""
Tests for the conversation and order services.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import HTTPException

from whatscommerce.models.admin import ConversationCreate, MessageCreate, OrderCreate
from whatscommerce.models.commerce import Conversation
from whatscommerce.services.commerce import conversations, orders
from whatscommerce.services.records import RecordSourceError

_OWNER = uuid4()


def _conv_row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": str(uuid4()),
        "user_id": str(_OWNER),
        "customer_phone": "+351912345678",
        "customer_name": "Ahmed Hassan",
        "status": "active",
        "last_message": "Is the blue sneakers still available?",
        "last_message_at": "2026-02-26T10:15:00+00:00",
        "created_at": "2026-02-26T10:00:00+00:00",
    }
    row.update(overrides)
    return row


def _mock_store() -> MagicMock:
    store = MagicMock()
    for method in ("fetch_all", "fetch_one", "insert", "update", "upsert", "delete"):
        setattr(store, method, AsyncMock())
    return store


def _patch_store(module: str, store: MagicMock):  # type: ignore[no-untyped-def]
    return patch(
        f"whatscommerce.services.commerce.{module}.get_record_store",
        new_callable=AsyncMock,
        return_value=store,
    )


# =============================================================================
# CONVERSATIONS
# =============================================================================


class TestListConversations:
    @pytest.mark.asyncio
    async def test_ordered_by_last_message_nulls_last(self) -> None:
        store = _mock_store()
        store.fetch_all.return_value = [_conv_row()]

        with _patch_store("conversations", store):
            result = await conversations.list_conversations(_OWNER)

        assert len(result) == 1
        assert store.fetch_all.call_args[0] == ("conversations", {"user_id": str(_OWNER)})
        assert store.fetch_all.call_args.kwargs == {
            "order_by": "last_message_at",
            "desc": True,
            "nulls_last": True,
        }

    @pytest.mark.asyncio
    async def test_status_filter(self) -> None:
        store = _mock_store()
        store.fetch_all.return_value = []

        with _patch_store("conversations", store):
            await conversations.list_conversations(_OWNER, status="pending")

        assert store.fetch_all.call_args[0][1]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_search(self) -> None:
        store = _mock_store()
        store.fetch_all.return_value = [
            _conv_row(customer_name="Maria Santos", last_message="wedding dress"),
            _conv_row(customer_name=None, customer_phone="+44700", last_message=None),
            _conv_row(customer_name="Chen Wei", last_message="Thanks!"),
        ]

        with _patch_store("conversations", store):
            by_text = await conversations.list_conversations(_OWNER, search="DRESS")
            by_phone = await conversations.list_conversations(_OWNER, search="+44")

        assert [c.customer_name for c in by_text] == ["Maria Santos"]
        assert [c.customer_phone for c in by_phone] == ["+44700"]

    @pytest.mark.asyncio
    async def test_source_error_is_500(self) -> None:
        store = _mock_store()
        store.fetch_all.side_effect = RecordSourceError("conversations", "fetch_all")

        with _patch_store("conversations", store), pytest.raises(HTTPException) as exc_info:
            await conversations.list_conversations(_OWNER)
        assert exc_info.value.status_code == 500


class TestConversationWrites:
    @pytest.mark.asyncio
    async def test_get_foreign_conversation_is_404(self) -> None:
        store = _mock_store()
        store.fetch_one.return_value = None
        conv_id = uuid4()

        with _patch_store("conversations", store), pytest.raises(HTTPException) as exc_info:
            await conversations.get_conversation(_OWNER, conv_id)

        assert exc_info.value.status_code == 404
        store.fetch_one.assert_awaited_once_with(
            "conversations", {"id": str(conv_id), "user_id": str(_OWNER)}
        )

    @pytest.mark.asyncio
    async def test_create_sets_owner(self) -> None:
        store = _mock_store()
        store.insert.return_value = _conv_row(customer_name=None)

        with _patch_store("conversations", store):
            await conversations.create_conversation(
                _OWNER, ConversationCreate(customer_phone="+351912345678")
            )

        record = store.insert.call_args[0][1]
        assert record["user_id"] == str(_OWNER)
        assert record["status"] == "active"

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self) -> None:
        store = _mock_store()
        with _patch_store("conversations", store), pytest.raises(HTTPException) as exc_info:
            await conversations.update_conversation_status(_OWNER, uuid4(), "archived")
        assert exc_info.value.status_code == 422
        store.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_status_update(self) -> None:
        store = _mock_store()
        store.update.return_value = _conv_row(status="resolved")

        with _patch_store("conversations", store):
            conv = await conversations.update_conversation_status(_OWNER, uuid4(), "resolved")

        assert conv.status == "resolved"
        assert store.update.call_args[0][2] == {"status": "resolved"}

    @pytest.mark.asyncio
    async def test_status_update_missing_is_404(self) -> None:
        store = _mock_store()
        store.update.return_value = None

        with _patch_store("conversations", store), pytest.raises(HTTPException) as exc_info:
            await conversations.update_conversation_status(_OWNER, uuid4(), "pending")
        assert exc_info.value.status_code == 404


class TestMessages:
    @pytest.mark.asyncio
    async def test_list_messages_chronological(self) -> None:
        store = _mock_store()
        conv = _conv_row()
        store.fetch_one.return_value = conv
        store.fetch_all.return_value = [
            {
                "id": str(uuid4()),
                "conversation_id": conv["id"],
                "sender_type": "customer",
                "content": "Hi!",
                "message_type": "text",
                "metadata": None,
            }
        ]

        with _patch_store("conversations", store):
            messages = await conversations.list_messages(_OWNER, uuid4())

        assert messages[0].content == "Hi!"
        assert store.fetch_all.call_args.kwargs == {"order_by": "created_at", "desc": False}

    @pytest.mark.asyncio
    async def test_create_message_updates_preview(self) -> None:
        store = _mock_store()
        conv_id = uuid4()
        store.fetch_one.return_value = _conv_row(id=str(conv_id))
        store.insert.return_value = {
            "id": str(uuid4()),
            "conversation_id": str(conv_id),
            "sender_type": "human",
            "content": "On its way!",
            "message_type": "order_summary",
            "metadata": {"total_amount": 74.99},
            "created_at": "2026-02-26T11:00:00+00:00",
        }
        body = MessageCreate(
            content="On its way!",
            message_type="order_summary",
            metadata={"kind": "order_summary", "total_amount": 74.99},
        )

        with _patch_store("conversations", store):
            message = await conversations.create_message(_OWNER, conv_id, body)

        record = store.insert.call_args[0][1]
        assert "kind" not in record["metadata"]
        assert message.metadata is not None
        assert message.metadata.kind == "order_summary"

        table, record_id, patch_ = store.update.call_args[0]
        assert (table, record_id) == ("conversations", str(conv_id))
        assert patch_ == {
            "last_message": "On its way!",
            "last_message_at": "2026-02-26T11:00:00+00:00",
        }

    @pytest.mark.asyncio
    async def test_preview_failure_does_not_fail_send(self) -> None:
        store = _mock_store()
        store.fetch_one.return_value = _conv_row()
        store.insert.return_value = {
            "id": str(uuid4()),
            "sender_type": "human",
            "content": "hello",
        }
        store.update.side_effect = RecordSourceError("conversations", "update")

        with _patch_store("conversations", store):
            message = await conversations.create_message(
                _OWNER, uuid4(), MessageCreate(content="hello")
            )

        assert message.content == "hello"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("status", "label"),
    [
        ("active", "Active"),
        ("ai_handled", "AI Handled"),
        ("resolved", "Resolved"),
        ("pending", "Pending"),
        ("archived", "Unknown"),
    ],
)
def test_status_label(status: str, label: str) -> None:
    assert conversations.status_label(status) == label


@pytest.mark.unit
def test_matches_search_without_term() -> None:
    conv = Conversation(**_conv_row())
    assert conversations.matches_search(conv, None) is True
    assert conversations.matches_search(conv, "") is True


# =============================================================================
# ORDERS
# =============================================================================


class TestOrders:
    @pytest.mark.asyncio
    async def test_list_orders_newest_first(self) -> None:
        store = _mock_store()
        store.fetch_all.return_value = [
            {"id": str(uuid4()), "status": "pending", "total_amount": 19.0}
        ]

        with _patch_store("orders", store):
            result = await orders.list_orders(_OWNER, status="pending")

        assert result[0].total_amount == 19.0
        assert store.fetch_all.call_args[0] == (
            "orders",
            {"user_id": str(_OWNER), "status": "pending"},
        )
        assert store.fetch_all.call_args.kwargs == {"order_by": "created_at", "desc": True}

    @pytest.mark.asyncio
    async def test_create_order(self) -> None:
        store = _mock_store()
        store.insert.return_value = {"id": str(uuid4()), "status": "pending", "total_amount": 5}

        with _patch_store("orders", store):
            await orders.create_order(_OWNER, OrderCreate(total_amount=5))

        record = store.insert.call_args[0][1]
        assert record == {"status": "pending", "total_amount": 5.0, "user_id": str(_OWNER)}

    @pytest.mark.asyncio
    async def test_unknown_status_allowed(self) -> None:
        store = _mock_store()
        store.update.return_value = {"id": str(uuid4()), "status": "on_hold", "total_amount": 1}

        with _patch_store("orders", store):
            order = await orders.update_order_status(_OWNER, uuid4(), "on_hold")

        assert order.status == "on_hold"

    @pytest.mark.asyncio
    async def test_update_missing_order_is_404(self) -> None:
        store = _mock_store()
        store.update.return_value = None

        with _patch_store("orders", store), pytest.raises(HTTPException) as exc_info:
            await orders.update_order_status(_OWNER, uuid4(), "delivered")
        assert exc_info.value.status_code == 404
