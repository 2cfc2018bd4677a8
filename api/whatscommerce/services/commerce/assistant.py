"""
Assistant Settings Service — per-account AI assistant configuration and profile.

Both live in one row per account and are upserted, so a first save creates
the row.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException

from whatscommerce.models.admin import AISettingsUpdate, ProfileUpdate, changes
from whatscommerce.models.commerce import AISettings, Profile
from whatscommerce.services.records import RecordSourceError, get_record_store

logger = logging.getLogger(__name__)

_SETTINGS = "ai_settings"
_PROFILES = "profiles"


async def get_ai_settings(owner_id: UUID) -> AISettings:
    """Stored settings, or the defaults when the account never saved any."""
    store = await get_record_store()
    try:
        row = await store.fetch_one(_SETTINGS, {"user_id": str(owner_id)})
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to fetch assistant settings")

    if row is None:
        return AISettings(user_id=owner_id)
    return AISettings(**row)


async def update_ai_settings(owner_id: UUID, body: AISettingsUpdate) -> AISettings:
    """Merge the patch over the current settings and upsert by user_id."""
    current = await get_ai_settings(owner_id)
    merged = current.model_dump(
        mode="json", exclude={"id", "created_at", "updated_at"}
    )
    merged.update(changes(body))

    store = await get_record_store()
    try:
        row = await store.upsert(_SETTINGS, merged, on_conflict="user_id")
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to save assistant settings")

    logger.info("Assistant: settings saved for %s", owner_id)
    return AISettings(**row)


# =============================================================================
# PROFILE
# =============================================================================


async def get_profile(owner_id: UUID) -> Profile:
    """Profile for the account; an empty one is created on first access."""
    store = await get_record_store()
    try:
        row = await store.fetch_one(_PROFILES, {"id": str(owner_id)})
        if row is None:
            row = await store.upsert(_PROFILES, {"id": str(owner_id)})
            logger.info("Profile: created for %s", owner_id)
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to fetch profile")
    return Profile(**row)


async def update_profile(owner_id: UUID, body: ProfileUpdate) -> Profile:
    store = await get_record_store()
    try:
        row = await store.upsert(_PROFILES, {"id": str(owner_id), **changes(body)})
    except RecordSourceError:
        raise HTTPException(status_code=500, detail="Failed to update profile")
    return Profile(**row)
