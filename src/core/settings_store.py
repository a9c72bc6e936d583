from __future__ import annotations

import structlog
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SettingsProfile
from .pricing_settings import PricingSettings, default_settings, merge_with_defaults

logger = structlog.get_logger(__name__)


async def load_settings(session: AsyncSession, name: str) -> PricingSettings:
    """Stored profile merged with the defaults; defaults when none is stored."""
    result = await session.execute(select(SettingsProfile).where(SettingsProfile.name == name))
    profile = result.scalar_one_or_none()
    if profile is None:
        return default_settings()
    try:
        return merge_with_defaults(profile.payload)
    except ValidationError as exc:
        logger.warning("settings_store.invalid_payload", profile=name, error=str(exc))
        return default_settings()


async def save_settings(session: AsyncSession, name: str, settings: PricingSettings) -> PricingSettings:
    result = await session.execute(select(SettingsProfile).where(SettingsProfile.name == name))
    profile = result.scalar_one_or_none()
    payload = settings.model_dump()
    if profile is None:
        profile = SettingsProfile(name=name, payload=payload)
        session.add(profile)
    else:
        profile.payload = payload
    await session.flush()
    logger.info("settings_store.saved", profile=name)
    return settings
