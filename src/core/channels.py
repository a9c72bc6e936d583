from __future__ import annotations

from enum import Enum


class Channel(str, Enum):
    ML_CLASSICO = "ML Clássico"
    ML_PREMIUM = "ML Premium"
    SHOPEE = "Shopee"
    TIKTOK_SHOP = "TikTok Shop"
    INSTAGRAM = "Instagram"


# Display order of every result list.
CHANNEL_ORDER: tuple[Channel, ...] = (
    Channel.ML_CLASSICO,
    Channel.ML_PREMIUM,
    Channel.SHOPEE,
    Channel.TIKTOK_SHOP,
    Channel.INSTAGRAM,
)
