"""
Per-channel pricing settings.

Percent fields hold plain numbers (17 means 17%) and are divided by 100 only
where a calculation uses them. Instances are frozen: callers build a snapshot
and hand it to the calculators, which never mutate it.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

NonNegative = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class MercadoLivreSettings(_Frozen):
    contribution_margin: NonNegative = 17.0
    classic_commission: NonNegative = 14.0
    premium_commission: NonNegative = 19.0
    shipping_fee: NonNegative = 24.0


class ShopeeSettings(_Frozen):
    contribution_margin: NonNegative = 17.0
    commission: NonNegative = 20.0
    fixed_fee: NonNegative = 4.0


class TikTokShopSettings(_Frozen):
    contribution_margin: NonNegative = 15.0
    commission: NonNegative = 6.0
    shipping_commission: NonNegative = 6.0
    fixed_fee: NonNegative = 2.0


class InstagramSettings(_Frozen):
    contribution_margin: NonNegative = 15.0
    payment_method: Literal["pix", "card"] = "pix"
    pix_fee_percent: NonNegative = 0.0
    pix_fee_fixed: NonNegative = 0.0
    card_fee_percent: NonNegative = 0.0
    card_fee_fixed: NonNegative = 0.0

    def payment_fee(self) -> tuple[float, float]:
        """Return ``(percent, fixed)`` for the selected payment method."""
        if self.payment_method == "card":
            return self.card_fee_percent, self.card_fee_fixed
        return self.pix_fee_percent, self.pix_fee_fixed


class PricingSettings(_Frozen):
    simples_nacional: NonNegative = 4.0
    mercado_livre: MercadoLivreSettings = Field(default_factory=MercadoLivreSettings)
    shopee: ShopeeSettings = Field(default_factory=ShopeeSettings)
    tiktok: TikTokShopSettings = Field(default_factory=TikTokShopSettings)
    instagram: InstagramSettings = Field(default_factory=InstagramSettings)


# Simples Nacional, Anexo I (commerce): revenue over the last 12 months -> rate.
TAX_BRACKETS: tuple[tuple[str, float], ...] = (
    ("MEI - Isento", 0.0),
    ("1ª Faixa - até R$ 180 mil", 4.0),
    ("2ª Faixa - R$ 180 mil a R$ 360 mil", 7.3),
    ("3ª Faixa - R$ 360 mil a R$ 720 mil", 9.5),
    ("4ª Faixa - R$ 720 mil a R$ 1,8 mi", 10.7),
    ("5ª Faixa - R$ 1,8 mi a R$ 3,6 mi", 14.3),
    ("6ª Faixa - R$ 3,6 mi a R$ 4,8 mi", 19.0),
)

_SECTIONS = ("mercado_livre", "shopee", "tiktok", "instagram")


def default_settings() -> PricingSettings:
    return PricingSettings()


def merge_with_defaults(payload: Mapping[str, Any] | None) -> PricingSettings:
    """
    Overlay a partially stored settings payload on top of the defaults.

    Each channel section is merged field by field, so payloads saved before a
    field existed still load with that field's default. Raises
    ``pydantic.ValidationError`` when a stored value is invalid.
    """
    base = default_settings().model_dump()
    if not payload:
        return PricingSettings.model_validate(base)
    merged: dict[str, Any] = {**base}
    if "simples_nacional" in payload:
        merged["simples_nacional"] = payload["simples_nacional"]
    for section in _SECTIONS:
        stored = payload.get(section)
        if isinstance(stored, Mapping):
            merged[section] = {**base[section], **stored}
    return PricingSettings.model_validate(merged)
