"""
Fee schedules per sales channel.

A resolver maps a candidate selling price and a settings snapshot to the fee
facts in force at that price. Every channel has exactly one entry in
``SCHEDULES``; the calculators iterate that table and never branch on the
channel themselves.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .channels import CHANNEL_ORDER, Channel
from .pricing_settings import PricingSettings

# Mercado Livre price bands. Upper bounds are inclusive except where noted.
ML_LOW_PRICE_LIMIT = 12.50  # exclusive
ML_LOW_PRICE_COMMISSION_RATE = 0.50
ML_BAND_1_LIMIT = 29.00
ML_BAND_1_FEE = 6.25
ML_BAND_2_LIMIT = 50.00
ML_BAND_2_FEE = 6.50
ML_FREE_SHIPPING_THRESHOLD = 79.00  # exclusive upper bound of band 3
ML_BAND_3_FEE = 6.75

SHOPEE_LOW_PRICE_LIMIT = 10.00  # exclusive
SHOPEE_LOW_PRICE_EXTRA_RATE = 0.50


@dataclass(frozen=True)
class FeeFacts:
    fixed_fee: float
    commission_rate: float
    extra_rate: float = 0.0

    @property
    def charged_rate(self) -> float:
        """Share of the price charged by the channel."""
        return self.commission_rate + self.extra_rate


FeeResolver = Callable[[float, PricingSettings], FeeFacts]


def mercado_livre_fees(price: float, commission_percent: float, shipping_fee: float) -> FeeFacts:
    if price < ML_LOW_PRICE_LIMIT:
        return FeeFacts(fixed_fee=0.0, commission_rate=ML_LOW_PRICE_COMMISSION_RATE)
    commission_rate = commission_percent / 100
    if price <= ML_BAND_1_LIMIT:
        return FeeFacts(fixed_fee=ML_BAND_1_FEE, commission_rate=commission_rate)
    if price <= ML_BAND_2_LIMIT:
        return FeeFacts(fixed_fee=ML_BAND_2_FEE, commission_rate=commission_rate)
    if price < ML_FREE_SHIPPING_THRESHOLD:
        return FeeFacts(fixed_fee=ML_BAND_3_FEE, commission_rate=commission_rate)
    return FeeFacts(fixed_fee=shipping_fee, commission_rate=commission_rate)


def resolve_ml_classico(price: float, settings: PricingSettings) -> FeeFacts:
    ml = settings.mercado_livre
    return mercado_livre_fees(price, ml.classic_commission, ml.shipping_fee)


def resolve_ml_premium(price: float, settings: PricingSettings) -> FeeFacts:
    ml = settings.mercado_livre
    return mercado_livre_fees(price, ml.premium_commission, ml.shipping_fee)


def resolve_shopee(price: float, settings: PricingSettings) -> FeeFacts:
    shopee = settings.shopee
    commission_rate = shopee.commission / 100
    if price < SHOPEE_LOW_PRICE_LIMIT:
        return FeeFacts(
            fixed_fee=0.0,
            commission_rate=commission_rate,
            extra_rate=SHOPEE_LOW_PRICE_EXTRA_RATE,
        )
    return FeeFacts(fixed_fee=shopee.fixed_fee, commission_rate=commission_rate)


def resolve_tiktok_shop(price: float, settings: PricingSettings) -> FeeFacts:
    tiktok = settings.tiktok
    return FeeFacts(
        fixed_fee=tiktok.fixed_fee,
        commission_rate=(tiktok.commission + tiktok.shipping_commission) / 100,
    )


def resolve_instagram(price: float, settings: PricingSettings) -> FeeFacts:
    percent, fixed = settings.instagram.payment_fee()
    return FeeFacts(fixed_fee=fixed, commission_rate=percent / 100)


@dataclass(frozen=True)
class ChannelSchedule:
    channel: Channel
    resolve: FeeResolver
    margin_percent: Callable[[PricingSettings], float]
    # True when the fee facts change with the selling price.
    price_dependent: bool = False


SCHEDULES: dict[Channel, ChannelSchedule] = {
    Channel.ML_CLASSICO: ChannelSchedule(
        Channel.ML_CLASSICO,
        resolve_ml_classico,
        lambda s: s.mercado_livre.contribution_margin,
        price_dependent=True,
    ),
    Channel.ML_PREMIUM: ChannelSchedule(
        Channel.ML_PREMIUM,
        resolve_ml_premium,
        lambda s: s.mercado_livre.contribution_margin,
        price_dependent=True,
    ),
    Channel.SHOPEE: ChannelSchedule(
        Channel.SHOPEE,
        resolve_shopee,
        lambda s: s.shopee.contribution_margin,
        price_dependent=True,
    ),
    Channel.TIKTOK_SHOP: ChannelSchedule(
        Channel.TIKTOK_SHOP,
        resolve_tiktok_shop,
        lambda s: s.tiktok.contribution_margin,
    ),
    Channel.INSTAGRAM: ChannelSchedule(
        Channel.INSTAGRAM,
        resolve_instagram,
        lambda s: s.instagram.contribution_margin,
    ),
}


def iter_schedules() -> list[ChannelSchedule]:
    return [SCHEDULES[channel] for channel in CHANNEL_ORDER]
