import pytest

from src.core.channels import CHANNEL_ORDER
from src.core.fees import (
    SCHEDULES,
    iter_schedules,
    mercado_livre_fees,
    resolve_instagram,
    resolve_ml_classico,
    resolve_ml_premium,
    resolve_shopee,
    resolve_tiktok_shop,
)
from src.core.pricing_settings import InstagramSettings, PricingSettings


@pytest.mark.parametrize(
    ("price", "fixed_fee"),
    [
        (12.50, 6.25),
        (20.00, 6.25),
        (29.00, 6.25),
        (29.01, 6.50),
        (50.00, 6.50),
        (50.01, 6.75),
        (78.99, 6.75),
        (79.00, 24.00),
        (150.00, 24.00),
    ],
)
def test_mercado_livre_bands_include_their_boundaries(price, fixed_fee):
    facts = mercado_livre_fees(price, commission_percent=14, shipping_fee=24.0)
    assert facts.fixed_fee == fixed_fee
    assert facts.commission_rate == pytest.approx(0.14)
    assert facts.extra_rate == 0


@pytest.mark.parametrize("price", [0.0, 5.0, 12.49])
def test_mercado_livre_low_price_overrides_commission(price):
    facts = mercado_livre_fees(price, commission_percent=14, shipping_fee=24.0)
    assert facts.fixed_fee == 0
    assert facts.commission_rate == 0.50


def test_mercado_livre_tiers_differ_only_in_commission(settings):
    classic = resolve_ml_classico(40.0, settings)
    premium = resolve_ml_premium(40.0, settings)
    assert classic.fixed_fee == premium.fixed_fee == 6.50
    assert classic.commission_rate == pytest.approx(0.14)
    assert premium.commission_rate == pytest.approx(0.19)


def test_shopee_threshold(settings):
    at_threshold = resolve_shopee(10.00, settings)
    assert at_threshold.fixed_fee == 4.0
    assert at_threshold.extra_rate == 0

    below = resolve_shopee(9.99, settings)
    assert below.fixed_fee == 0
    assert below.extra_rate == 0.50
    assert below.commission_rate == pytest.approx(0.20)
    assert below.charged_rate == pytest.approx(0.70)


def test_shopee_resolves_at_zero(settings):
    facts = resolve_shopee(0.0, settings)
    assert facts.fixed_fee == 0


def test_tiktok_adds_shipping_commission(settings):
    facts = resolve_tiktok_shop(100.0, settings)
    assert facts.fixed_fee == 2.0
    assert facts.commission_rate == pytest.approx(0.12)


def test_instagram_uses_selected_payment_method():
    settings = PricingSettings(
        instagram=InstagramSettings(
            payment_method="card",
            pix_fee_percent=0.99,
            pix_fee_fixed=0.0,
            card_fee_percent=4.5,
            card_fee_fixed=0.40,
        )
    )
    facts = resolve_instagram(50.0, settings)
    assert facts.fixed_fee == 0.40
    assert facts.commission_rate == pytest.approx(0.045)

    pix = settings.model_copy(update={"instagram": settings.instagram.model_copy(update={"payment_method": "pix"})})
    facts = resolve_instagram(50.0, pix)
    assert facts.fixed_fee == 0.0
    assert facts.commission_rate == pytest.approx(0.0099)


def test_every_channel_has_one_schedule():
    assert set(SCHEDULES) == set(CHANNEL_ORDER)
    assert [schedule.channel for schedule in iter_schedules()] == list(CHANNEL_ORDER)
