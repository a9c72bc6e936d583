import pytest
from pydantic import ValidationError

from src.core.pricing_settings import TAX_BRACKETS, PricingSettings, default_settings, merge_with_defaults


def test_defaults():
    settings = default_settings()
    assert settings.simples_nacional == 4.0
    assert settings.mercado_livre.shipping_fee == 24.0
    assert settings.shopee.fixed_fee == 4.0
    assert settings.tiktok.shipping_commission == 6.0
    assert settings.instagram.payment_method == "pix"


def test_settings_are_frozen(settings):
    with pytest.raises(ValidationError):
        settings.simples_nacional = 7.3


def test_merge_keeps_stored_values_and_fills_missing_fields():
    merged = merge_with_defaults(
        {
            "simples_nacional": 9.5,
            "mercado_livre": {"classic_commission": 12},
            "instagram": {"contribution_margin": 20},
            "legacy_section": {"whatever": 1},
        }
    )
    assert merged.simples_nacional == 9.5
    assert merged.mercado_livre.classic_commission == 12
    assert merged.mercado_livre.premium_commission == 19
    assert merged.instagram.contribution_margin == 20
    assert merged.instagram.card_fee_percent == 0
    assert merged.shopee == default_settings().shopee


@pytest.mark.parametrize("payload", [None, {}])
def test_merge_empty_payload_gives_defaults(payload):
    assert merge_with_defaults(payload) == PricingSettings()


def test_merge_rejects_invalid_values():
    with pytest.raises(ValidationError):
        merge_with_defaults({"shopee": {"commission": -1}})


def test_tax_brackets_are_progressive():
    rates = [percent for _, percent in TAX_BRACKETS]
    assert rates[0] == 0.0
    assert rates == sorted(rates)
