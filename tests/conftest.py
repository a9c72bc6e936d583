import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from src.core import config as core_config
from src.core import db as core_db
from src.core.pricing_settings import PricingSettings


@pytest.fixture(autouse=True)
def default_env(monkeypatch, tmp_path):
    env = {
        "DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'pricing.db'}",
        "PRICE_SOLVER_TOLERANCE": "0.01",
        "PRICE_SOLVER_MAX_ITERATIONS": "10",
        "DEFAULT_SETTINGS_PROFILE": "default",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setattr(core_db, "_engine", None)
    monkeypatch.setattr(core_db, "_SessionLocal", None)
    core_config.get_settings.cache_clear()
    yield
    core_config.get_settings.cache_clear()


@pytest.fixture
def settings() -> PricingSettings:
    return PricingSettings()
