from __future__ import annotations

import math
from typing import Annotated, Optional

from fastapi import Depends, FastAPI, HTTPException, Response, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.calculator import CalculationResult, compute_forward, compute_inverse_max_cost, simulate_margin
from ..core.channels import CHANNEL_ORDER
from ..core.config import get_settings
from ..core.db import dispose_engine, get_session, init_models
from ..core.formatting import format_currency, format_percentage, parse_amount
from ..core.models import SettingsProfile
from ..core.pricing_settings import TAX_BRACKETS, PricingSettings
from ..core.settings_store import load_settings, save_settings

app = FastAPI(title="Marketplace Pricing Calculator")


@app.on_event("startup")
async def _startup() -> None:
    await init_models()


@app.on_event("shutdown")
async def _shutdown() -> None:
    await dispose_engine()


PositiveAmount = Annotated[float, Field(gt=0, allow_inf_nan=False)]


class CalculationRequest(BaseModel):
    settings: PricingSettings | None = None
    profile: str | None = None

    @field_validator("cost", "price", "desired_price", mode="before", check_fields=False)
    @classmethod
    def _parse_text_amount(cls, value):
        if isinstance(value, str):
            return parse_amount(value)
        return value


class ForwardRequest(CalculationRequest):
    cost: PositiveAmount


class InverseRequest(CalculationRequest):
    desired_price: PositiveAmount


class SimulationRequest(CalculationRequest):
    cost: PositiveAmount
    price: PositiveAmount


def _finite(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


class ResultResponse(BaseModel):
    channel: str
    selling_price: float | None
    product_cost: float | None
    max_product_cost: float | None
    fixed_fee: float | None
    commission: float | None
    tax: float | None
    gross_profit: float | None
    calculated_margin: float | None
    contribution_margin_percent: float | None
    commission_percent: float | None
    tax_percent: float | None
    is_viable: bool
    display: dict[str, str]

    @classmethod
    def from_result(cls, result: CalculationResult) -> "ResultResponse":
        return cls(
            channel=result.channel.value,
            selling_price=_finite(result.selling_price),
            product_cost=_finite(result.product_cost),
            max_product_cost=_finite(result.max_product_cost),
            fixed_fee=_finite(result.fixed_fee),
            commission=_finite(result.commission),
            tax=_finite(result.tax),
            gross_profit=_finite(result.gross_profit),
            calculated_margin=_finite(result.calculated_margin),
            contribution_margin_percent=_finite(result.contribution_margin_percent),
            commission_percent=_finite(result.commission_percent),
            tax_percent=_finite(result.tax_percent),
            is_viable=result.is_viable,
            display={
                "selling_price": format_currency(result.selling_price),
                "product_cost": format_currency(result.product_cost),
                "max_product_cost": format_currency(result.max_product_cost),
                "fixed_fee": format_currency(result.fixed_fee),
                "commission": format_currency(result.commission),
                "tax": format_currency(result.tax),
                "gross_profit": format_currency(result.gross_profit),
                "calculated_margin": format_percentage(result.calculated_margin),
            },
        )


class TaxBracketResponse(BaseModel):
    label: str
    percent: float


async def _settings_for(payload: CalculationRequest, session: AsyncSession) -> PricingSettings:
    if payload.settings is not None:
        return payload.settings
    return await load_settings(session, payload.profile or get_settings().default_settings_profile)


@app.get("/health")
async def health() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "ok",
        "solver_tolerance": str(settings.price_solver_tolerance),
        "solver_max_iterations": str(settings.price_solver_max_iterations),
    }


@app.get("/channels")
async def list_channels() -> list[str]:
    return [channel.value for channel in CHANNEL_ORDER]


@app.get("/tax-brackets", response_model=list[TaxBracketResponse])
async def list_tax_brackets() -> list[TaxBracketResponse]:
    return [TaxBracketResponse(label=label, percent=percent) for label, percent in TAX_BRACKETS]


@app.get("/settings/{profile}", response_model=PricingSettings)
async def read_settings(profile: str, session: AsyncSession = Depends(get_session)) -> PricingSettings:
    return await load_settings(session, profile)


@app.put("/settings/{profile}", response_model=PricingSettings)
async def write_settings(
    profile: str,
    payload: PricingSettings,
    session: AsyncSession = Depends(get_session),
) -> PricingSettings:
    return await save_settings(session, profile, payload)


@app.delete("/settings/{profile}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_settings(profile: str, session: AsyncSession = Depends(get_session)) -> Response:
    result = await session.execute(select(SettingsProfile).where(SettingsProfile.name == profile))
    model = result.scalar_one_or_none()
    if model is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")
    await session.delete(model)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/calculate/forward", response_model=list[ResultResponse])
async def calculate_forward(
    payload: ForwardRequest,
    session: AsyncSession = Depends(get_session),
) -> list[ResultResponse]:
    settings = await _settings_for(payload, session)
    config = get_settings()
    results = compute_forward(
        payload.cost,
        settings,
        tolerance=config.price_solver_tolerance,
        max_iterations=config.price_solver_max_iterations,
    )
    return [ResultResponse.from_result(result) for result in results]


@app.post("/calculate/inverse", response_model=list[ResultResponse])
async def calculate_inverse(
    payload: InverseRequest,
    session: AsyncSession = Depends(get_session),
) -> list[ResultResponse]:
    settings = await _settings_for(payload, session)
    results = compute_inverse_max_cost(payload.desired_price, settings)
    return [ResultResponse.from_result(result) for result in results]


@app.post("/calculate/simulate", response_model=list[ResultResponse])
async def calculate_simulation(
    payload: SimulationRequest,
    session: AsyncSession = Depends(get_session),
) -> list[ResultResponse]:
    settings = await _settings_for(payload, session)
    results = simulate_margin(payload.cost, payload.price, settings)
    return [ResultResponse.from_result(result) for result in results]
