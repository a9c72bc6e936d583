from __future__ import annotations

import math
from dataclasses import dataclass
from functools import partial
from typing import Optional

import structlog

from .channels import Channel
from .fees import ChannelSchedule, FeeFacts, iter_schedules
from .pricing_settings import PricingSettings
from .solver import CONVERGENCE_TOLERANCE, MAX_ITERATIONS, selling_price, solve_price

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CalculationResult:
    channel: Channel
    fixed_fee: float
    commission: float
    tax: float
    gross_profit: float
    calculated_margin: float
    selling_price: Optional[float] = None
    product_cost: Optional[float] = None
    max_product_cost: Optional[float] = None
    contribution_margin_percent: Optional[float] = None
    commission_percent: Optional[float] = None
    tax_percent: Optional[float] = None

    @property
    def is_viable(self) -> bool:
        """False for unrepresentable prices, losses and unaffordable costs."""
        values = [self.fixed_fee, self.commission, self.tax, self.gross_profit]
        if self.selling_price is not None:
            values.append(self.selling_price)
        if self.max_product_cost is not None:
            values.append(self.max_product_cost)
        if not all(math.isfinite(value) for value in values):
            return False
        if self.max_product_cost is not None:
            return self.max_product_cost >= 0
        return self.gross_profit >= 0


def margin_percent(gross_profit: float, price: float) -> float:
    if price == 0:
        return 0.0
    return gross_profit / price * 100


def _breakdown(
    schedule: ChannelSchedule,
    settings: PricingSettings,
    facts: FeeFacts,
    price: float,
    product_cost: float,
) -> CalculationResult:
    tax_rate = settings.simples_nacional / 100
    commission = price * facts.charged_rate
    tax = price * tax_rate
    gross_profit = price - product_cost - facts.fixed_fee - commission - tax
    return CalculationResult(
        channel=schedule.channel,
        selling_price=price,
        product_cost=product_cost,
        fixed_fee=facts.fixed_fee,
        commission=commission,
        tax=tax,
        gross_profit=gross_profit,
        calculated_margin=margin_percent(gross_profit, price),
        contribution_margin_percent=schedule.margin_percent(settings),
        commission_percent=facts.charged_rate * 100,
        tax_percent=settings.simples_nacional,
    )


def _resolve_with(schedule: ChannelSchedule, settings: PricingSettings, price: float) -> FeeFacts:
    return schedule.resolve(price, settings)


def compute_forward(
    product_cost: float,
    settings: PricingSettings,
    *,
    tolerance: float = CONVERGENCE_TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
) -> list[CalculationResult]:
    """Selling price per channel that yields each channel's contribution margin."""
    tax_rate = settings.simples_nacional / 100
    results: list[CalculationResult] = []
    for schedule in iter_schedules():
        margin_rate = schedule.margin_percent(settings) / 100
        if schedule.price_dependent:
            price = solve_price(
                product_cost,
                partial(_resolve_with, schedule, settings),
                margin_rate,
                tax_rate,
                tolerance=tolerance,
                max_iterations=max_iterations,
            )
        else:
            facts = schedule.resolve(product_cost, settings)
            price = selling_price(
                product_cost,
                facts.fixed_fee,
                margin_rate + facts.charged_rate + tax_rate,
            )
        facts = schedule.resolve(price, settings)
        results.append(_breakdown(schedule, settings, facts, price, product_cost))
    logger.debug("calculator.forward", product_cost=product_cost, channels=len(results))
    return results


def compute_inverse_max_cost(desired_price: float, settings: PricingSettings) -> list[CalculationResult]:
    """
    Highest product cost per channel that still keeps the contribution margin
    at ``desired_price``. Negative values mean the margin cannot be reached at
    that price and are returned as-is.
    """
    tax_rate = settings.simples_nacional / 100
    results: list[CalculationResult] = []
    for schedule in iter_schedules():
        facts = schedule.resolve(desired_price, settings)
        margin = schedule.margin_percent(settings)
        commission = desired_price * facts.charged_rate
        tax = desired_price * tax_rate
        target_profit = desired_price * margin / 100
        max_cost = desired_price - facts.fixed_fee - commission - tax - target_profit
        results.append(
            CalculationResult(
                channel=schedule.channel,
                selling_price=desired_price,
                max_product_cost=max_cost,
                fixed_fee=facts.fixed_fee,
                commission=commission,
                tax=tax,
                gross_profit=target_profit,
                calculated_margin=margin,
                contribution_margin_percent=margin,
                commission_percent=facts.charged_rate * 100,
                tax_percent=settings.simples_nacional,
            )
        )
    return results


def simulate_margin(product_cost: float, price: float, settings: PricingSettings) -> list[CalculationResult]:
    """Profit and margin per channel for a given cost and price, no target enforced."""
    return [
        _breakdown(schedule, settings, schedule.resolve(price, settings), price, product_cost)
        for schedule in iter_schedules()
    ]
