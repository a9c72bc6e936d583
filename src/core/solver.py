from __future__ import annotations

import math
from typing import Callable

import structlog

from .fees import FeeFacts

logger = structlog.get_logger(__name__)

CONVERGENCE_TOLERANCE = 0.01  # currency units between consecutive estimates
MAX_ITERATIONS = 10


def selling_price(product_cost: float, fixed_fee: float, total_rate: float) -> float:
    """Price that leaves ``total_rate`` of itself for margin, fees and tax."""
    if 1 - total_rate <= 0:
        return math.inf
    return (product_cost + fixed_fee) / (1 - total_rate)


def solve_price(
    product_cost: float,
    resolve: Callable[[float], FeeFacts],
    margin_rate: float,
    tax_rate: float,
    *,
    tolerance: float = CONVERGENCE_TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
) -> float:
    """
    Find a price consistent with the fees that price implies.

    Fixed-point iteration from ``product_cost``: resolve the fees at the
    current estimate, recompute the price with the closed-form margin
    equation, repeat. Stops when two estimates differ by less than
    ``tolerance`` or after ``max_iterations`` steps, returning the last
    estimate either way.

    An estimate in a band whose total rate reaches 100% is infinite; the next
    step resolves fees at ``math.inf``, which picks the top band. Only two
    infinite estimates in a row yield ``math.inf``.
    """
    price = product_cost
    for _ in range(max_iterations):
        facts = resolve(price)
        candidate = selling_price(
            product_cost,
            facts.fixed_fee,
            margin_rate + facts.charged_rate + tax_rate,
        )
        if math.isinf(candidate):
            if math.isinf(price):
                return candidate
            price = candidate
            continue
        if abs(candidate - price) < tolerance:
            return candidate
        price = candidate
    logger.debug(
        "solver.not_converged",
        product_cost=product_cost,
        price=price,
        iterations=max_iterations,
    )
    return price
