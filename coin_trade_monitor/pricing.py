"""Percent price change between a pair's reference price and its live price."""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .exceptions import ComputationError

PERCENT_PRECISION = 2
_PERCENT_QUANTUM = Decimal(1).scaleb(-PERCENT_PRECISION)


def compute_price_change(reference: Optional[float], current: Optional[float]) -> float:
    """
    Percent move of ``current`` away from ``reference``.

    The change is expressed relative to the *current* price:
    ``(current - reference) * 100 / current``, rounded half away from zero
    to two decimals.
    Decision thresholds are tuned against this exact formula, so it must
    not be replaced with the more common ``(current - reference) / reference``.

    Args:
        reference: Price at the last order (or initialization)
        current: Price just fetched from the exchange

    Returns:
        Percent change as a finite float

    Raises:
        ComputationError: If either price is missing or non-finite, or the
            current price is zero
    """
    if reference is None or current is None:
        raise ComputationError(
            f"Cannot compute price change from reference={reference} current={current}"
        )

    try:
        reference = float(reference)
        current = float(current)
    except (TypeError, ValueError) as e:
        raise ComputationError(f"Non-numeric price input: {e}") from e

    if not math.isfinite(reference) or not math.isfinite(current):
        raise ComputationError(
            f"Non-finite price input: reference={reference} current={current}"
        )
    if current == 0:
        raise ComputationError("Current price is zero; percent change is undefined")

    percent = (current - reference) * 100 / current
    # Exact ties round away from zero (0.125 -> 0.13), unlike round().
    return float(Decimal(percent).quantize(_PERCENT_QUANTUM, rounding=ROUND_HALF_UP))


def validate_price(price: Optional[float]) -> float:
    """Return ``price`` as a float, rejecting missing, non-finite or non-positive quotes."""
    try:
        value = float(price)
    except (TypeError, ValueError) as e:
        raise ComputationError(f"Invalid price {price!r}") from e
    if not math.isfinite(value) or value <= 0:
        raise ComputationError(f"Invalid price {price!r}")
    return value
