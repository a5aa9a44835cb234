"""Compound-growth projection of savings up to retirement"""

import math
from typing import Optional

from roundup_ledger.domain.exceptions import InvalidInputError
from roundup_ledger.domain.models import Instrument, Projection
from roundup_ledger.domain.money import FRACTIONAL, MoneyPolicy, normalize_rate
from roundup_ledger.domain.tax import calculate_tax_benefit

RETIREMENT_AGE = 60
NPS_RATE = 0.0711
INDEX_RATE = 0.1449

DEFAULT_RATES = {
    Instrument.NPS: NPS_RATE,
    Instrument.INDEX: INDEX_RATE,
}


def investment_horizon(age: int, retirement_age: int = RETIREMENT_AGE) -> int:
    """
    Years left until retirement.

    Raises:
        InvalidInputError: When the age is negative or already past retirement age
    """
    if age < 0:
        raise InvalidInputError(f"age must not be negative, got {age}")
    years = retirement_age - age
    if years < 0:
        raise InvalidInputError(f"age {age} is above the retirement age {retirement_age}")
    return years


def annual_rate(instrument: Instrument, rate: Optional[float] = None) -> float:
    """Preset rate for the instrument unless the caller overrides it"""
    if rate is None:
        return DEFAULT_RATES[instrument]
    if not math.isfinite(rate):
        raise InvalidInputError(f"rate {rate} is not a number")
    return normalize_rate(rate)


def inflation_rate(inflation: float) -> float:
    """
    Normalized inflation rate.

    Raises:
        InvalidInputError: When the rate would discount by a non-positive factor
    """
    if not math.isfinite(inflation):
        raise InvalidInputError(f"inflation {inflation} is not a number")
    rate = normalize_rate(inflation)
    if rate <= -1:
        raise InvalidInputError(f"inflation {inflation} is out of range")
    return rate


def project(
    principal: float,
    years: int,
    rate: float,
    inflation: float,
    wage: float = 0,
    tax_advantaged: bool = False,
    policy: MoneyPolicy = FRACTIONAL,
) -> Projection:
    """
    Grow a principal at a fixed annual rate and deflate it by inflation.

    futureValue       = P * (1 + r) ** years
    profit            = futureValue - P
    inflationAdjusted = futureValue / (1 + i) ** years

    Values are not rounded here; rounding happens once at output.
    """
    inflation = inflation_rate(inflation)

    future_value = principal * (1 + rate) ** years
    inflation_adjusted = future_value / (1 + inflation) ** years

    tax_benefit = 0.0
    if tax_advantaged:
        tax_benefit = calculate_tax_benefit(principal, wage, policy)

    return Projection(
        invested=principal,
        future_value=future_value,
        profit=future_value - principal,
        real_profit=inflation_adjusted - principal,
        inflation_adjusted=inflation_adjusted,
        tax_benefit=tax_benefit,
    )


def round_projection(projection: Projection, policy: MoneyPolicy = FRACTIONAL) -> Projection:
    """Apply output rounding to every monetary field"""
    return Projection(
        invested=policy.round(projection.invested),
        future_value=policy.round(projection.future_value),
        profit=policy.round(projection.profit),
        real_profit=policy.round(projection.real_profit),
        inflation_adjusted=policy.round(projection.inflation_adjusted),
        tax_benefit=policy.round(projection.tax_benefit),
    )
