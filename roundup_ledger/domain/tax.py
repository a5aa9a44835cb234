"""Progressive income tax and NPS deduction benefit.

Slabs (simplified new regime, no standard deduction):

    0         .. 7,00,000   :  0%
    7,00,000  .. 10,00,000  : 10%
    10,00,000 .. 12,00,000  : 15%
    12,00,000 .. 15,00,000  : 20%
    above 15,00,000         : 30%
"""

from dataclasses import dataclass
from typing import List, Optional

from roundup_ledger.domain.money import FRACTIONAL, MoneyPolicy

NPS_DEDUCTION_CAP = 200_000
NPS_DEDUCTION_WAGE_FRACTION = 0.10


@dataclass(frozen=True)
class TaxBracket:
    start: float
    end: Optional[float]  # None means no upper bound
    rate: float


DEFAULT_BRACKETS: List[TaxBracket] = [
    TaxBracket(start=0, end=700_000, rate=0.0),
    TaxBracket(start=700_000, end=1_000_000, rate=0.10),
    TaxBracket(start=1_000_000, end=1_200_000, rate=0.15),
    TaxBracket(start=1_200_000, end=1_500_000, rate=0.20),
    TaxBracket(start=1_500_000, end=None, rate=0.30),
]


def calculate_tax(income: float, brackets: List[TaxBracket] = DEFAULT_BRACKETS) -> float:
    """
    Tax owed on an annual income (major units).

    Each bracket taxes only the slice of income that falls inside it,
    so calculate_tax(800000) == 10000 and calculate_tax(2000000) == 270000.
    """
    if income <= 0:
        return 0.0

    tax = 0.0
    for bracket in brackets:
        if income <= bracket.start:
            break
        upper = income if bracket.end is None else min(income, bracket.end)
        tax += (upper - bracket.start) * bracket.rate
    return tax


def eligible_deduction(invested: float, wage: float) -> float:
    """min(invested, 10% of wage, 2,00,000)"""
    return min(invested, wage * NPS_DEDUCTION_WAGE_FRACTION, NPS_DEDUCTION_CAP)


def calculate_tax_benefit(invested: float, wage: float, policy: MoneyPolicy = FRACTIONAL) -> float:
    """
    Tax saved by deducting an NPS investment from the wage.

    Brackets are defined in major units, so minor-unit inputs are
    converted down and the benefit is scaled back up.
    """
    invested_major = policy.to_major(invested)
    wage_major = policy.to_major(wage)

    deduction = eligible_deduction(invested_major, wage_major)
    benefit = calculate_tax(wage_major) - calculate_tax(wage_major - deduction)
    return policy.from_major(benefit)
