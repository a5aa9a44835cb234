"""Ceiling / remanent computation"""

from typing import List

from roundup_ledger.domain.models import Expense, Transaction
from roundup_ledger.domain.money import FRACTIONAL, MoneyPolicy


def compute_ceiling(amount: float, policy: MoneyPolicy = FRACTIONAL) -> float:
    """
    Round an amount up to the next multiple of 100 (major units).

    Multiples of 100 map to themselves, so 1500 -> 1500 and 0 -> 0,
    while 1 -> 100 and 1519 -> 1600.
    """
    step = policy.ceiling_step
    remainder = amount % step
    if remainder == 0:
        return amount
    return amount + (step - remainder)


def compute_remanent(amount: float, policy: MoneyPolicy = FRACTIONAL) -> float:
    """Amount saved by rounding up: ceiling - amount, always in [0, 100)"""
    return compute_ceiling(amount, policy) - amount


def enrich(expense: Expense, policy: MoneyPolicy = FRACTIONAL) -> Transaction:
    """Attach ceiling and remanent to a raw expense"""
    amount = policy.check(expense.amount)
    ceiling = compute_ceiling(amount, policy)
    return Transaction(
        date=expense.date,
        amount=amount,
        ceiling=ceiling,
        remanent=ceiling - amount,
    )


def parse_expenses(expenses: List[Expense], policy: MoneyPolicy = FRACTIONAL) -> List[Transaction]:
    """Enrich every expense, in input order, without validating it"""
    return [enrich(expense, policy) for expense in expenses]
