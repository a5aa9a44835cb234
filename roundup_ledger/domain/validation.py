"""Expense admissibility checks"""

import logging
import math
from typing import Iterable, List, Optional, Set

from roundup_ledger.domain.models import (
    Expense,
    RejectedRecord,
    RejectionReason,
    ValidatedRecord,
    ValidationOutcome,
    ValidationResult,
)
from roundup_ledger.domain.money import FRACTIONAL, MoneyPolicy
from roundup_ledger.domain.residue import compute_ceiling
from roundup_ledger.utils.date_utils import parse_strict

logger = logging.getLogger(__name__)


def rejection_reason(
    expense: Expense,
    seen_dates: Set[str],
    policy: MoneyPolicy = FRACTIONAL,
) -> Optional[RejectionReason]:
    """
    Return the first applicable rejection reason, or None if admissible.

    Precedence: negative amount, amount too large, missing or malformed
    date, duplicate date. A non-finite amount counts as too large.
    Duplicates are checked against dates already accepted, so a rejected
    record never blocks a later one.
    """
    if expense.amount < 0:
        return RejectionReason.NEGATIVE_AMOUNT
    if expense.amount >= policy.max_amount or not math.isfinite(expense.amount):
        return RejectionReason.AMOUNT_TOO_LARGE
    if not expense.date:
        return RejectionReason.MISSING_OR_MALFORMED_DATE
    try:
        parse_strict(expense.date)
    except ValueError:
        return RejectionReason.MISSING_OR_MALFORMED_DATE
    if expense.date in seen_dates:
        return RejectionReason.DUPLICATE_DATE
    return None


def classify(expenses: Iterable[Expense], policy: MoneyPolicy = FRACTIONAL) -> List[ValidationOutcome]:
    """Classify each expense as accepted or rejected, preserving input order"""
    seen_dates: Set[str] = set()
    outcomes: List[ValidationOutcome] = []

    for expense in expenses:
        amount = policy.check(expense.amount)
        reason = rejection_reason(expense, seen_dates, policy)
        if reason is not None:
            outcomes.append(RejectedRecord(expense=expense, reason=reason))
            continue

        # First occurrence wins
        seen_dates.add(expense.date)
        ceiling = compute_ceiling(amount, policy)
        outcomes.append(
            ValidatedRecord(
                date=expense.date,
                instant=parse_strict(expense.date),
                amount=amount,
                ceiling=ceiling,
                remanent=ceiling - amount,
            )
        )

    return outcomes


def validate_expenses(expenses: Iterable[Expense], policy: MoneyPolicy = FRACTIONAL) -> ValidationResult:
    """Split expenses into accepted and rejected groups"""
    outcomes = classify(expenses, policy)
    valid = [o for o in outcomes if isinstance(o, ValidatedRecord)]
    invalid = [o for o in outcomes if isinstance(o, RejectedRecord)]

    logger.debug("Validated %d expenses: %d accepted, %d rejected", len(outcomes), len(valid), len(invalid))
    return ValidationResult(valid=valid, invalid=invalid)
