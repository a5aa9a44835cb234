"""Temporal rule resolution: override (q) and addition (p) periods"""

from datetime import datetime
from typing import List, Optional, Sequence

from roundup_ledger.domain.models import AdditionPeriod, OverridePeriod, ResolvedRecord, ValidatedRecord
from roundup_ledger.domain.money import FRACTIONAL, MoneyPolicy


def select_override(instant: datetime, periods: Sequence[OverridePeriod]) -> Optional[OverridePeriod]:
    """
    Pick the override period that governs an instant.

    Among periods containing the instant, the one with the latest start
    wins. On equal starts the earlier-listed period is kept.
    """
    winner: Optional[OverridePeriod] = None
    for period in periods:
        if not period.contains(instant):
            continue
        # Strictly later start only, so ties keep list order
        if winner is None or period.start > winner.start:
            winner = period
    return winner


def total_addition(instant: datetime, periods: Sequence[AdditionPeriod]) -> float:
    """Sum of extras from every addition period containing the instant"""
    return sum(period.extra for period in periods if period.contains(instant))


def resolve_remanent(
    instant: datetime,
    remanent: float,
    overrides: Sequence[OverridePeriod],
    additions: Sequence[AdditionPeriod],
) -> float:
    """Apply the override first, then stack every matching addition on top"""
    override = select_override(instant, overrides)
    if override is not None:
        remanent = override.fixed_value
    return remanent + total_addition(instant, additions)


def check_rule_values(
    overrides: Sequence[OverridePeriod],
    additions: Sequence[AdditionPeriod],
    policy: MoneyPolicy = FRACTIONAL,
) -> None:
    """Reject rule values that do not match the call's numeric representation"""
    for period in overrides:
        policy.check(period.fixed_value, field="fixed")
    for period in additions:
        policy.check(period.extra, field="extra")


def resolve_records(
    records: Sequence[ValidatedRecord],
    overrides: Sequence[OverridePeriod],
    additions: Sequence[AdditionPeriod],
    policy: MoneyPolicy = FRACTIONAL,
) -> List[ResolvedRecord]:
    """Resolve the remanent of every accepted record, in input order"""
    check_rule_values(overrides, additions, policy)

    return [
        ResolvedRecord(
            date=record.date,
            instant=record.instant,
            amount=record.amount,
            ceiling=record.ceiling,
            remanent=resolve_remanent(record.instant, record.remanent, overrides, additions),
        )
        for record in records
    ]
