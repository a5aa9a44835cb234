"""Per-call pipelines: validate -> residue -> rules -> windows -> projection.

Every entry point is a pure function of its arguments. Rule periods
arrive already parsed (a malformed boundary fails in
``Period.parse`` before any record is touched), and scalar inputs are
checked before aggregation so that a call either fully succeeds or
raises without producing any aggregate.
"""

import math
from dataclasses import replace
from typing import List, Optional, Sequence

from roundup_ledger.domain.exceptions import InvalidInputError
from roundup_ledger.domain.models import (
    AdditionPeriod,
    Expense,
    FilterResult,
    Instrument,
    OverridePeriod,
    Projection,
    ReportingWindow,
    ResolvedRecord,
    ReturnsReport,
    TaxBenefitScope,
    Transaction,
    ValidationResult,
    WindowResult,
    WindowSum,
)
from roundup_ledger.domain.money import FRACTIONAL, MoneyPolicy
from roundup_ledger.domain.residue import parse_expenses as _parse_expenses
from roundup_ledger.domain.returns import (
    RETIREMENT_AGE,
    annual_rate,
    inflation_rate,
    investment_horizon,
    project,
    round_projection,
)
from roundup_ledger.domain.rules import resolve_records
from roundup_ledger.domain.tax import calculate_tax_benefit
from roundup_ledger.domain.validation import validate_expenses as _validate_expenses
from roundup_ledger.domain.windows import aggregate, drop_zero_remanent, mark_membership


def parse_expenses(expenses: Sequence[Expense], policy: MoneyPolicy = FRACTIONAL) -> List[Transaction]:
    """Ceiling and remanent for each expense, no validation"""
    return [
        Transaction(
            date=t.date,
            amount=policy.round(t.amount),
            ceiling=policy.round(t.ceiling),
            remanent=policy.round(t.remanent),
        )
        for t in _parse_expenses(list(expenses), policy)
    ]


def validate_expenses(expenses: Sequence[Expense], policy: MoneyPolicy = FRACTIONAL) -> ValidationResult:
    """Accepted and rejected expenses, each group in input order"""
    result = _validate_expenses(expenses, policy)
    result.valid = [
        replace(
            record,
            amount=policy.round(record.amount),
            ceiling=policy.round(record.ceiling),
            remanent=policy.round(record.remanent),
        )
        for record in result.valid
    ]
    return result


def _resolve(
    expenses: Sequence[Expense],
    overrides: Sequence[OverridePeriod],
    additions: Sequence[AdditionPeriod],
    policy: MoneyPolicy,
) -> tuple[ValidationResult, List[ResolvedRecord]]:
    validation = _validate_expenses(expenses, policy)
    return validation, resolve_records(validation.valid, overrides, additions, policy)


def filter_expenses(
    expenses: Sequence[Expense],
    overrides: Sequence[OverridePeriod] = (),
    additions: Sequence[AdditionPeriod] = (),
    windows: Sequence[ReportingWindow] = (),
    policy: MoneyPolicy = FRACTIONAL,
    drop_zero: bool = True,
) -> FilterResult:
    """
    Validate, resolve rules and aggregate into reporting windows.

    With ``drop_zero`` a record whose remanent resolves to exactly zero
    is neither listed nor aggregated; it is not a rejection either.
    """
    validation, resolved = _resolve(expenses, overrides, additions, policy)
    if drop_zero:
        resolved = drop_zero_remanent(resolved)

    mark_membership(windows, resolved)
    sums = aggregate(windows, resolved)

    return FilterResult(
        valid=[
            ResolvedRecord(
                date=r.date,
                instant=r.instant,
                amount=policy.round(r.amount),
                ceiling=policy.round(r.ceiling),
                remanent=policy.round(r.remanent),
                in_window=r.in_window,
            )
            for r in resolved
        ],
        invalid=validation.invalid,
        savings_by_window=[WindowSum(window=s.window, amount=policy.round(s.amount)) for s in sums],
        total_savings=policy.round(sum(s.amount for s in sums)),
    )


def _check_wage(wage: float, policy: MoneyPolicy) -> float:
    if not math.isfinite(wage) or wage < 0:
        raise InvalidInputError(f"wage must be a non-negative number, got {wage}")
    return policy.check(wage, field="wage")


def calculate_returns(
    expenses: Sequence[Expense],
    age: int,
    wage: float,
    inflation: float,
    instrument: Instrument,
    overrides: Sequence[OverridePeriod] = (),
    additions: Sequence[AdditionPeriod] = (),
    windows: Sequence[ReportingWindow] = (),
    policy: MoneyPolicy = FRACTIONAL,
    drop_zero: bool = False,
    tax_scope: TaxBenefitScope = TaxBenefitScope.PER_WINDOW,
    rate: Optional[float] = None,
    retirement_age: int = RETIREMENT_AGE,
) -> ReturnsReport:
    """
    Project the savings of every reporting window to retirement.

    Totals cover every accepted record. The tax benefit is only computed
    for tax-advantaged instruments, per window or once over all windows
    depending on ``tax_scope``.
    """
    years = investment_horizon(age, retirement_age)
    wage = _check_wage(wage, policy)
    inflation_rate(inflation)
    r = annual_rate(instrument, rate)

    validation, resolved = _resolve(expenses, overrides, additions, policy)
    if drop_zero:
        resolved = drop_zero_remanent(resolved)

    per_window_tax = instrument.tax_advantaged and tax_scope is TaxBenefitScope.PER_WINDOW

    results = []
    for window_sum in aggregate(windows, resolved):
        projection = project(
            window_sum.amount,
            years,
            r,
            inflation,
            wage=wage,
            tax_advantaged=per_window_tax,
            policy=policy,
        )
        results.append(
            WindowResult(
                start=window_sum.window.raw_start,
                end=window_sum.window.raw_end,
                amount=policy.round(window_sum.amount),
                profit=policy.round(projection.profit),
                tax_benefit=policy.round(projection.tax_benefit),
                real_profit=policy.round(projection.real_profit),
            )
        )

    global_tax = None
    if tax_scope is TaxBenefitScope.GLOBAL:
        global_tax = 0.0
        if instrument.tax_advantaged:
            # Each record counts once, however many windows it falls into
            mark_membership(windows, resolved)
            invested = sum(record.remanent for record in resolved if record.in_window)
            global_tax = calculate_tax_benefit(invested, wage, policy)
        global_tax = policy.round(global_tax)

    return ReturnsReport(
        total_transaction_amount=policy.round(sum(record.amount for record in validation.valid)),
        total_ceiling=policy.round(sum(record.ceiling for record in validation.valid)),
        savings_by_window=results,
        tax_benefit=global_tax,
        accepted_count=len(validation.valid),
        rejected_count=len(validation.invalid),
    )


def project_investment(
    invested: float,
    wage: float,
    age: int,
    inflation: float,
    instrument: Instrument,
    policy: MoneyPolicy = FRACTIONAL,
    rate: Optional[float] = None,
    retirement_age: int = RETIREMENT_AGE,
) -> Projection:
    """Standalone projection of a single invested amount"""
    years = investment_horizon(age, retirement_age)
    wage = _check_wage(wage, policy)
    inflation_rate(inflation)
    invested = policy.check(invested, field="invested")
    if not math.isfinite(invested) or invested < 0:
        raise InvalidInputError(f"invested must be a non-negative number, got {invested}")

    projection = project(
        invested,
        years,
        annual_rate(instrument, rate),
        inflation,
        wage=wage,
        tax_advantaged=instrument.tax_advantaged,
        policy=policy,
    )
    return round_projection(projection, policy)
