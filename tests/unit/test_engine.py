"""End-to-end tests for the engine pipelines"""

import pytest

from roundup_ledger.domain import engine
from roundup_ledger.domain.exceptions import ConfigurationError, InvalidInputError
from roundup_ledger.domain.models import (
    AdditionPeriod,
    Expense,
    Instrument,
    OverridePeriod,
    RejectionReason,
    ReportingWindow,
    TaxBenefitScope,
)
from roundup_ledger.domain.money import MINOR_UNITS

OCTOBER = ("2021-10-01 00:00:00", "2021-10-31 23:59:59")
SINGLE = [Expense(date="2021-10-01 20:15:00", amount=1519)]


def test_window_sum_without_rules():
    result = engine.filter_expenses(SINGLE, windows=[ReportingWindow.parse(*OCTOBER)])

    assert result.savings_by_window[0].amount == 81
    assert result.total_savings == 81
    assert result.valid[0].remanent == 81
    assert result.valid[0].in_window is True


def test_override_then_addition():
    result = engine.filter_expenses(
        SINGLE,
        overrides=[OverridePeriod.parse(*OCTOBER, 50)],
        additions=[AdditionPeriod.parse(*OCTOBER, 20)],
        windows=[ReportingWindow.parse(*OCTOBER)],
    )

    assert result.savings_by_window[0].amount == 70


def test_validate_sample():
    result = engine.validate_expenses(
        [
            Expense(date="2023-02-28 15:49:20", amount=375),
            Expense(date="2023-12-17 08:09:45", amount=-480),
        ]
    )

    assert [r.date for r in result.valid] == ["2023-02-28 15:49:20"]
    assert result.invalid[0].reason is RejectionReason.NEGATIVE_AMOUNT


def test_parse_expenses_rounds_at_output():
    transactions = engine.parse_expenses([Expense(date="2021-10-01 20:15:00", amount=99.7)])
    assert transactions[0].remanent == 0.3


def test_filter_drops_zero_remanent_records():
    result = engine.filter_expenses(
        [
            Expense(date="2023-02-28 15:49:20", amount=375),
            Expense(date="2023-07-15 10:30:00", amount=620),
            Expense(date="2023-10-12 20:15:30", amount=250),
            Expense(date="2023-10-12 20:15:30", amount=250),
            Expense(date="2023-12-17 08:09:45", amount=-480),
        ],
        overrides=[OverridePeriod.parse("2023-07-01 00:00:00", "2023-07-31 23:59:59", 0)],
        additions=[AdditionPeriod.parse("2023-10-01 00:00:00", "2023-12-31 23:59:59", 30)],
        windows=[ReportingWindow.parse("2023-01-01 00:00:00", "2023-12-31 23:59:59")],
    )

    assert [r.remanent for r in result.valid] == [25, 80]
    assert [r.reason for r in result.invalid] == [
        RejectionReason.DUPLICATE_DATE,
        RejectionReason.NEGATIVE_AMOUNT,
    ]
    assert result.total_savings == 105


def test_filter_can_keep_zero_remanent_records():
    result = engine.filter_expenses(
        [Expense(date="2023-02-28 15:49:20", amount=1500)],
        windows=[ReportingWindow.parse("2023-01-01 00:00:00", "2023-12-31 23:59:59")],
        drop_zero=False,
    )

    assert len(result.valid) == 1
    assert result.valid[0].remanent == 0
    assert result.valid[0].in_window is True


def test_filter_flags_records_outside_every_window():
    result = engine.filter_expenses(
        [Expense(date="2022-01-01 00:00:00", amount=150)],
        windows=[ReportingWindow.parse(*OCTOBER)],
    )

    assert result.valid[0].in_window is False
    assert result.total_savings == 0


def test_nps_returns_sample(sample_expenses, sample_rules):
    overrides, additions, windows = sample_rules

    report = engine.calculate_returns(
        sample_expenses,
        age=29,
        wage=50_000,
        inflation=5.5,
        instrument=Instrument.NPS,
        overrides=overrides,
        additions=additions,
        windows=windows,
    )

    assert report.total_transaction_amount == 1725
    assert report.total_ceiling == 1900
    assert [w.amount for w in report.savings_by_window] == [145, 75]
    assert [w.real_profit for w in report.savings_by_window] == [86.88, 44.94]
    assert [w.tax_benefit for w in report.savings_by_window] == [0, 0]
    assert [w.end for w in report.savings_by_window] == ["2023-12-31 23:59:59", "2023-11-31 23:59:59"]
    assert report.savings_by_window[0].profit == pytest.approx(145 * 1.0711**31 - 145, abs=0.01)
    assert report.tax_benefit is None
    assert (report.accepted_count, report.rejected_count) == (4, 1)


def test_index_returns_have_no_tax_benefit(sample_expenses, sample_rules):
    overrides, additions, windows = sample_rules

    report = engine.calculate_returns(
        sample_expenses,
        age=29,
        wage=1_500_000,
        inflation=5.5,
        instrument=Instrument.INDEX,
        overrides=overrides,
        additions=additions,
        windows=windows,
    )

    assert all(w.tax_benefit == 0 for w in report.savings_by_window)
    assert all(w.profit > 0 for w in report.savings_by_window)


def test_tax_benefit_per_window_and_global():
    windows = [ReportingWindow.parse(*OCTOBER), ReportingWindow.parse("2021-01-01 00:00:00", "2021-12-31 23:59:59")]

    per_window = engine.calculate_returns(
        SINGLE, age=30, wage=1_500_000, inflation=0.05, instrument=Instrument.NPS, windows=windows
    )
    once = engine.calculate_returns(
        SINGLE,
        age=30,
        wage=1_500_000,
        inflation=0.05,
        instrument=Instrument.NPS,
        windows=windows,
        tax_scope=TaxBenefitScope.GLOBAL,
    )

    # 81 deducted from a 15L wage saves 20% of 81
    assert [w.tax_benefit for w in per_window.savings_by_window] == [16.2, 16.2]
    assert [w.tax_benefit for w in once.savings_by_window] == [0, 0]
    assert once.tax_benefit == 16.2


def test_returns_reject_age_past_retirement():
    with pytest.raises(InvalidInputError):
        engine.calculate_returns(SINGLE, age=61, wage=0, inflation=5.5, instrument=Instrument.NPS)


def test_returns_reject_negative_wage():
    with pytest.raises(InvalidInputError):
        engine.calculate_returns(SINGLE, age=30, wage=-1, inflation=5.5, instrument=Instrument.NPS)


def test_minor_units_match_fractional_results():
    minor = engine.filter_expenses(
        [Expense(date="2021-10-01 20:15:00", amount=151_900)],
        overrides=[OverridePeriod.parse(*OCTOBER, 5_000)],
        additions=[AdditionPeriod.parse(*OCTOBER, 2_000)],
        windows=[ReportingWindow.parse(*OCTOBER)],
        policy=MINOR_UNITS,
    )

    assert minor.total_savings == 7_000
    assert isinstance(minor.total_savings, int)


def test_minor_units_reject_fractional_rule_values():
    with pytest.raises(ConfigurationError):
        engine.filter_expenses(
            [Expense(date="2021-10-01 20:15:00", amount=151_900)],
            additions=[AdditionPeriod.parse(*OCTOBER, 20.5)],
            policy=MINOR_UNITS,
        )


def test_project_investment_nps():
    projection = engine.project_investment(
        100_000, wage=1_500_000, age=30, inflation=5.5, instrument=Instrument.NPS
    )

    assert projection.invested == 100_000
    assert projection.tax_benefit == 20_000
    assert projection.future_value == pytest.approx(100_000 * 1.0711**30, abs=0.01)
    assert projection.inflation_adjusted == pytest.approx(100_000 * 1.0711**30 / 1.055**30, abs=0.01)


def test_project_investment_index_and_custom_rate():
    projection = engine.project_investment(
        1_000, wage=1_500_000, age=50, inflation=0, instrument=Instrument.INDEX, rate=10
    )

    assert projection.tax_benefit == 0
    assert projection.future_value == pytest.approx(1_000 * 1.1**10, abs=0.01)
    assert projection.inflation_adjusted == projection.future_value


def test_project_investment_rejects_negative_amount():
    with pytest.raises(InvalidInputError):
        engine.project_investment(-1, wage=0, age=30, inflation=5.5, instrument=Instrument.NPS)


def test_returns_reject_non_finite_scalars():
    with pytest.raises(InvalidInputError):
        engine.calculate_returns(SINGLE, age=30, wage=float("nan"), inflation=5.5, instrument=Instrument.NPS)
    with pytest.raises(InvalidInputError):
        engine.calculate_returns(SINGLE, age=30, wage=0, inflation=float("nan"), instrument=Instrument.NPS)


def test_returns_reject_negative_age():
    with pytest.raises(InvalidInputError):
        engine.calculate_returns(SINGLE, age=-100_000, wage=0, inflation=5.5, instrument=Instrument.INDEX)


def test_project_investment_rejects_nan_amount():
    with pytest.raises(InvalidInputError):
        engine.project_investment(float("nan"), wage=0, age=30, inflation=5.5, instrument=Instrument.NPS)
