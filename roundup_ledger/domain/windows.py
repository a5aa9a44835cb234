"""Aggregation of resolved remanents into reporting windows"""

from typing import List, Sequence

from roundup_ledger.domain.models import ReportingWindow, ResolvedRecord, WindowSum


def window_sum(window: ReportingWindow, records: Sequence[ResolvedRecord]) -> float:
    """Sum the remanent of every record whose instant lies in the window"""
    return sum(record.remanent for record in records if window.contains(record.instant))


def aggregate(windows: Sequence[ReportingWindow], records: Sequence[ResolvedRecord]) -> List[WindowSum]:
    """
    One sum per window, in window order.

    Windows are independent: overlapping windows each count a record in
    full, nothing is deduplicated.
    """
    return [WindowSum(window=window, amount=window_sum(window, records)) for window in windows]


def mark_membership(windows: Sequence[ReportingWindow], records: Sequence[ResolvedRecord]) -> None:
    """Flag each record that falls inside at least one window"""
    for record in records:
        record.in_window = any(window.contains(record.instant) for window in windows)


def drop_zero_remanent(records: Sequence[ResolvedRecord]) -> List[ResolvedRecord]:
    """Records resolving to exactly zero are not a savings event"""
    return [record for record in records if record.remanent != 0]
