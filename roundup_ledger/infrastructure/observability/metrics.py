"""Prometheus metrics for record outcomes, rejection causes and projections"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from roundup_ledger.domain.models import RejectedRecord

# Record metrics
records_counter = Counter(
    "roundup_records_total",
    "Expense records processed",
    ["outcome"],  # accepted | rejected
)

rejection_counter = Counter(
    "roundup_rejections_total",
    "Rejected expense records by reason",
    ["reason"],
)

# Projection metrics
projection_counter = Counter(
    "roundup_projections_total",
    "Return projections computed",
    ["instrument"],  # nps | index
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_validation(accepted: int, rejected: Iterable[RejectedRecord]) -> None:
    """Count accepted records and rejections broken down by reason"""
    records_counter.labels(outcome="accepted").inc(accepted)

    rejected_count = 0
    for record in rejected:
        rejection_counter.labels(reason=record.reason.value).inc()
        rejected_count += 1
    records_counter.labels(outcome="rejected").inc(rejected_count)


def record_projection(instrument: str, count: int = 1) -> None:
    projection_counter.labels(instrument=instrument).inc(count)
