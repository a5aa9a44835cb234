"""Pytest fixtures for testing"""

import pytest
from fastapi.testclient import TestClient

from roundup_ledger.api.main import create_app
from roundup_ledger.domain.models import AdditionPeriod, Expense, OverridePeriod, ReportingWindow


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def sample_expenses() -> list[Expense]:
    """Year of expenses with one duplicate date and one negative amount"""
    return [
        Expense(date="2023-02-28 15:49:20", amount=375),
        Expense(date="2023-07-01 21:59:00", amount=620),
        Expense(date="2023-10-12 20:15:30", amount=250),
        Expense(date="2023-12-17 08:09:45", amount=480),
        Expense(date="2023-12-17 08:09:45", amount=-10),
    ]


@pytest.fixture
def sample_rules() -> tuple[list[OverridePeriod], list[AdditionPeriod], list[ReportingWindow]]:
    """July zeroed out, Q4 topped up by 25, full year and Mar-Nov windows"""
    overrides = [OverridePeriod.parse("2023-07-01 00:00:00", "2023-07-31 23:59:59", 0)]
    additions = [AdditionPeriod.parse("2023-10-01 08:00:00", "2023-12-31 19:59:59", 25)]
    windows = [
        ReportingWindow.parse("2023-01-01 00:00:00", "2023-12-31 23:59:59"),
        ReportingWindow.parse("2023-03-01 00:00:00", "2023-11-31 23:59:59"),
    ]
    return overrides, additions, windows
