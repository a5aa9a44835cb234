"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from roundup_ledger.config import settings
from roundup_ledger.domain.models import TaxBenefitScope
from roundup_ledger.domain.money import MoneyPolicy, policy_for_mode


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_money_policy() -> MoneyPolicy:
    """Numeric representation used for every call"""
    return policy_for_mode(settings.numeric_mode)


def get_tax_scope() -> TaxBenefitScope:
    """Whether returns report the tax benefit per window or once"""
    return TaxBenefitScope(settings.tax_benefit_scope)
