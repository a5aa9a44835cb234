"""POST /transactions:{parse,validator,filter} - expense enrichment and savings rules"""

import logging
import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from roundup_ledger.api.dependencies import get_money_policy, get_request_id
from roundup_ledger.api.v1.schemas import (
    ExpenseSchema,
    FilterRequest,
    FilterResponse,
    InvalidTransactionSchema,
    TransactionSchema,
    ValidatorRequest,
    ValidatorResponse,
    ValidTransactionSchema,
    WindowSumSchema,
)
from roundup_ledger.config import settings
from roundup_ledger.domain import engine
from roundup_ledger.domain.exceptions import DomainException
from roundup_ledger.domain.money import MoneyPolicy
from roundup_ledger.infrastructure.observability.logging import log_batch
from roundup_ledger.infrastructure.observability.metrics import record_validation

router = APIRouter()


@router.post("/transactions:parse", response_model=List[TransactionSchema])
def parse_transactions(
    expenses: List[ExpenseSchema],
    request: Request,
    policy: MoneyPolicy = Depends(get_money_policy),
):
    """Ceiling and remanent for every expense, in input order, without validation"""
    request_id = get_request_id(request)
    try:
        transactions = engine.parse_expenses([e.to_domain() for e in expenses], policy)
    except DomainException as e:
        logging.warning(f"Rejected parse request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    return [TransactionSchema.from_domain(t) for t in transactions]


@router.post("/transactions:validator", response_model=ValidatorResponse)
def validate_transactions(
    request_body: ValidatorRequest,
    request: Request,
    policy: MoneyPolicy = Depends(get_money_policy),
):
    """
    Split expenses into valid and invalid.

    An expense is invalid when its amount is negative or >= 500000, its
    date is missing or malformed, or its date repeats an earlier valid one.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = engine.validate_expenses(request_body.domain_expenses(), policy)
    except DomainException as e:
        logging.warning(f"Rejected validator request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_validation(len(result.valid), result.invalid)
    log_batch(
        request_id, "validator", len(result.valid), len(result.invalid), 0, duration_ms, wage=request_body.wage
    )

    return ValidatorResponse(
        valid=[TransactionSchema.from_domain(r) for r in result.valid],
        invalid=[InvalidTransactionSchema.from_domain(r) for r in result.invalid],
    )


@router.post("/transactions:filter", response_model=FilterResponse)
def filter_transactions(
    request_body: FilterRequest,
    request: Request,
    policy: MoneyPolicy = Depends(get_money_policy),
):
    """
    Apply q (override), p (addition) and k (window) periods.

    Flow:
    1. Parse every period boundary (a malformed one fails the call)
    2. Validate expenses and compute ceiling / remanent
    3. Replace remanent by the winning q period, then add every matching p
    4. Sum remanents per k window and flag window membership
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = engine.filter_expenses(
            request_body.domain_expenses(),
            overrides=[q.to_domain() for q in request_body.q],
            additions=[p.to_domain() for p in request_body.p],
            windows=[k.to_domain() for k in request_body.k],
            policy=policy,
            drop_zero=settings.filter_drop_zero_remanent,
        )
    except DomainException as e:
        logging.warning(f"Rejected filter request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_validation(len(result.valid), result.invalid)
    log_batch(request_id, "filter", len(result.valid), len(result.invalid), len(request_body.k), duration_ms)

    return FilterResponse(
        valid=[ValidTransactionSchema.from_domain(r) for r in result.valid],
        invalid=[InvalidTransactionSchema.from_domain(r) for r in result.invalid],
        savings_by_dates=[
            WindowSumSchema(start=s.window.raw_start, end=s.window.raw_end, amount=s.amount)
            for s in result.savings_by_window
        ],
        total_savings=result.total_savings,
    )
