"""POST /returns:{nps,index} - retirement projections of round-up savings"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from roundup_ledger.api.dependencies import get_money_policy, get_request_id, get_tax_scope
from roundup_ledger.api.v1.schemas import (
    ProjectionRequest,
    ProjectionResponse,
    ReturnsRequest,
    ReturnsResponse,
    WindowResultSchema,
)
from roundup_ledger.config import settings
from roundup_ledger.domain import engine
from roundup_ledger.domain.exceptions import DomainException
from roundup_ledger.domain.models import Instrument, TaxBenefitScope
from roundup_ledger.domain.money import MoneyPolicy
from roundup_ledger.infrastructure.observability.logging import log_batch
from roundup_ledger.infrastructure.observability.metrics import record_projection

router = APIRouter()


def _configured_rate(instrument: Instrument, requested: float | None) -> float:
    """Caller-supplied rate, else the configured preset for the instrument"""
    if requested is not None:
        return requested
    return settings.nps_rate if instrument is Instrument.NPS else settings.index_rate


def _returns(
    instrument: Instrument,
    request_body: ReturnsRequest,
    request: Request,
    policy: MoneyPolicy,
    tax_scope: TaxBenefitScope,
) -> ReturnsResponse:
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        report = engine.calculate_returns(
            request_body.domain_expenses(),
            age=request_body.age,
            wage=request_body.wage,
            inflation=request_body.inflation,
            instrument=instrument,
            overrides=[q.to_domain() for q in request_body.q],
            additions=[p.to_domain() for p in request_body.p],
            windows=[k.to_domain() for k in request_body.k],
            policy=policy,
            drop_zero=settings.returns_drop_zero_remanent,
            tax_scope=tax_scope,
            rate=_configured_rate(instrument, request_body.rate),
            retirement_age=settings.retirement_age,
        )
    except DomainException as e:
        logging.warning(f"Rejected {instrument.value} returns request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_projection(instrument.value, len(report.savings_by_window))
    log_batch(
        request_id,
        f"returns:{instrument.value}",
        report.accepted_count,
        report.rejected_count,
        len(report.savings_by_window),
        duration_ms,
    )

    return ReturnsResponse(
        total_transaction_amount=report.total_transaction_amount,
        total_ceiling=report.total_ceiling,
        savings_by_dates=[
            WindowResultSchema(
                start=w.start,
                end=w.end,
                amount=w.amount,
                profit=w.profit,
                real_profit=w.real_profit,
                tax_benefit=w.tax_benefit,
            )
            for w in report.savings_by_window
        ],
        tax_benefit=report.tax_benefit,
    )


def _projection(instrument: Instrument, request_body: ProjectionRequest, request: Request, policy: MoneyPolicy):
    request_id = get_request_id(request)

    try:
        projection = engine.project_investment(
            request_body.invested,
            wage=request_body.wage,
            age=request_body.age,
            inflation=request_body.inflation,
            instrument=instrument,
            policy=policy,
            rate=_configured_rate(instrument, request_body.rate),
            retirement_age=settings.retirement_age,
        )
    except DomainException as e:
        logging.warning(f"Rejected {instrument.value} projection: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    record_projection(instrument.value)

    return ProjectionResponse(
        invested=projection.invested,
        returns=projection.future_value,
        profit=projection.profit,
        real_profit=projection.real_profit,
        tax_benefit=projection.tax_benefit,
        inflation_adjusted=projection.inflation_adjusted,
    )


@router.post("/returns:nps", response_model=ReturnsResponse)
def nps_returns(
    request_body: ReturnsRequest,
    request: Request,
    policy: MoneyPolicy = Depends(get_money_policy),
    tax_scope: TaxBenefitScope = Depends(get_tax_scope),
):
    """NPS (7.11% p.a.) projection per k window, with tax benefit"""
    return _returns(Instrument.NPS, request_body, request, policy, tax_scope)


@router.post("/returns:index", response_model=ReturnsResponse)
def index_returns(
    request_body: ReturnsRequest,
    request: Request,
    policy: MoneyPolicy = Depends(get_money_policy),
    tax_scope: TaxBenefitScope = Depends(get_tax_scope),
):
    """Index fund (14.49% p.a.) projection per k window, no tax benefit"""
    return _returns(Instrument.INDEX, request_body, request, policy, tax_scope)


@router.post("/returns:nps/projection", response_model=ProjectionResponse)
def nps_projection(
    request_body: ProjectionRequest,
    request: Request,
    policy: MoneyPolicy = Depends(get_money_policy),
):
    """Project a single invested amount into NPS"""
    return _projection(Instrument.NPS, request_body, request, policy)


@router.post("/returns:index/projection", response_model=ProjectionResponse)
def index_projection(
    request_body: ProjectionRequest,
    request: Request,
    policy: MoneyPolicy = Depends(get_money_policy),
):
    """Project a single invested amount into an index fund"""
    return _projection(Instrument.INDEX, request_body, request, policy)
