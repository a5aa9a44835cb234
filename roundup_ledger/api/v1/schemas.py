"""Pydantic schemas for API request/response validation"""

from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, FiniteFloat

from roundup_ledger.domain.models import (
    AdditionPeriod,
    Expense,
    OverridePeriod,
    RejectedRecord,
    ReportingWindow,
    ResolvedRecord,
    Transaction,
    ValidatedRecord,
)

# Integers stay integers (minor units), floats stay floats; NaN and inf are refused
Money = Union[int, FiniteFloat]


class CamelModel(BaseModel):
    """Accepts both field names and camelCase aliases"""

    model_config = ConfigDict(populate_by_name=True)


class ExpenseSchema(BaseModel):
    """Single raw expense"""

    date: Optional[str] = Field(None, description="YYYY-MM-DD hh:mm:ss")
    amount: Money

    def to_domain(self) -> Expense:
        return Expense(date=self.date, amount=self.amount)


class QPeriodSchema(BaseModel):
    """Override period: replaces the remanent with `fixed`"""

    fixed: Money
    start: str
    end: str

    def to_domain(self) -> OverridePeriod:
        return OverridePeriod.parse(self.start, self.end, self.fixed)


class PPeriodSchema(BaseModel):
    """Addition period: adds `extra` to the remanent"""

    extra: Money
    start: str
    end: str

    def to_domain(self) -> AdditionPeriod:
        return AdditionPeriod.parse(self.start, self.end, self.extra)


class KPeriodSchema(BaseModel):
    """Reporting window"""

    start: str
    end: str

    def to_domain(self) -> ReportingWindow:
        return ReportingWindow.parse(self.start, self.end)


class ExpenseBatch(CamelModel):
    """Expenses may be posted under either `transactions` or `expenses`"""

    expenses: List[ExpenseSchema] = Field(
        default_factory=list,
        validation_alias=AliasChoices("transactions", "expenses"),
    )

    def domain_expenses(self) -> List[Expense]:
        return [e.to_domain() for e in self.expenses]


class ValidatorRequest(ExpenseBatch):
    """Request body for POST /transactions:validator"""

    wage: Money = 0


class FilterRequest(ExpenseBatch):
    """Request body for POST /transactions:filter"""

    q: List[QPeriodSchema] = Field(default_factory=list)
    p: List[PPeriodSchema] = Field(default_factory=list)
    k: List[KPeriodSchema] = Field(default_factory=list)


class ReturnsRequest(FilterRequest):
    """Request body for POST /returns:nps and /returns:index"""

    age: int = Field(..., ge=0)
    wage: Money
    inflation: FiniteFloat
    rate: Optional[FiniteFloat] = Field(None, description="Custom annual rate, decimal or percentage")


class ProjectionRequest(BaseModel):
    """Request body for the standalone projection endpoints"""

    invested: Money
    wage: Money
    age: int = Field(..., ge=0)
    inflation: FiniteFloat
    rate: Optional[FiniteFloat] = None


class TransactionSchema(BaseModel):
    """Expense with its ceiling and remanent"""

    date: Optional[str]
    amount: Money
    ceiling: Money
    remanent: Money

    @classmethod
    def from_domain(cls, record: Transaction | ValidatedRecord) -> "TransactionSchema":
        return cls(date=record.date, amount=record.amount, ceiling=record.ceiling, remanent=record.remanent)


class InvalidTransactionSchema(BaseModel):
    """Rejected expense with its reason"""

    date: Optional[str]
    amount: Money
    reason: str
    message: str

    @classmethod
    def from_domain(cls, record: RejectedRecord) -> "InvalidTransactionSchema":
        return cls(
            date=record.expense.date,
            amount=record.expense.amount,
            reason=record.reason.value,
            message=record.message,
        )


class ValidTransactionSchema(CamelModel):
    """Resolved expense with its window membership"""

    date: str
    amount: Money
    ceiling: Money
    remanent: Money
    in_k_period: bool = Field(..., alias="inKPeriod")

    @classmethod
    def from_domain(cls, record: ResolvedRecord) -> "ValidTransactionSchema":
        return cls(
            date=record.date,
            amount=record.amount,
            ceiling=record.ceiling,
            remanent=record.remanent,
            in_k_period=record.in_window,
        )


class ValidatorResponse(BaseModel):
    """Response for POST /transactions:validator"""

    valid: List[TransactionSchema]
    invalid: List[InvalidTransactionSchema]


class WindowSumSchema(BaseModel):
    start: str
    end: str
    amount: Money


class FilterResponse(CamelModel):
    """Response for POST /transactions:filter"""

    valid: List[ValidTransactionSchema]
    invalid: List[InvalidTransactionSchema]
    savings_by_dates: List[WindowSumSchema] = Field(..., alias="savingsByDates")
    total_savings: Money = Field(..., alias="totalSavings")


class WindowResultSchema(CamelModel):
    start: str
    end: str
    amount: Money
    profit: Money
    real_profit: Money = Field(..., alias="realProfit")
    tax_benefit: Money = Field(..., alias="taxBenefit")


class ReturnsResponse(CamelModel):
    """Response for POST /returns:nps and /returns:index"""

    total_transaction_amount: Money = Field(..., alias="totalTransactionAmount")
    total_ceiling: Money = Field(..., alias="totalCeiling")
    savings_by_dates: List[WindowResultSchema] = Field(..., alias="savingsByDates")
    tax_benefit: Optional[Money] = Field(None, alias="taxBenefit")


class ProjectionResponse(CamelModel):
    """Response for the standalone projection endpoints"""

    invested: Money
    returns: Money
    profit: Money
    real_profit: Money = Field(..., alias="realProfit")
    tax_benefit: Money = Field(..., alias="taxBenefit")
    inflation_adjusted: Money = Field(..., alias="inflationAdjusted")
