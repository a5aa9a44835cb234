"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from roundup_ledger.domain.exceptions import ConfigurationError
from roundup_ledger.utils.date_utils import parse_lenient


@dataclass
class Expense:
    """Raw expense as submitted by the caller"""

    date: Optional[str]
    amount: float


@dataclass
class Transaction:
    """Expense enriched with its ceiling and remanent, no validation applied"""

    date: Optional[str]
    amount: float
    ceiling: float
    remanent: float


class RejectionReason(str, Enum):
    """Why an expense was refused, in precedence order"""

    NEGATIVE_AMOUNT = "NegativeAmount"
    AMOUNT_TOO_LARGE = "AmountTooLarge"
    MISSING_OR_MALFORMED_DATE = "MissingOrMalformedDate"
    DUPLICATE_DATE = "DuplicateDate"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    RejectionReason.NEGATIVE_AMOUNT: "Negative amounts are not allowed",
    RejectionReason.AMOUNT_TOO_LARGE: "Amount must be less than 500000",
    RejectionReason.MISSING_OR_MALFORMED_DATE: "Invalid or missing date, expected format YYYY-MM-DD hh:mm:ss",
    RejectionReason.DUPLICATE_DATE: "Duplicate transaction date",
}


@dataclass
class ValidatedRecord:
    """Accepted expense with its parsed instant and residue"""

    date: str
    instant: datetime
    amount: float
    ceiling: float
    remanent: float


@dataclass
class RejectedRecord:
    """Refused expense with exactly one reason"""

    expense: Expense
    reason: RejectionReason

    @property
    def message(self) -> str:
        return self.reason.message


# An expense ends up as exactly one of the two
ValidationOutcome = Union[ValidatedRecord, RejectedRecord]


@dataclass
class ValidationResult:
    valid: List[ValidatedRecord]
    invalid: List[RejectedRecord]


@dataclass(frozen=True)
class Period:
    """Closed time interval [start, end], inclusive on both ends"""

    start: datetime
    end: datetime
    raw_start: str
    raw_end: str

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    @staticmethod
    def _bounds(start: str, end: str) -> tuple[datetime, datetime]:
        """
        Parse boundaries leniently.

        Raises:
            ConfigurationError: When either boundary is unparseable
        """
        try:
            return parse_lenient(start), parse_lenient(end)
        except ValueError as e:
            raise ConfigurationError(f"Invalid period [{start!r}, {end!r}]: {e}") from e


@dataclass(frozen=True)
class OverridePeriod(Period):
    """q-rule: replaces the remanent with a fixed value"""

    fixed_value: float = 0

    @classmethod
    def parse(cls, start: str, end: str, fixed_value: float) -> "OverridePeriod":
        lower, upper = cls._bounds(start, end)
        return cls(lower, upper, start, end, fixed_value)


@dataclass(frozen=True)
class AdditionPeriod(Period):
    """p-rule: adds an extra amount on top of the remanent"""

    extra: float = 0

    @classmethod
    def parse(cls, start: str, end: str, extra: float) -> "AdditionPeriod":
        lower, upper = cls._bounds(start, end)
        return cls(lower, upper, start, end, extra)


@dataclass(frozen=True)
class ReportingWindow(Period):
    """k-rule: only used to aggregate resolved remanents"""

    @classmethod
    def parse(cls, start: str, end: str) -> "ReportingWindow":
        lower, upper = cls._bounds(start, end)
        return cls(lower, upper, start, end)


@dataclass
class ResolvedRecord:
    """Accepted expense after override and addition rules"""

    date: str
    instant: datetime
    amount: float
    ceiling: float
    remanent: float
    in_window: bool = False


@dataclass
class WindowSum:
    window: ReportingWindow
    amount: float


@dataclass
class FilterResult:
    valid: List[ResolvedRecord]
    invalid: List[RejectedRecord]
    savings_by_window: List[WindowSum]
    total_savings: float


class Instrument(str, Enum):
    """Investment vehicle a projection is run against"""

    NPS = "nps"
    INDEX = "index"

    @property
    def tax_advantaged(self) -> bool:
        return self is Instrument.NPS


class TaxBenefitScope(str, Enum):
    PER_WINDOW = "per_window"
    GLOBAL = "global"


@dataclass
class Projection:
    """Compound growth of one principal up to retirement"""

    invested: float
    future_value: float
    profit: float
    real_profit: float
    inflation_adjusted: float
    tax_benefit: float


@dataclass
class WindowResult:
    start: str
    end: str
    amount: float
    profit: float
    tax_benefit: float
    real_profit: float = 0.0


@dataclass
class ReturnsReport:
    total_transaction_amount: float
    total_ceiling: float
    savings_by_window: List[WindowResult] = field(default_factory=list)
    tax_benefit: Optional[float] = None  # only set for the global tax scope
    accepted_count: int = 0
    rejected_count: int = 0
