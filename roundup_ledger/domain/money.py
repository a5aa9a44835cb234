"""Numeric policy shared by every monetary computation in one call.

Amounts arrive either as fractional major units (rupees as floats) or as
integer minor units (paise). Rule semantics are identical in both modes;
only the thresholds are scaled and the output rounding differs.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from numbers import Real

from roundup_ledger.domain.exceptions import ConfigurationError

CEILING_MULTIPLE = 100
MAX_EXPENSE_AMOUNT = 500_000


@dataclass(frozen=True)
class MoneyPolicy:
    """How monetary values are represented for the duration of a call"""

    integral: bool
    scale: int  # minor units per major unit

    @property
    def ceiling_step(self) -> int:
        return CEILING_MULTIPLE * self.scale

    @property
    def max_amount(self) -> int:
        return MAX_EXPENSE_AMOUNT * self.scale

    def to_major(self, value: float) -> float:
        return value / self.scale

    def from_major(self, value: float) -> float:
        return value * self.scale

    def check(self, value: Real, field: str = "amount") -> Real:
        """
        Enforce the representation on a caller-supplied value.

        Raises:
            ConfigurationError: When a fractional value shows up in integral mode
        """
        if self.integral and not float(value).is_integer():
            raise ConfigurationError(
                f"{field}={value!r} is fractional but the call uses integer minor units"
            )
        return int(value) if self.integral else value

    def round(self, value: float) -> float | int:
        """Round half-up at the output boundary (2 decimals, or whole minor units)"""
        exponent = Decimal("1") if self.integral else Decimal("0.01")
        rounded = Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP)
        return int(rounded) if self.integral else float(rounded)


FRACTIONAL = MoneyPolicy(integral=False, scale=1)
MINOR_UNITS = MoneyPolicy(integral=True, scale=100)


def policy_for_mode(mode: str) -> MoneyPolicy:
    """Map the configured numeric mode onto a policy"""
    if mode == "fractional":
        return FRACTIONAL
    if mode == "minor_units":
        return MINOR_UNITS
    raise ConfigurationError(f"Unknown numeric mode: {mode}")


def normalize_rate(rate: float) -> float:
    """Treat magnitudes above 1 as percentages (5.5 -> 0.055)"""
    if abs(rate) > 1:
        return rate / 100
    return rate
