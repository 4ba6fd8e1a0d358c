"""
Commission-inclusive price calculation.

Rules:
- Agent amount = round2(base * agent_rate / 100)
- Consultant amount = round2(base * consultant_rate / 100)
- Final price = round2(base + agent amount + consultant amount)
- Base prices must fit the catalog price column; results must fit the
  line price column

Each amount is rounded before summing. Historical invoices were produced
this way, so computing round2(base * (1 + total_rate / 100)) in one step
would not reproduce them.
"""

import logging
from dataclasses import asdict, dataclass, fields
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from evershine.errors import InvalidArgument
from evershine.models.base import BASE_PRICE, LINE_PRICE, numeric_max

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
MONEY_QUANT = Decimal("0.01")
DEFAULT_MAX_RATE = Decimal("1000")
MAX_BASE_PRICE = numeric_max(BASE_PRICE)
MAX_FINAL_PRICE = numeric_max(LINE_PRICE)


def round2(value: Decimal) -> Decimal:
    """Round half-up to 2 decimal places."""
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any, field_name: str = "value") -> Decimal:
    """Convert an int/float/str/Decimal to Decimal, rejecting anything else.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its
    binary expansion.
    """
    if isinstance(value, bool):
        raise InvalidArgument(f"{field_name} must be numeric, got bool")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            raise InvalidArgument(f"{field_name} is not a number: {value!r}")
    raise InvalidArgument(
        f"{field_name} must be numeric, got {type(value).__name__}"
    )


@dataclass(frozen=True)
class RateInputs:
    """Rate pair for one product, in percentage points."""

    agent_commission_rate: Decimal = ZERO
    consultant_level_rate: Decimal = ZERO


@dataclass(frozen=True)
class RateBreakdown:
    """
    Complete result of one price calculation.

    All fields are always present. total_rate is the sum of the two rates
    actually applied, and final_price is what the client pays per unit.
    """

    agent_commission_rate: Decimal
    consultant_level_rate: Decimal
    total_rate: Decimal
    base_price: Decimal
    agent_commission_amount: Decimal
    consultant_commission_amount: Decimal
    final_price: Decimal

    def to_dict(self) -> dict[str, str]:
        """JSON-safe form; decimals become strings so reloads are exact."""
        return {key: str(value) for key, value in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RateBreakdown":
        """Rebuild from to_dict() output. Missing keys default to 0."""
        data = data or {}
        return cls(**{
            f.name: to_decimal(data.get(f.name, "0"), f.name)
            for f in fields(cls)
        })


class PriceCalculator:
    """Pure price calculator. No I/O; identical inputs give identical output."""

    def __init__(self, max_rate: Decimal = DEFAULT_MAX_RATE):
        self.max_rate = max_rate

    def _clamp_rate(self, rate: Any, field_name: str) -> Decimal:
        value = to_decimal(rate, field_name)
        if not value.is_finite():
            raise InvalidArgument(f"{field_name} must be a finite number, got {value}")
        if value < ZERO:
            logger.warning(f"Clamping {field_name} {value} up to 0")
            return ZERO
        if value > self.max_rate:
            logger.warning(f"Clamping {field_name} {value} down to {self.max_rate}")
            return self.max_rate
        return value

    def calculate(self, base_price: Any, rates: RateInputs) -> RateBreakdown:
        """Calculate the commission-inclusive price of one unit.

        Args:
            base_price: Commission-free product price
            rates: Agent and consultant rates in percentage points

        Returns:
            RateBreakdown with every component

        Raises:
            InvalidArgument: base price is negative, NaN, infinite, too large
                or not a number, a rate is NaN, or the result does not fit
                a line price column
        """
        base = to_decimal(base_price, "base_price")
        if not base.is_finite():
            raise InvalidArgument(f"base_price must be a finite number, got {base}")
        if base < ZERO:
            raise InvalidArgument(f"base_price must not be negative, got {base}")
        if base > MAX_BASE_PRICE:
            raise InvalidArgument(f"base_price {base} exceeds the maximum of {MAX_BASE_PRICE}")

        agent_rate = self._clamp_rate(rates.agent_commission_rate, "agent_commission_rate")
        consultant_rate = self._clamp_rate(rates.consultant_level_rate, "consultant_level_rate")

        try:
            agent_amount = round2(base * agent_rate / HUNDRED)
            consultant_amount = round2(base * consultant_rate / HUNDRED)
            final_price = round2(base + agent_amount + consultant_amount)
        except InvalidOperation:
            raise InvalidArgument(
                f"Price of {base} at {agent_rate}% + {consultant_rate}% is out of range"
            )
        if final_price > MAX_FINAL_PRICE:
            raise InvalidArgument(f"final price {final_price} exceeds the maximum of {MAX_FINAL_PRICE}")

        return RateBreakdown(
            agent_commission_rate=agent_rate,
            consultant_level_rate=consultant_rate,
            total_rate=agent_rate + consultant_rate,
            base_price=base,
            agent_commission_amount=agent_amount,
            consultant_commission_amount=consultant_amount,
            final_price=final_price,
        )
