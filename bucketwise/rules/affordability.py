# rules/affordability.py

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP
from typing import Optional

from ..db.enums import DisciplineMode
from ..errors import LimiterConfigurationError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class LimiterSet:
    """Per-bucket limiter coefficients, one per discipline mode."""

    light: Optional[Decimal]
    intermediate: Optional[Decimal]
    strict: Optional[Decimal]
    desperate: Optional[Decimal] = None

    def for_mode(self, mode: DisciplineMode) -> Decimal:
        """Desperate falls back to the strict coefficient when the bucket has none."""
        if mode is DisciplineMode.LIGHT:
            limiter = self.light
        elif mode is DisciplineMode.STRICT:
            limiter = self.strict
        elif mode is DisciplineMode.DESPERATE:
            limiter = self.desperate if self.desperate is not None else self.strict
        else:
            limiter = self.intermediate

        if limiter is None or Decimal(str(limiter)) <= 0:
            raise LimiterConfigurationError(
                f"Limiter for mode '{mode.value}' must be a positive number, got {limiter!r}."
            )
        return Decimal(str(limiter))


@dataclass(frozen=True)
class AffordabilityDecision:
    is_affordable: bool
    amount: Decimal
    current_balance: Decimal
    required_balance: Decimal
    max_affordable: Decimal
    limiter: Decimal
    mode: DisciplineMode

    @property
    def exact_required(self) -> Decimal:
        """Unrounded amount x limiter, for store-side guards."""
        return self.amount * self.limiter

    @property
    def shortfall(self) -> Decimal:
        """Balance still missing before the amount becomes affordable (0 if affordable)."""
        missing = (self.exact_required - self.current_balance).quantize(CENTS, rounding=ROUND_CEILING)
        return missing if missing > 0 else Decimal("0.00")


def check_affordability(amount, current_balance, limiters: LimiterSet, mode=None) -> AffordabilityDecision:
    """
    Decides whether ``amount`` may be spent from a bucket holding
    ``current_balance``. The limiter says how many times the price must be held
    in the bucket: required = amount x limiter.

    ``amount`` is taken in cents (half-up) and ``max_affordable`` is rounded
    down to the cent, so every amount up to and including it is affordable.
    Pure: safe for live what-if previews.
    """
    mode = DisciplineMode.parse(mode)
    limiter = limiters.for_mode(mode)

    amount = Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP)
    balance = Decimal(str(current_balance))

    required = amount * limiter
    max_affordable = (balance / limiter).quantize(CENTS, rounding=ROUND_FLOOR)

    return AffordabilityDecision(
        is_affordable=balance >= required,
        amount=amount,
        current_balance=balance,
        required_balance=required.quantize(CENTS, rounding=ROUND_HALF_UP),
        max_affordable=max_affordable,
        limiter=limiter,
        mode=mode,
    )


def days_remaining_in_month(today: date) -> int:
    """Days left after ``today`` in its month (0 on the last day)."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return last_day - today.day


def daily_spending_total(daily_amount, today: date) -> Decimal:
    """Projected spend of a recurring daily amount over the rest of the month."""
    return (Decimal(str(daily_amount)) * days_remaining_in_month(today)).quantize(CENTS, rounding=ROUND_HALF_UP)
