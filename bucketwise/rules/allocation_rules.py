# rules/allocation_rules.py

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional

from .policy_config import (
    NECESSITY_BUCKET,
    NON_ALLOCATION_BUCKETS,
    NECESSITY_SHARE,
    OTHER_BUCKET_SHARE,
)

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Converts int/float/str/Decimal input to a cent-quantized Decimal."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AllocationSplit:
    """How one income event is divided. All amounts are signed Decimals."""

    gross_income: Decimal
    total_active_expenses: Decimal
    net_after_expenses: Decimal
    # None when the catalog has no Necessity bucket
    necessity_share: Optional[Decimal]
    # bucket name -> share, for every non-Necessity allocation bucket
    other_shares: Dict[str, Decimal] = field(default_factory=dict)
    expenses_share: Decimal = Decimal("0.00")
    savings_share: Decimal = Decimal("0.00")

    @property
    def allocated_sum(self) -> Decimal:
        return (self.necessity_share or Decimal("0.00")) + sum(self.other_shares.values(), Decimal("0.00"))

    def bucket_shares(self) -> Dict[str, Decimal]:
        """Shares of the fixed-policy buckets (Necessity first), excluding Savings and Expenses."""
        shares: Dict[str, Decimal] = {}
        if self.necessity_share is not None:
            shares[NECESSITY_BUCKET] = self.necessity_share
        shares.update(self.other_shares)
        return shares


def is_allocation_bucket(bucket_name: str) -> bool:
    return bucket_name not in NON_ALLOCATION_BUCKETS


def share_for_bucket(bucket_name: str) -> Optional[Decimal]:
    """Fraction of net income a bucket receives, or None for Savings/Expenses."""
    if not is_allocation_bucket(bucket_name):
        return None
    if bucket_name == NECESSITY_BUCKET:
        return NECESSITY_SHARE
    return OTHER_BUCKET_SHARE


def split_income(
    gross_income,
    total_active_expenses,
    bucket_names: Iterable[str],
    clamp_net: bool = False,
) -> AllocationSplit:
    """
    Splits gross income across the catalog.

    Active expenses come off the top and are reserved for the Expenses bucket.
    The net amount is split 60% to Necessity and 10% to every other allocation
    bucket; Savings receives the exact remainder so that

        necessity + others + expenses + savings == gross

    holds to the cent. ``net_after_expenses`` keeps its sign unless
    ``clamp_net`` is set, which only display previews use.
    """
    gross = to_money(gross_income)
    reserved = to_money(total_active_expenses)

    net = gross - reserved
    if clamp_net and net < 0:
        net = Decimal("0.00")

    necessity_share: Optional[Decimal] = None
    other_shares: Dict[str, Decimal] = {}
    for name in bucket_names:
        if not is_allocation_bucket(name):
            continue
        if name == NECESSITY_BUCKET:
            necessity_share = to_money(net * NECESSITY_SHARE)
        elif name not in other_shares:
            other_shares[name] = to_money(net * OTHER_BUCKET_SHARE)

    allocated = (necessity_share or Decimal("0.00")) + sum(other_shares.values(), Decimal("0.00"))

    return AllocationSplit(
        gross_income=gross,
        total_active_expenses=reserved,
        net_after_expenses=net,
        necessity_share=necessity_share,
        other_shares=other_shares,
        expenses_share=reserved if reserved > 0 else Decimal("0.00"),
        savings_share=net - allocated,
    )


def gross_income_needed(shortfall, bucket_name: str, total_active_expenses) -> Optional[Decimal]:
    """
    Gross income that would have to be allocated for a bucket to gain
    ``shortfall`` more balance: shortfall / share, plus the active expenses
    taken off the top. None when the bucket is not fed by the fixed split or
    there is no shortfall.
    """
    shortfall = Decimal(str(shortfall))
    share = share_for_bucket(bucket_name)
    if share is None or shortfall <= 0:
        return None
    net_needed = shortfall / share
    return to_money(net_needed + Decimal(str(total_active_expenses)))
