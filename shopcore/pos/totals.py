"""
shopcore/pos/totals.py
----------------------
Pure-Python discount and sale-total calculation.

Given a subtotal, a discount spec and (for cash) the tendered amount,
produce the discount amount, grand total and change. Out-of-range input
is clamped, never raised, so that 0 <= total <= subtotal always holds.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from shopcore.cart.store import to_decimal


Q       = Decimal('0.01')
ZERO    = Decimal('0')
HUNDRED = Decimal('100')


class DiscountKind(enum.Enum):
    percentage = "percentage"
    fixed      = "fixed"


class PaymentMethod(enum.Enum):
    cash   = "cash"
    card   = "card"
    bkash  = "bkash"
    nagad  = "nagad"
    rocket = "rocket"

    @property
    def requires_tender(self) -> bool:
        """Only cash collects a tendered amount."""
        return self is PaymentMethod.cash


@dataclass(frozen=True)
class DiscountSpec:
    kind:  DiscountKind = DiscountKind.percentage
    value: Decimal = ZERO

    @classmethod
    def none(cls) -> 'DiscountSpec':
        return cls(DiscountKind.percentage, ZERO)

    @classmethod
    def parse(cls, kind, value) -> 'DiscountSpec':
        """
        Build a spec from raw UI input. An unknown kind or a value that is
        not a number yields "no discount" rather than an error.
        """
        try:
            kind = kind if isinstance(kind, DiscountKind) else DiscountKind(str(kind).strip().lower())
        except ValueError:
            return cls.none()
        return cls(kind, to_decimal(value))

    def to_dict(self) -> dict:
        return {'kind': self.kind.value, 'value': str(self.value)}


@dataclass(frozen=True)
class SaleTotals:
    subtotal:        Decimal
    discount_amount: Decimal
    total:           Decimal
    tendered:        Optional[Decimal]
    change:          Decimal

    def to_dict(self) -> dict:
        return {
            'subtotal':        str(self.subtotal),
            'discount_amount': str(self.discount_amount),
            'total':           str(self.total),
            'tendered':        None if self.tendered is None else str(self.tendered),
            'change':          str(self.change),
        }


def _clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(value, high))


def discount_amount(subtotal, spec: DiscountSpec) -> Decimal:
    """
    percentage → subtotal × clamp(value, 0, 100) / 100
    fixed      → min(value, subtotal), never below 0
    """
    subtotal = max(to_decimal(subtotal), ZERO)
    value    = to_decimal(spec.value)

    if spec.kind is DiscountKind.percentage:
        percent = _clamp(value, ZERO, HUNDRED)
        amount  = (subtotal * percent / HUNDRED).quantize(Q, rounding=ROUND_HALF_UP)
    else:
        amount  = _clamp(value, ZERO, subtotal).quantize(Q, rounding=ROUND_HALF_UP)

    # Rounding must not push the discount past the subtotal
    return min(amount, subtotal)


def compute_totals(subtotal, spec: Optional[DiscountSpec] = None, tendered=None) -> SaleTotals:
    """Discount, grand total and change for one sale."""
    subtotal = max(to_decimal(subtotal), ZERO)
    spec     = spec or DiscountSpec.none()
    discount = discount_amount(subtotal, spec)
    total    = subtotal - discount

    tendered_amount = None
    change          = ZERO
    if tendered is not None and str(tendered).strip() != '':
        tendered_amount = to_decimal(tendered)
        change = max(ZERO, tendered_amount - total).quantize(Q, rounding=ROUND_HALF_UP)

    return SaleTotals(
        subtotal=subtotal,
        discount_amount=discount,
        total=total,
        tendered=tendered_amount,
        change=change,
    )


def can_complete_sale(totals: SaleTotals, method: PaymentMethod, line_count: int) -> bool:
    """
    A sale needs at least one line. Cash additionally needs a tendered
    amount covering the total; other methods are not validated here.
    """
    if line_count <= 0:
        return False
    if method.requires_tender:
        return totals.tendered is not None and totals.tendered >= totals.total
    return True
