"""
shopcore/cart/store.py
----------------------
Ordered cart of line items backed by a durable scope.

Persisted structure under the scope key (default 'cart'):
[
    {
        "product_id": str,
        "variant":    {attr: value, ...},
        "quantity":   int,
        "unit_price": str,   ← string so it survives JSON serialisation
        "name":       str,
        "sku":        str | None
    },
    ...
]

Invariants kept by every operation:
  * no two lines share an identity (add merges, restore re-merges)
  * every quantity is >= 1 (anything lower removes the line)
  * total == Σ unit_price × quantity, count == Σ quantity

All money is Decimal; unit prices are snapshots taken when the line is
first added and are never overwritten by later merges.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from shopcore.cart.identity import IdentityKey, identity_of
from shopcore.storage.scope import DurableScope


log = logging.getLogger(__name__)

Q = Decimal('0.01')   # quantize target


def to_decimal(value) -> Decimal:
    """Coerce a price-like value to Decimal; junk becomes 0."""
    if isinstance(value, Decimal) and value.is_finite():
        return value
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal('0')
    return amount if amount.is_finite() else Decimal('0')


@dataclass
class LineItem:
    """One distinct (product, variant) entry with its own quantity."""
    product_id: str
    variant:    dict = field(default_factory=dict)
    quantity:   int = 1
    unit_price: Decimal = Decimal('0')
    name:       str = ''
    sku:        Optional[str] = None

    @property
    def identity(self) -> IdentityKey:
        return identity_of(self.product_id, self.variant)

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price * self.quantity).quantize(Q)

    def copy(self) -> 'LineItem':
        return LineItem(**{**vars(self), 'variant': dict(self.variant)})

    def to_dict(self) -> dict:
        return {
            'product_id': self.product_id,
            'variant':    dict(self.variant),
            'quantity':   self.quantity,
            'unit_price': str(self.unit_price),
            'name':       self.name,
            'sku':        self.sku,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'LineItem':
        return cls(
            product_id=str(data['product_id']),
            variant=dict(data.get('variant') or {}),
            quantity=int(data['quantity']),
            unit_price=to_decimal(data.get('unit_price', '0')),
            name=data.get('name', ''),
            sku=data.get('sku'),
        )


class CartStore:
    """
    The shopper's (or cashier's) cart.

    With `clamp_to_stock=True` (point-of-sale surface) quantities are
    capped at the stock figure supplied with the operation. The web
    storefront leaves stock checks to presentation.
    """

    def __init__(self, scope: DurableScope, key: str = 'cart', clamp_to_stock: bool = False):
        self.scope          = scope
        self.key            = key
        self.clamp_to_stock = clamp_to_stock
        self._lines: List[LineItem] = self._restore()

    # ── Persistence ───────────────────────────────────────────────

    def _restore(self) -> List[LineItem]:
        lines: List[LineItem] = []
        by_identity = {}
        for raw in self.scope.load(self.key):
            try:
                item = LineItem.from_dict(raw)
            except (KeyError, TypeError, ValueError) as exc:
                log.warning(f"Skipping malformed {self.key!r} entry {raw!r}: {exc}")
                continue
            if item.quantity <= 0:
                continue
            existing = by_identity.get(item.identity)
            if existing is not None:
                existing.quantity += item.quantity
                continue
            by_identity[item.identity] = item
            lines.append(item)
        return lines

    def _persist(self) -> None:
        self.scope.save(self.key, [line.to_dict() for line in self._lines])

    # ── Read ──────────────────────────────────────────────────────

    def _find(self, key: IdentityKey) -> Optional[LineItem]:
        for line in self._lines:
            if line.identity == key:
                return line
        return None

    def get(self, product_id, variant=None) -> Optional[LineItem]:
        line = self._find(identity_of(product_id, variant))
        return line.copy() if line else None

    def items(self) -> List[LineItem]:
        """Snapshot copies in insertion order; mutating them does not touch the cart."""
        return [line.copy() for line in self._lines]

    def count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def total(self) -> Decimal:
        return sum((line.line_total for line in self._lines), start=Decimal('0'))

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    # ── Write ─────────────────────────────────────────────────────

    def _clamp(self, quantity: int, stock: Optional[int]) -> int:
        if self.clamp_to_stock and stock is not None:
            return min(quantity, max(int(stock), 0))
        return quantity

    def add(self, product_id, variant=None, quantity: int = 1, unit_price=0,
            stock: Optional[int] = None, name: str = '', sku: Optional[str] = None) -> Optional[LineItem]:
        """
        Merge-or-append. An existing line gets `quantity` more units at its
        original price; otherwise a new line is appended.

        Returns the resulting line, or None when stock clamping leaves
        nothing to hold (POS, zero stock).
        """
        quantity = int(quantity) if quantity and int(quantity) > 0 else 1
        key      = identity_of(product_id, variant)
        line     = self._find(key)

        if line is not None:
            line.quantity = self._clamp(line.quantity + quantity, stock)
            if line.quantity <= 0:
                self._lines.remove(line)
                line = None
        else:
            quantity = self._clamp(quantity, stock)
            if quantity > 0:
                line = LineItem(
                    product_id=str(product_id),
                    variant=dict(variant or {}),
                    quantity=quantity,
                    unit_price=to_decimal(unit_price),
                    name=name,
                    sku=sku,
                )
                self._lines.append(line)

        self._persist()
        return line.copy() if line else None

    def remove(self, product_id, variant=None) -> None:
        """Drop the matching line; no-op if absent."""
        key = identity_of(product_id, variant)
        self._lines = [line for line in self._lines if line.identity != key]
        self._persist()

    def set_quantity(self, product_id, variant, quantity: int, stock: Optional[int] = None) -> None:
        """Replace a line's quantity. quantity <= 0 removes the line."""
        if quantity is None or int(quantity) <= 0:
            self.remove(product_id, variant)
            return

        line = self._find(identity_of(product_id, variant))
        if line is None:
            return

        line.quantity = self._clamp(int(quantity), stock)
        if line.quantity <= 0:
            self._lines.remove(line)
        self._persist()

    def clear(self) -> None:
        """Empty the cart. Safe on an already-empty cart."""
        self._lines = []
        self._persist()

    def to_dict(self) -> dict:
        return {
            'items': [
                {**line.to_dict(), 'line_total': str(line.line_total)}
                for line in self._lines
            ],
            'count': self.count(),
            'total': str(self.total()),
        }
