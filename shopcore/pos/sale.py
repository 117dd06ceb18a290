"""
shopcore/pos/sale.py
--------------------
The cashier's active sale.

Composes a stock-clamped cart with the selected customer, the discount,
the payment method and the tendered cash. Totals are recomputed from the
cart on every read; nothing here is cached.

Persisted under two scope keys:
    'pos_cart' → the cart lines (see shopcore/cart/store.py)
    'pos_sale' → [{"customer": {...} | null, "discount": {...},
                   "payment_method": str, "tendered": str | null}]

Completing a sale only produces an in-memory receipt and resets the
sale; recording it anywhere is the caller's business.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from shopcore.cart.store import CartStore, LineItem, to_decimal
from shopcore.pos.totals import (
    DiscountSpec, PaymentMethod, SaleTotals,
    can_complete_sale, compute_totals,
)
from shopcore.storage.scope import DurableScope


log = logging.getLogger(__name__)


class SaleBlockedError(ValueError):
    """Raised by PosSale.complete() when the sale cannot be completed yet."""


@dataclass
class SaleReceipt:
    reference:      str
    lines:          List[LineItem]
    totals:         SaleTotals
    payment_method: PaymentMethod
    customer:       Optional[dict] = None
    discount:       DiscountSpec = field(default_factory=DiscountSpec.none)
    completed_at:   datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            'reference':      self.reference,
            'lines':          [{**line.to_dict(), 'line_total': str(line.line_total)} for line in self.lines],
            'totals':         self.totals.to_dict(),
            'payment_method': self.payment_method.value,
            'customer':       self.customer,
            'discount':       self.discount.to_dict(),
            'completed_at':   self.completed_at.isoformat(),
        }


class PosSale:

    STATE_KEY = 'pos_sale'

    def __init__(self, scope: DurableScope, cart_key: str = 'pos_cart'):
        self.scope = scope
        self.cart  = CartStore(scope, key=cart_key, clamp_to_stock=True)

        self.customer: Optional[dict]       = None
        self.discount: DiscountSpec         = DiscountSpec.none()
        self.payment_method: PaymentMethod  = PaymentMethod.cash
        self.tendered: Optional[Decimal]    = None
        self._restore()

    # ── Persistence ───────────────────────────────────────────────

    def _restore(self) -> None:
        stored = self.scope.load(self.STATE_KEY)
        if not stored or not isinstance(stored[0], dict):
            return
        state = stored[0]

        customer = state.get('customer')
        self.customer = customer if isinstance(customer, dict) else None

        discount = state.get('discount') or {}
        self.discount = DiscountSpec.parse(discount.get('kind', 'percentage'), discount.get('value', 0))

        try:
            self.payment_method = PaymentMethod(state.get('payment_method', 'cash'))
        except ValueError:
            self.payment_method = PaymentMethod.cash

        tendered = state.get('tendered')
        self.tendered = to_decimal(tendered) if tendered is not None else None

    def _persist(self) -> None:
        self.scope.save(self.STATE_KEY, [{
            'customer':       self.customer,
            'discount':       self.discount.to_dict(),
            'payment_method': self.payment_method.value,
            'tendered':       None if self.tendered is None else str(self.tendered),
        }])

    # ── Cart operations ───────────────────────────────────────────

    def add_product(self, product, variant: Optional[dict] = None) -> Optional[LineItem]:
        """
        Add one unit of a ProductSnapshot, capped at the stock of the SKU
        being sold. Returns None (cart untouched) when that SKU is out of
        stock. Raises VariantRequiredError for a product with variants
        when `variant` does not pick one of them.
        """
        chosen, attributes = product.line_variant(variant)
        stock = chosen.stock if chosen else product.stock
        if stock <= 0:
            return None
        return self.cart.add(
            product.id, attributes,
            quantity=1,
            unit_price=chosen.price if chosen else product.price,
            stock=stock,
            name=product.name,
            sku=chosen.sku if chosen else product.barcode,
        )

    def set_quantity(self, product_id, variant, quantity: int, stock: Optional[int] = None) -> None:
        self.cart.set_quantity(product_id, variant, quantity, stock=stock)

    def remove(self, product_id, variant=None) -> None:
        self.cart.remove(product_id, variant)

    # ── Sale parameters ───────────────────────────────────────────

    def set_discount(self, kind, value) -> DiscountSpec:
        self.discount = DiscountSpec.parse(kind, value)
        self._persist()
        return self.discount

    def set_payment_method(self, method) -> PaymentMethod:
        """Switching away from cash drops the tendered amount."""
        self.payment_method = method if isinstance(method, PaymentMethod) else PaymentMethod(str(method))
        if not self.payment_method.requires_tender:
            self.tendered = None
        self._persist()
        return self.payment_method

    def set_tendered(self, amount) -> None:
        """Record cash handed over. Blank clears it."""
        if amount is None or str(amount).strip() == '':
            self.tendered = None
        else:
            self.tendered = to_decimal(amount)
        self._persist()

    def select_customer(self, customer: Optional[dict]) -> None:
        self.customer = dict(customer) if customer else None
        self._persist()

    # ── Derived ───────────────────────────────────────────────────

    def totals(self) -> SaleTotals:
        tendered = self.tendered if self.payment_method.requires_tender else None
        return compute_totals(self.cart.total(), self.discount, tendered)

    def can_complete(self) -> bool:
        return can_complete_sale(self.totals(), self.payment_method, len(self.cart))

    # ── Lifecycle ─────────────────────────────────────────────────

    def complete(self) -> SaleReceipt:
        """
        Close the sale and reset for the next customer.
        Raises SaleBlockedError when the cart is empty or cash tender is short.
        """
        totals = self.totals()
        if self.cart.is_empty():
            raise SaleBlockedError('Cart is empty. Add products before completing a sale.')
        if not can_complete_sale(totals, self.payment_method, len(self.cart)):
            raise SaleBlockedError(
                f'Tendered amount {totals.tendered if totals.tendered is not None else 0} '
                f'does not cover total {totals.total}.'
            )

        receipt = SaleReceipt(
            reference=uuid.uuid4().hex[:12].upper(),
            lines=self.cart.items(),
            totals=totals,
            payment_method=self.payment_method,
            customer=self.customer,
            discount=self.discount,
        )
        log.info(f"POS sale {receipt.reference} completed: {totals.total} via {self.payment_method.value}")
        self.reset()
        return receipt

    def reset(self) -> None:
        """Clear cart, customer, discount and tender. Payment method falls back to cash."""
        self.cart.clear()
        self.customer       = None
        self.discount       = DiscountSpec.none()
        self.payment_method = PaymentMethod.cash
        self.tendered       = None
        self._persist()

    def to_dict(self) -> dict:
        return {
            'cart':           self.cart.to_dict(),
            'customer':       self.customer,
            'discount':       self.discount.to_dict(),
            'payment_method': self.payment_method.value,
            'totals':         self.totals().to_dict(),
            'can_complete':   self.can_complete(),
        }
