"""
shopcore/catalog/snapshot.py
----------------------------
Immutable product snapshots handed to the stores.

The cart and selection stores never query the catalog themselves; the
routes take a snapshot of the product at the moment of the user action
and pass it down.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple

from shopcore.cart.identity import canonical_variant


class VariantRequiredError(ValueError):
    """A product with variants was asked for without naming one of them."""


@dataclass(frozen=True)
class VariantSnapshot:
    sku:        str
    attributes: dict
    price:      Decimal
    stock:      int

    def to_dict(self) -> dict:
        return {
            'sku':        self.sku,
            'attributes': dict(self.attributes),
            'price':      str(self.price),
            'stock':      self.stock,
        }


@dataclass(frozen=True)
class ProductSnapshot:
    id:       int
    name:     str
    price:    Decimal
    stock:    int
    barcode:  str = ''
    category: str = ''
    variants: Tuple[VariantSnapshot, ...] = field(default_factory=tuple)

    @classmethod
    def from_model(cls, product) -> 'ProductSnapshot':
        return cls(
            id=product.id,
            name=product.name,
            price=Decimal(str(product.price)),
            stock=product.stock,
            barcode=product.barcode,
            category=product.category or '',
            variants=tuple(
                VariantSnapshot(
                    sku=v.sku,
                    attributes=v.attributes,
                    price=v.effective_price,
                    stock=v.effective_stock,
                )
                for v in product.variants
            ),
        )

    def variant_for(self, attributes: Optional[dict]) -> Optional[VariantSnapshot]:
        """
        The variant matching `attributes` (canonical compare).

        An exact match wins. Otherwise the attributes may name a subset
        (size + colour without material) as long as exactly one variant
        carries all of them.
        """
        wanted = canonical_variant(attributes)
        if not wanted:
            return None

        partial = []
        for variant in self.variants:
            have = canonical_variant(variant.attributes)
            if have == wanted:
                return variant
            if set(wanted) <= set(have):
                partial.append(variant)
        return partial[0] if len(partial) == 1 else None

    def line_variant(self, attributes: Optional[dict]) -> Tuple[Optional[VariantSnapshot], dict]:
        """
        The variant a cart line for `attributes` is keyed by: the matching
        variant and its full attribute set, or (None, {}) for a product
        without variants. Add, remove and set-quantity all go through here
        so a partial selection addresses the same line every time.

        Raises VariantRequiredError when the product has variants and none
        of them matches.
        """
        chosen = self.variant_for(attributes)
        if chosen is not None:
            return chosen, dict(chosen.attributes)
        if self.variants:
            raise VariantRequiredError(
                f"Please choose an available size / colour of {self.name}."
            )
        return None, {}

    def stock_for(self, attributes: Optional[dict]) -> int:
        variant = self.variant_for(attributes)
        return variant.stock if variant else self.stock

    def to_dict(self) -> dict:
        return {
            'id':       self.id,
            'name':     self.name,
            'price':    str(self.price),
            'stock':    self.stock,
            'barcode':  self.barcode,
            'category': self.category,
            'variants': [v.to_dict() for v in self.variants],
        }


def snapshot_list(products) -> List[dict]:
    return [ProductSnapshot.from_model(p).to_dict() for p in products]
