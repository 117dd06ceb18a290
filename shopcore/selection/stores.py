"""
shopcore/selection/stores.py
----------------------------
Wishlist and product-comparison sets.

Both hold full product snapshot dicts, unique by product id, and persist
into a durable scope. Membership is toggled: present → removed,
absent → added (if there is room).
"""
from __future__ import annotations

from typing import List, Optional

from shopcore.storage.scope import DurableScope


COMPARISON_LIMIT = 4


def product_key(product) -> str:
    """Product id of a snapshot dict / object, as a string."""
    if isinstance(product, dict):
        return str(product['id'])
    return str(getattr(product, 'id', product))


class SelectionStore:
    """Set of product snapshots keyed by id, optionally capped at `limit`."""

    def __init__(self, scope: DurableScope, key: str, limit: Optional[int] = None):
        self.scope  = scope
        self.key    = key
        self.limit  = limit
        self._items: List[dict] = []

        seen = set()
        for raw in scope.load(key):
            if not isinstance(raw, dict) or 'id' not in raw:
                continue
            pid = product_key(raw)
            if pid in seen or self.is_full():
                continue
            seen.add(pid)
            self._items.append(raw)

    def _persist(self) -> None:
        self.scope.save(self.key, self._items)

    # ── Read ──────────────────────────────────────────────────────

    def items(self) -> List[dict]:
        return [dict(item) for item in self._items]

    def ids(self) -> List[str]:
        return [product_key(item) for item in self._items]

    def contains(self, product_id) -> bool:
        return str(product_id) in self.ids()

    def count(self) -> int:
        return len(self._items)

    def is_full(self) -> bool:
        return self.limit is not None and len(self._items) >= self.limit

    # ── Write ─────────────────────────────────────────────────────

    def add(self, product: dict) -> bool:
        """
        Add a snapshot. Returns True if it was added, False if it was
        already present or the set is at capacity (nothing changes).
        """
        if self.contains(product_key(product)) or self.is_full():
            return False
        self._items.append(dict(product))
        self._persist()
        return True

    def remove(self, product_id) -> None:
        """Drop a member; no-op if absent."""
        pid = str(product_id)
        self._items = [item for item in self._items if product_key(item) != pid]
        self._persist()

    def toggle(self, product: dict) -> bool:
        """
        Flip membership. Returns True when the product is in the set after
        the call, False when it was removed or could not be added.
        """
        pid = product_key(product)
        if self.contains(pid):
            self.remove(pid)
            return False
        return self.add(product)

    def clear(self) -> None:
        self._items = []
        self._persist()

    def to_dict(self) -> dict:
        return {'items': self.items(), 'count': self.count()}


class WishlistStore(SelectionStore):
    """Uncapped, durable wishlist."""

    def __init__(self, scope: DurableScope, key: str = 'wishlist'):
        super().__init__(scope, key)


class ComparisonStore(SelectionStore):
    """
    Side-by-side comparison set. Holds at most `limit` products (4);
    adding a fifth is silently ignored.
    """

    def __init__(self, scope: DurableScope, key: str = 'comparison', limit: int = COMPARISON_LIMIT):
        super().__init__(scope, key, limit=limit)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['limit']   = self.limit
        data['is_full'] = self.is_full()
        return data
