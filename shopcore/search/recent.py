"""
shopcore/search/recent.py
-------------------------
Most-recent-first, de-duplicated, capped lists.

RecentSearches keeps query strings; RecentlyViewed keeps product
snapshots keyed by id. Both move a repeated entry to the front instead
of duplicating it and keep only the newest `limit` entries.
"""
from __future__ import annotations

from typing import List

from shopcore.selection.stores import product_key
from shopcore.storage.scope import DurableScope


RECENT_LIMIT = 10


class RecentSearches:

    def __init__(self, scope: DurableScope, key: str = 'recentSearches', limit: int = RECENT_LIMIT):
        self.scope = scope
        self.key   = key
        self.limit = limit
        self._queries: List[str] = [q for q in scope.load(key) if isinstance(q, str)][:limit]

    def record(self, query) -> None:
        """Push `query` to the front. Blank queries are ignored."""
        if query is None or not str(query).strip():
            return
        query = str(query).strip()
        self._queries = [query] + [q for q in self._queries if q != query]
        del self._queries[self.limit:]
        self.scope.save(self.key, self._queries)

    def items(self) -> List[str]:
        return list(self._queries)

    def clear(self) -> None:
        self._queries = []
        self.scope.save(self.key, self._queries)


class RecentlyViewed:

    def __init__(self, scope: DurableScope, key: str = 'recentlyViewed', limit: int = RECENT_LIMIT):
        self.scope = scope
        self.key   = key
        self.limit = limit
        self._products: List[dict] = [
            p for p in scope.load(key) if isinstance(p, dict) and 'id' in p
        ][:limit]

    def record(self, product: dict) -> None:
        pid = product_key(product)
        self._products = [dict(product)] + [p for p in self._products if product_key(p) != pid]
        del self._products[self.limit:]
        self.scope.save(self.key, self._products)

    def items(self) -> List[dict]:
        return [dict(p) for p in self._products]

    def clear(self) -> None:
        self._products = []
        self.scope.save(self.key, self._products)
