"""
shopcore/cart/identity.py
-------------------------
Decides whether two line entries are the same purchasable unit.

Identity is (product id, canonical variant). The variant is canonicalised
before comparing, so {"Size": "M", "color": "Red"} and
{"color": "red", "size": "m"} land on the same line instead of two.
"""
from __future__ import annotations

from typing import Any, Mapping, NamedTuple, Optional


class IdentityKey(NamedTuple):
    product_id: str
    variant:    tuple


def _normalise(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return str(value).strip().lower()


def canonical_variant(variant: Optional[Mapping[str, Any]]) -> tuple:
    """
    Canonical, hashable form of a variant attribute set.

    Keys and string values are stripped and lower-cased, blank attributes
    are dropped and the pairs are sorted by key. None / {} → ().
    """
    if not variant:
        return ()

    pairs = []
    for key, value in variant.items():
        value = _normalise(value)
        if value is None or value == '':
            continue
        pairs.append((str(key).strip().lower(), value))
    return tuple(sorted(pairs, key=lambda pair: (pair[0], repr(pair[1]))))


def identity_of(product_id, variant: Optional[Mapping[str, Any]] = None) -> IdentityKey:
    """Identity key for a (product, variant) pair. Pure."""
    return IdentityKey(str(product_id), canonical_variant(variant))
