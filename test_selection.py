"""
test_selection.py — Tests for wishlist, comparison and the recent lists.
Run: pytest test_selection.py -v
"""
import pytest

from shopcore.search.recent import RecentSearches, RecentlyViewed
from shopcore.selection.stores import ComparisonStore, WishlistStore
from shopcore.storage.scope import MemoryScope


def product(pid, name=None, price='100.00'):
    return {'id': pid, 'name': name or f'Product {pid}', 'price': price}


@pytest.fixture
def scope():
    return MemoryScope()


# ── 1. Wishlist ───────────────────────────────────────────────────

def test_wishlist_toggle_adds_then_removes(scope):
    wishlist = WishlistStore(scope)
    assert wishlist.toggle(product(1)) is True
    assert wishlist.contains(1)
    assert wishlist.toggle(product(1)) is False
    assert wishlist.count() == 0


def test_wishlist_has_no_cap(scope):
    wishlist = WishlistStore(scope)
    for pid in range(25):
        wishlist.toggle(product(pid))
    assert wishlist.count() == 25


def test_wishlist_presence_is_by_id(scope):
    wishlist = WishlistStore(scope)
    wishlist.toggle(product(3, price='100.00'))
    # Same id with a different snapshot still counts as present
    assert wishlist.toggle(product('3', price='80.00')) is False
    assert wishlist.items() == []


def test_wishlist_persists(scope):
    WishlistStore(scope).toggle(product(9, name='Tea'))
    restored = WishlistStore(scope)
    assert restored.ids() == ['9']
    assert restored.items()[0]['name'] == 'Tea'


# ── 2. Comparison cap ─────────────────────────────────────────────

def test_comparison_keeps_first_four(scope):
    comparison = ComparisonStore(scope)
    results = [comparison.toggle(product(pid)) for pid in range(1, 6)]

    assert results == [True, True, True, True, False]
    assert comparison.count() == 4
    assert comparison.ids() == ['1', '2', '3', '4']
    assert comparison.is_full()


def test_fifth_add_leaves_set_unchanged(scope):
    comparison = ComparisonStore(scope)
    for pid in range(1, 5):
        comparison.add(product(pid))
    before = comparison.items()

    assert comparison.add(product(5)) is False
    assert comparison.items() == before
    assert scope.data['comparison'] == before


def test_removing_frees_a_slot(scope):
    comparison = ComparisonStore(scope)
    for pid in range(1, 5):
        comparison.toggle(product(pid))
    comparison.toggle(product(2))          # present → removed
    assert comparison.toggle(product(5)) is True
    assert comparison.ids() == ['1', '3', '4', '5']


def test_comparison_clear(scope):
    comparison = ComparisonStore(scope)
    comparison.toggle(product(1))
    comparison.clear()
    assert comparison.count() == 0
    assert not comparison.is_full()


def test_restored_comparison_respects_cap():
    scope = MemoryScope({'comparison': [product(i) for i in range(1, 8)]})
    assert ComparisonStore(scope).ids() == ['1', '2', '3', '4']


# ── 3. Recent searches ────────────────────────────────────────────

def test_recent_search_dedup_moves_to_front(scope):
    recent = RecentSearches(scope)
    for q in ['rice', 'oil', 'rice', 'salt']:
        recent.record(q)
    assert recent.items() == ['salt', 'rice', 'oil']


def test_recent_search_keeps_ten(scope):
    recent = RecentSearches(scope)
    for i in range(11):
        recent.record(f'query {i}')
    items = recent.items()
    assert len(items) == 10
    assert items[0] == 'query 10'
    assert 'query 0' not in items


def test_blank_queries_are_ignored(scope):
    recent = RecentSearches(scope)
    recent.record('   ')
    recent.record('')
    recent.record(None)
    assert recent.items() == []
    assert 'recentSearches' not in scope.data


def test_recent_searches_persist_and_clear(scope):
    RecentSearches(scope).record('dal')
    restored = RecentSearches(scope)
    assert restored.items() == ['dal']
    restored.clear()
    assert RecentSearches(scope).items() == []


# ── 4. Recently viewed ────────────────────────────────────────────

def test_recently_viewed_dedup_by_id(scope):
    viewed = RecentlyViewed(scope)
    viewed.record(product(1))
    viewed.record(product(2))
    viewed.record(product(1, name='Renamed'))
    assert [p['id'] for p in viewed.items()] == [1, 2]
    assert viewed.items()[0]['name'] == 'Renamed'


def test_recently_viewed_cap(scope):
    viewed = RecentlyViewed(scope, limit=3)
    for pid in range(5):
        viewed.record(product(pid))
    assert [p['id'] for p in viewed.items()] == [4, 3, 2]
