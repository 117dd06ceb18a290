"""
test_scope.py — Tests for durable scopes and their in-memory fallback.
Run: pytest test_scope.py -v
"""
from shopcore import create_app
from shopcore.cart.store import CartStore
from shopcore.search.recent import RecentSearches
from shopcore.selection.stores import WishlistStore
from shopcore.storage.scope import MemoryScope, SessionScope


class BrokenScope(MemoryScope):
    """Backend that fails every read and write."""

    def _read(self, key):
        raise OSError('storage unavailable')

    def _write(self, key, value):
        raise OSError('storage unavailable')


class WriteOnceScope(MemoryScope):
    """Backend that accepts one write and then breaks."""

    def __init__(self):
        super().__init__()
        self.writes = 0

    def _write(self, key, value):
        self.writes += 1
        if self.writes > 1:
            raise OSError('quota exceeded')
        super()._write(key, value)


# ── 1. Basics ─────────────────────────────────────────────────────

def test_missing_key_reads_as_empty_list():
    assert MemoryScope().load('cart') == []


def test_non_list_value_reads_as_empty_list():
    assert MemoryScope({'cart': 'garbage'}).load('cart') == []


def test_load_returns_a_copy():
    scope = MemoryScope({'wishlist': [{'id': 1}]})
    scope.load('wishlist')[0]['id'] = 99
    assert scope.load('wishlist') == [{'id': 1}]


# ── 2. Degradation ────────────────────────────────────────────────

def test_broken_backend_never_raises():
    scope = BrokenScope()
    cart = CartStore(scope)
    cart.add(1, None, 2, '10')
    cart.set_quantity(1, None, 3)

    assert scope.degraded
    assert cart.count() == 3
    # Stores built later in the same session still see the in-memory state
    assert CartStore(scope).count() == 3

    wishlist = WishlistStore(scope)
    wishlist.toggle({'id': 5})
    recent = RecentSearches(scope)
    recent.record('oil')
    assert wishlist.ids() == ['5']
    assert recent.items() == ['oil']


def test_write_failure_keeps_session_going():
    scope = WriteOnceScope()
    cart = CartStore(scope)
    cart.add(1, None, 1, '10')     # persisted
    cart.add(1, None, 1, '10')     # backend fails → memory
    cart.add(2, None, 1, '5')

    assert scope.degraded
    assert CartStore(scope).count() == 3
    assert scope.data['cart'][0]['quantity'] == 1


def test_session_scope_outside_request_degrades():
    scope = SessionScope()
    scope.save('cart', [{'x': 1}])
    assert scope.degraded
    assert scope.load('cart') == [{'x': 1}]


# ── 3. Flask session backend ──────────────────────────────────────

def test_session_scope_round_trip():
    app = create_app('testing')
    with app.test_request_context():
        from flask import session

        scope = SessionScope()
        CartStore(scope).add(3, {'size': 'L'}, 2, '45.00')

        assert session['cart'][0]['unit_price'] == '45.00'
        assert CartStore(SessionScope()).count() == 2
        assert not scope.degraded
