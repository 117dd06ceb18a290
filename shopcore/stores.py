"""
shopcore/stores.py
------------------
Per-request access to the session's stores.

Each request gets one SessionScope (kept in the WSGI environ). Store
objects are built from it on every call, so they always read the
session as the previous mutation left it, and each mutation writes
straight back. Routes reach the stores through these accessors instead
of module-level globals.
"""
import uuid
from typing import List

from flask import current_app, request, session

from shopcore.cart.store import CartStore
from shopcore.notifications.queue import Notification, QueueRegistry
from shopcore.pos.sale import PosSale
from shopcore.search.recent import RecentSearches, RecentlyViewed
from shopcore.selection.stores import ComparisonStore, WishlistStore
from shopcore.storage.scope import SessionScope


SESSION_ID_KEY    = 'sid'
SCOPE_ENVIRON_KEY = 'shopcore.scope'


def session_scope() -> SessionScope:
    scope = request.environ.get(SCOPE_ENVIRON_KEY)
    if scope is None:
        scope = request.environ[SCOPE_ENVIRON_KEY] = SessionScope()
    return scope


def session_id() -> str:
    """Stable id for the browsing / cashier session (created on first use)."""
    sid = session.get(SESSION_ID_KEY)
    if not sid:
        sid = uuid.uuid4().hex
        session[SESSION_ID_KEY] = sid
        session.permanent = True
    return sid


def cart() -> CartStore:
    return CartStore(session_scope(), key='cart')


def wishlist() -> WishlistStore:
    return WishlistStore(session_scope())


def comparison() -> ComparisonStore:
    return ComparisonStore(session_scope(), limit=current_app.config['COMPARISON_LIMIT'])


def recent_searches() -> RecentSearches:
    return RecentSearches(session_scope(), limit=current_app.config['RECENT_SEARCH_LIMIT'])


def recently_viewed() -> RecentlyViewed:
    return RecentlyViewed(session_scope(), limit=current_app.config['RECENTLY_VIEWED_LIMIT'])


def pos_sale() -> PosSale:
    return PosSale(session_scope())


def _registry() -> QueueRegistry:
    return current_app.extensions['notifications']


def notify(message: str, severity: str = 'info') -> int:
    """Push a notification onto the current session's queue."""
    return _registry().push(session_id(), message, severity)


def active_notifications() -> List[Notification]:
    return _registry().active(session_id())


def dismiss_notification(nid: int) -> bool:
    return _registry().dismiss(session_id(), nid)
