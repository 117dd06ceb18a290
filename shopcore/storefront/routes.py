"""
shopcore/storefront/routes.py
-----------------------------
Shopper-facing JSON endpoints: cart, wishlist, comparison, recent searches.

Every response carries the derived state the UI re-renders from.
"""
from flask import request, jsonify, abort, current_app

from shopcore import stores
from shopcore.catalog.search import active_snapshot
from shopcore.catalog.snapshot import ProductSnapshot
from shopcore.storefront import storefront
from shopcore.utils.http import payload, int_field, line_variant


def _snapshot_or_404(product_id) -> ProductSnapshot:
    snapshot = active_snapshot(product_id)
    if snapshot is None:
        abort(404)
    return snapshot


def _cart_response(**extra):
    body = stores.cart().to_dict()
    body['currency'] = current_app.config['CURRENCY_SYMBOL']
    body.update(extra)
    return jsonify(body)


# ── CART ──────────────────────────────────────────────────────────

@storefront.route('/cart/')
def cart_index():
    return _cart_response()


@storefront.route('/cart/add', methods=['POST'])
def cart_add():
    """
    Add `quantity` units of a product / variant at the current catalog
    price. Stock is not checked here; the product page greys out the
    button when nothing is left.
    """
    data     = payload()
    snapshot = _snapshot_or_404(int_field(data, 'product_id'))
    quantity = int_field(data, 'quantity', default=1)
    chosen, variant = line_variant(snapshot, data)

    line = stores.cart().add(
        snapshot.id, variant,
        quantity=quantity,
        unit_price=chosen.price if chosen else snapshot.price,
        name=snapshot.name,
        sku=chosen.sku if chosen else snapshot.barcode,
    )
    stores.notify(f'{snapshot.name} added to cart.', 'success')
    current_app.logger.info(f"Cart add: product {snapshot.id} {variant or ''} x{quantity}")
    return _cart_response(line=line.to_dict() if line else None)


@storefront.route('/cart/remove', methods=['POST'])
def cart_remove():
    data       = payload()
    product_id = int_field(data, 'product_id')
    _, variant = line_variant(active_snapshot(product_id), data, required=False)
    stores.cart().remove(product_id, variant)
    return _cart_response()


@storefront.route('/cart/quantity', methods=['POST'])
def cart_quantity():
    """Set a line's quantity; 0 or less removes it."""
    data       = payload()
    product_id = int_field(data, 'product_id')
    _, variant = line_variant(active_snapshot(product_id), data, required=False)
    stores.cart().set_quantity(product_id, variant, int_field(data, 'quantity'))
    return _cart_response()


@storefront.route('/cart/clear', methods=['POST'])
def cart_clear():
    stores.cart().clear()
    return _cart_response()


# ── WISHLIST ──────────────────────────────────────────────────────

@storefront.route('/wishlist/')
def wishlist_index():
    return jsonify(stores.wishlist().to_dict())


@storefront.route('/wishlist/toggle', methods=['POST'])
def wishlist_toggle():
    snapshot = _snapshot_or_404(int_field(payload(), 'product_id'))
    wishlist = stores.wishlist()

    present = wishlist.toggle(snapshot.to_dict())
    if present:
        stores.notify(f'{snapshot.name} saved to your wishlist.', 'success')
    else:
        stores.notify(f'{snapshot.name} removed from your wishlist.', 'info')

    return jsonify({**wishlist.to_dict(), 'in_wishlist': present})


# ── COMPARISON ────────────────────────────────────────────────────

@storefront.route('/compare/')
def compare_index():
    return jsonify(stores.comparison().to_dict())


@storefront.route('/compare/toggle', methods=['POST'])
def compare_toggle():
    """
    Toggle a product in the comparison set. When the set is full an add
    is ignored; `in_compare` stays False and the set is unchanged.
    """
    snapshot   = _snapshot_or_404(int_field(payload(), 'product_id'))
    comparison = stores.comparison()

    was_present = comparison.contains(snapshot.id)
    present     = comparison.toggle(snapshot.to_dict())
    if not was_present and not present:
        stores.notify(f'You can compare up to {comparison.limit} products at a time.', 'warning')

    return jsonify({**comparison.to_dict(), 'in_compare': present})


@storefront.route('/compare/clear', methods=['POST'])
def compare_clear():
    comparison = stores.comparison()
    comparison.clear()
    return jsonify(comparison.to_dict())


# ── RECENT SEARCHES / RECENTLY VIEWED ─────────────────────────────

@storefront.route('/search/recent', methods=['GET', 'DELETE'])
def recent_searches():
    recent = stores.recent_searches()
    if request.method == 'DELETE':
        recent.clear()
    return jsonify({'recent_searches': recent.items()})


@storefront.route('/recently-viewed')
def recently_viewed():
    return jsonify({'products': stores.recently_viewed().items()})
