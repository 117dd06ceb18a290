"""
shopcore/catalog/routes.py
--------------------------
Read-only catalog endpoints. Searching records the query in the
session's recent searches; opening a product records it as recently viewed.
"""
from flask import request, jsonify, abort

from shopcore import stores
from shopcore.catalog import catalog
from shopcore.catalog.search import search_products, get_active_product
from shopcore.catalog.snapshot import ProductSnapshot, snapshot_list


@catalog.route('/products')
def products():
    q = request.args.get('q', '').strip()
    results = search_products(q)

    recent = stores.recent_searches()
    recent.record(q)

    return jsonify({
        'query':           q,
        'products':        snapshot_list(results),
        'recent_searches': recent.items(),
    })


@catalog.route('/products/<int:product_id>')
def product_detail(product_id):
    product = get_active_product(product_id)
    if product is None:
        abort(404)

    snapshot = ProductSnapshot.from_model(product).to_dict()
    stores.recently_viewed().record(snapshot)

    return jsonify({
        'product':     snapshot,
        'in_wishlist': stores.wishlist().contains(product.id),
        'in_compare':  stores.comparison().contains(product.id),
    })
