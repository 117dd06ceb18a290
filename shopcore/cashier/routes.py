"""
shopcore/cashier/routes.py
--------------------------
Point-of-sale JSON endpoints for the cashier screen.

The active sale lives in the cashier's session. Quantities are clamped to
the catalog stock at the time of each operation; "complete sale" is
refused with 409 while the cart is empty or cash tender is short.
"""
from flask import request, jsonify, abort, current_app

from shopcore import stores
from shopcore.catalog.models import Product
from shopcore.catalog.search import search_products, active_snapshot
from shopcore.catalog.snapshot import ProductSnapshot, VariantRequiredError, snapshot_list
from shopcore.cashier import cashier
from shopcore.pos.sale import SaleBlockedError
from shopcore.pos.totals import PaymentMethod
from shopcore.utils.http import payload, int_field, line_variant, variant_field


def _sale_response(status=200, **extra):
    body = stores.pos_sale().to_dict()
    body['currency']      = current_app.config['CURRENCY_SYMBOL']
    body['notifications'] = [n.to_dict() for n in stores.active_notifications()]
    body.update(extra)
    return jsonify(body), status


def _lookup(data: dict) -> ProductSnapshot:
    """Resolve the product by `product_id` or by scanned `barcode`."""
    barcode = str(data.get('barcode') or '').strip()
    if not barcode:
        snapshot = active_snapshot(int_field(data, 'product_id'))
        if snapshot is None:
            abort(404)
        return snapshot

    product = Product.query.filter_by(barcode=barcode, is_active=True).first()
    if product is None:
        abort(404, description=f'No product found for barcode "{barcode}".')
    return ProductSnapshot.from_model(product)


# ── SALE SCREEN ───────────────────────────────────────────────────

@cashier.route('/')
def index():
    return _sale_response()


@cashier.route('/products')
def products():
    """Product grid filter: name, category or barcode."""
    q = request.args.get('q', '').strip()
    return jsonify({'query': q, 'products': snapshot_list(search_products(q))})


# ── CART ──────────────────────────────────────────────────────────

@cashier.route('/add', methods=['POST'])
def add_item():
    """
    Add one unit (scan or click). A product with variants needs one picked;
    out-of-stock SKUs are refused with a warning.
    """
    data     = payload()
    snapshot = _lookup(data)

    sale = stores.pos_sale()
    try:
        line = sale.add_product(snapshot, variant_field(data))
    except VariantRequiredError as exc:
        abort(400, description=str(exc))

    if line is None:
        stores.notify(f'"{snapshot.name}" is out of stock.', 'warning')
    elif line.quantity >= snapshot.stock_for(line.variant):
        stores.notify(f'Only {line.quantity} of "{snapshot.name}" in stock.', 'info')

    return _sale_response()


@cashier.route('/quantity', methods=['POST'])
def set_quantity():
    data     = payload()
    snapshot = _lookup(data)
    chosen, variant = line_variant(snapshot, data, required=False)

    stores.pos_sale().set_quantity(
        snapshot.id, variant,
        int_field(data, 'quantity'),
        stock=chosen.stock if chosen else snapshot.stock,
    )
    return _sale_response()


@cashier.route('/remove', methods=['POST'])
def remove_item():
    data       = payload()
    product_id = int_field(data, 'product_id')
    _, variant = line_variant(active_snapshot(product_id), data, required=False)
    stores.pos_sale().remove(product_id, variant)
    return _sale_response()


# ── DISCOUNT / PAYMENT / CUSTOMER ─────────────────────────────────

@cashier.route('/discount', methods=['POST'])
def set_discount():
    data = payload()
    stores.pos_sale().set_discount(data.get('kind', 'percentage'), data.get('value', 0))
    return _sale_response()


@cashier.route('/payment', methods=['POST'])
def set_payment():
    """Choose the payment method and (for cash) the tendered amount."""
    data = payload()
    sale = stores.pos_sale()

    if 'method' in data:
        try:
            sale.set_payment_method(data['method'])
        except ValueError:
            abort(400, description=f'Unknown payment method "{data["method"]}".')
    if 'tendered' in data:
        sale.set_tendered(data['tendered'])

    return _sale_response()


@cashier.route('/customer', methods=['POST'])
def select_customer():
    data     = payload()
    customer = data.get('customer')
    stores.pos_sale().select_customer(customer if isinstance(customer, dict) else None)
    return _sale_response()


# ── COMPLETE / RESET ──────────────────────────────────────────────

@cashier.route('/complete', methods=['POST'])
def complete():
    sale = stores.pos_sale()
    try:
        receipt = sale.complete()
    except SaleBlockedError as exc:
        current_app.logger.warning(f"Sale blocked: {exc}")
        return _sale_response(409, error=str(exc))

    current_app.logger.info(
        f"Sale completed: {receipt.reference} | Total: {receipt.totals.total} "
        f"| Method: {receipt.payment_method.value}"
    )
    stores.notify(f'Sale complete! Receipt {receipt.reference}', 'success')
    return _sale_response(receipt=receipt.to_dict())


@cashier.route('/reset', methods=['POST'])
def reset():
    stores.pos_sale().reset()
    return _sale_response()


@cashier.route('/payment-methods')
def payment_methods():
    return jsonify([
        {'id': m.value, 'requires_tender': m.requires_tender} for m in PaymentMethod
    ])
