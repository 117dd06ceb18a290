"""
test_pos.py — HTTP tests for the point-of-sale endpoints.
Run: pytest test_pos.py -v
"""
import pytest
from decimal import Decimal

from shopcore import create_app, db
from shopcore.catalog.models import Product
from shopcore.catalog.seed import seed_catalog


# ── Fixtures ──────────────────────────────────────────────────────

@pytest.fixture(scope='function')
def client():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        seed_catalog()
        yield app.test_client()
        db.session.remove()
        db.drop_all()


def pid(barcode):
    return Product.query.filter_by(barcode=barcode).first().id


RICE  = '1234567890123'   # ৳500, stock 50
SUGAR = '1234567890128'   # ৳120, stock 5
SHIRT = 'APP0002'         # variants: S/Beige 5, M/Beige 0, M/Olive 7


def scan(client, barcode, times=1):
    data = None
    for _ in range(times):
        data = client.post('/pos/add', json={'barcode': barcode}).get_json()
    return data


# ── 1. Cart on the cashier screen ─────────────────────────────────

def test_scan_adds_and_merges(client):
    data = scan(client, RICE, times=2)
    assert len(data['cart']['items']) == 1
    assert data['cart']['count'] == 2
    assert Decimal(data['totals']['subtotal']) == Decimal('1000.00')
    assert data['currency'] == '৳'


def test_unknown_barcode_is_404(client):
    assert client.post('/pos/add', json={'barcode': 'NOPE'}).status_code == 404


def test_quantity_clamped_to_stock(client):
    data = scan(client, SUGAR, times=7)
    assert data['cart']['count'] == 5

    data = client.post('/pos/quantity', json={'product_id': pid(SUGAR), 'quantity': 40}).get_json()
    assert data['cart']['count'] == 5


def test_out_of_stock_is_refused(client):
    sugar = Product.query.filter_by(barcode=SUGAR).first()
    sugar.stock = 0
    db.session.commit()

    data = scan(client, SUGAR)
    assert data['cart']['items'] == []
    assert any('out of stock' in n['message'] for n in data['notifications'])


def test_variant_product_needs_a_variant(client):
    for _ in range(6):
        resp = client.post('/pos/add', json={'barcode': SHIRT})
        assert resp.status_code == 400
    assert client.get('/pos/').get_json()['cart']['items'] == []


def test_variant_stock_is_the_clamp(client):
    data = client.post('/pos/add', json={
        'barcode': SHIRT, 'variant': {'size': 'M', 'color': 'Beige'},
    }).get_json()
    assert data['cart']['items'] == []
    assert any('out of stock' in n['message'] for n in data['notifications'])

    for _ in range(7):
        data = client.post('/pos/add', json={'barcode': SHIRT, 'variant': {'color': 'Olive'}}).get_json()
    line = data['cart']['items'][0]
    assert line['sku'] == 'APP0002-03'
    assert line['quantity'] == 7


def test_partial_variant_quantity_and_remove(client):
    shirt = pid(SHIRT)
    client.post('/pos/add', json={'product_id': shirt, 'variant': {'size': 'S'}})

    data = client.post('/pos/quantity', json={
        'product_id': shirt, 'variant': {'size': 'S'}, 'quantity': 40,
    }).get_json()
    assert data['cart']['count'] == 5              # S/Beige stock

    data = client.post('/pos/remove', json={'product_id': shirt, 'variant': {'size': 'S'}}).get_json()
    assert data['cart']['items'] == []


def test_quantity_zero_removes(client):
    scan(client, RICE)
    data = client.post('/pos/quantity', json={'product_id': pid(RICE), 'quantity': 0}).get_json()
    assert data['cart']['items'] == []


def test_pos_cart_is_separate_from_storefront_cart(client):
    scan(client, RICE)
    assert client.get('/cart/').get_json()['count'] == 0


# ── 2. Discount, tender, completion ───────────────────────────────

def test_discount_and_change(client):
    scan(client, RICE, times=2)
    client.post('/pos/discount', json={'kind': 'percentage', 'value': 10})
    data = client.post('/pos/payment', json={'method': 'cash', 'tendered': '1000'}).get_json()

    totals = data['totals']
    assert Decimal(totals['discount_amount']) == Decimal('100')
    assert Decimal(totals['total']) == Decimal('900')
    assert Decimal(totals['change']) == Decimal('100')
    assert data['can_complete'] is True


def test_short_cash_blocks_completion(client):
    scan(client, RICE, times=2)
    client.post('/pos/discount', json={'kind': 'percentage', 'value': 10})
    data = client.post('/pos/payment', json={'tendered': '500'}).get_json()
    assert data['can_complete'] is False

    resp = client.post('/pos/complete')
    assert resp.status_code == 409
    assert 'error' in resp.get_json()
    assert resp.get_json()['cart']['count'] == 2


def test_fixed_discount_never_goes_negative(client):
    scan(client, SUGAR)
    data = client.post('/pos/discount', json={'kind': 'fixed', 'value': 10000}).get_json()
    assert Decimal(data['totals']['total']) == Decimal('0')


def test_card_sale_completes_without_tender(client):
    scan(client, RICE)
    client.post('/pos/customer', json={'customer': {'id': 3, 'name': 'Rashida Begum'}})
    client.post('/pos/payment', json={'method': 'card'})

    resp = client.post('/pos/complete')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['receipt']['payment_method'] == 'card'
    assert body['receipt']['customer']['name'] == 'Rashida Begum'
    assert Decimal(body['receipt']['totals']['total']) == Decimal('500')

    # Sale is reset for the next customer
    assert body['cart']['items'] == []
    assert body['customer'] is None
    assert body['payment_method'] == 'cash'


def test_empty_sale_cannot_complete(client):
    assert client.post('/pos/complete').status_code == 409


def test_unknown_payment_method_is_400(client):
    assert client.post('/pos/payment', json={'method': 'cheque'}).status_code == 400


def test_reset(client):
    scan(client, RICE)
    client.post('/pos/discount', json={'kind': 'fixed', 'value': 50})
    data = client.post('/pos/reset').get_json()
    assert data['cart']['count'] == 0
    assert data['discount'] == {'kind': 'percentage', 'value': '0'}


def test_product_grid_filter(client):
    names = {p['name'] for p in client.get('/pos/products?q=pantry').get_json()['products']}
    assert names == {'Sugar 1kg', 'Salt 1kg'}


def test_payment_methods_listed(client):
    methods = client.get('/pos/payment-methods').get_json()
    assert {'id': 'cash', 'requires_tender': True} in methods
    assert {m['id'] for m in methods} == {'cash', 'card', 'bkash', 'nagad', 'rocket'}


# ── 3. CLI ────────────────────────────────────────────────────────

def test_seed_demo_command_is_idempotent():
    app = create_app('testing')
    runner = app.test_cli_runner()

    first = runner.invoke(args=['seed-demo'])
    assert '12 products seeded' in first.output

    second = runner.invoke(args=['seed-demo'])
    assert 'already populated' in second.output
