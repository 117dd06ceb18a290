"""
shopcore/catalog/seed.py
------------------------
Demo catalog for `flask seed-demo`: grocery staples for the POS grid and
a few apparel products with size / colour variants for the storefront.
"""
from decimal import Decimal

from shopcore import db
from shopcore.catalog.models import Product, ProductVariant


GROCERY = [
    # name,               category,        price, stock, barcode
    ('Basmati Rice 5kg',  'Rice & Grains', 500, 50, '1234567890123'),
    ('Onion 1kg',         'Vegetables',    100, 25, '1234567890124'),
    ('Milk 1L',           'Dairy',         100, 30, '1234567890125'),
    ('Potato 1kg',        'Vegetables',     80, 40, '1234567890126'),
    ('Cooking Oil 1L',    'Cooking',       150, 20, '1234567890127'),
    ('Sugar 1kg',         'Pantry',        120,  5, '1234567890128'),
    ('Tea Leaves 500g',   'Beverages',     200, 15, '1234567890129'),
    ('Salt 1kg',          'Pantry',         50, 35, '1234567890130'),
    ('Dal 1kg',           'Pulses',        180, 22, '1234567890131'),
    ('Flour 2kg',         'Flour',         160, 18, '1234567890132'),
]

APPAREL = [
    # name, category, price, barcode, [(size, color, material, stock)]
    ('Cotton Panjabi', 'Clothing', 1800, 'APP0001', [
        ('M', 'White', 'Cotton', 8), ('L', 'White', 'Cotton', 6), ('L', 'Navy', 'Cotton', 4),
    ]),
    ('Linen Shirt', 'Clothing', 1450, 'APP0002', [
        ('S', 'Beige', 'Linen', 5), ('M', 'Beige', 'Linen', 0), ('M', 'Olive', 'Linen', 7),
    ]),
]


def seed_catalog() -> int:
    """Insert demo products when the catalog is empty. Returns how many were created."""
    if Product.query.count() > 0:
        return 0

    created = 0
    for name, category, price, stock, barcode in GROCERY:
        db.session.add(Product(
            name=name, category=category, barcode=barcode,
            price=Decimal(price), stock=stock,
        ))
        created += 1

    for name, category, price, barcode, variants in APPAREL:
        product = Product(
            name=name, category=category, barcode=barcode,
            price=Decimal(price), stock=sum(v[3] for v in variants),
        )
        for i, (size, color, material, stock) in enumerate(variants, start=1):
            product.variants.append(ProductVariant(
                sku=f'{barcode}-{i:02d}', size=size, color=color,
                material=material, stock=stock,
            ))
        db.session.add(product)
        created += 1

    db.session.commit()
    return created
