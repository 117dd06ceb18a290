"""
shopcore/catalog/search.py
--------------------------
Product finder used by the storefront search box and the POS product grid.
"""
from shopcore.catalog.models import Product
from shopcore.catalog.snapshot import ProductSnapshot


def search_products(query: str = '', limit: int = 50):
    """
    Active products whose name or category contains `query`
    (case-insensitive) or whose barcode contains it verbatim.
    A blank query lists everything.
    """
    q = (query or '').strip()
    stmt = Product.query.filter(Product.is_active.is_(True))
    if q:
        stmt = stmt.filter(
            Product.name.ilike(f'%{q}%') |
            Product.category.ilike(f'%{q}%') |
            Product.barcode.contains(q)
        )
    return stmt.order_by(Product.name).limit(limit).all()


def get_active_product(product_id):
    """Active product by id, or None."""
    try:
        pid = int(product_id)
    except (TypeError, ValueError):
        return None
    return Product.query.filter_by(id=pid, is_active=True).first()


def active_snapshot(product_id):
    """ProductSnapshot of an active product, or None."""
    product = get_active_product(product_id)
    return ProductSnapshot.from_model(product) if product is not None else None
