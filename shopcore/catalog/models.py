from datetime import datetime, timezone
from decimal import Decimal
from shopcore import db

# ── Central threshold — change here, applies everywhere ──────────
LOW_STOCK_THRESHOLD = 10


class Product(db.Model):
    """A catalog entry the storefront and the POS sell from."""
    __tablename__ = 'products'

    id          = db.Column(db.Integer, primary_key=True)
    name        = db.Column(db.String(200), nullable=False, index=True)
    barcode     = db.Column(db.String(100), unique=True, nullable=False, index=True)
    category    = db.Column(db.String(100), nullable=False, default='', index=True)
    price       = db.Column(db.Numeric(10, 2), nullable=False)
    stock       = db.Column(db.Integer, nullable=False, default=0)
    is_active   = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at  = db.Column(db.DateTime(timezone=True), nullable=False,
                            default=lambda: datetime.now(timezone.utc))

    variants = db.relationship('ProductVariant', backref='product', lazy='select',
                               cascade='all, delete-orphan', order_by='ProductVariant.id')

    __table_args__ = (
        db.CheckConstraint('stock >= 0', name='check_stock_non_negative'),
        db.CheckConstraint('price >= 0', name='check_price_non_negative'),
    )

    @property
    def is_low_stock(self) -> bool:
        """True when stock is below LOW_STOCK_THRESHOLD."""
        return self.stock < LOW_STOCK_THRESHOLD

    def __repr__(self):
        return f"<Product {self.barcode!r} {self.name!r}>"


class ProductVariant(db.Model):
    """
    One selectable SKU of a product (size / colour / material).
    Price and stock override the parent product when set.
    """
    __tablename__ = 'product_variants'

    id         = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'),
                           nullable=False, index=True)
    sku        = db.Column(db.String(100), unique=True, nullable=False)
    size       = db.Column(db.String(40), nullable=True)
    color      = db.Column(db.String(40), nullable=True)
    material   = db.Column(db.String(60), nullable=True)
    price      = db.Column(db.Numeric(10, 2), nullable=True)
    stock      = db.Column(db.Integer, nullable=True)

    __table_args__ = (
        db.CheckConstraint('stock IS NULL OR stock >= 0', name='check_variant_stock_non_negative'),
    )

    @property
    def attributes(self) -> dict:
        attrs = {'size': self.size, 'color': self.color, 'material': self.material}
        return {k: v for k, v in attrs.items() if v}

    @property
    def effective_price(self) -> Decimal:
        return Decimal(str(self.price if self.price is not None else self.product.price))

    @property
    def effective_stock(self) -> int:
        return self.stock if self.stock is not None else self.product.stock

    def __repr__(self):
        return f"<Variant {self.sku!r} {self.attributes}>"
