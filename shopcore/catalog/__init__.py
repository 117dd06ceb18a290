from flask import Blueprint

catalog = Blueprint('catalog', __name__)

from shopcore.catalog import routes  # noqa: F401, E402
from shopcore.catalog import models  # noqa: F401, E402  — registers Product/ProductVariant with SQLAlchemy
