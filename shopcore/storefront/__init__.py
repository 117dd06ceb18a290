from flask import Blueprint

storefront = Blueprint('storefront', __name__)

from shopcore.storefront import routes  # noqa: F401, E402
