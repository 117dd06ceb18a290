from flask import Blueprint

cashier = Blueprint('cashier', __name__)

from shopcore.cashier import routes  # noqa: F401, E402
