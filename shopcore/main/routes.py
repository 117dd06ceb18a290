"""
shopcore/main/routes.py
───────────────────────
Health check and the session's notification feed.
"""
from datetime import datetime, timezone

from flask import jsonify, current_app
from sqlalchemy import text

from shopcore import db, stores
from shopcore.main import main


@main.route("/health")
def health():
    """Health check for load balancers and monitoring."""
    status = "ok"
    failures = []

    try:
        db.session.execute(text("SELECT 1"))
    except Exception as e:
        status = "error"
        failures.append(f"DB: {str(e)}")
        current_app.logger.error(f"Health check failed (DB): {e}")

    response = {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "details": {"db": "ok" if not failures else "error"},
    }
    if failures:
        response["failures"] = failures

    return jsonify(response), (200 if status == "ok" else 503)


@main.route("/notifications/")
def notifications():
    return jsonify([n.to_dict() for n in stores.active_notifications()])


@main.route("/notifications/<int:notification_id>", methods=["DELETE"])
def dismiss_notification(notification_id):
    """Dismiss early. Unknown / already expired ids are not an error."""
    removed = stores.dismiss_notification(notification_id)
    return jsonify({"dismissed": removed})
