from flask import Blueprint
from cafe_app.utils.auth import require_auth
from cafe_app.controllers.notification_controller import list_notifications_handler

notification_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notification_bp.route("", methods=["GET"])
@require_auth
def list_notifications():
    return list_notifications_handler()
