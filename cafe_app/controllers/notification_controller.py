from flask import request
from sqlalchemy.exc import SQLAlchemyError

from cafe_app.controllers.cafe_controller import store_failure
from cafe_app.services.notification_service import list_for_user
from cafe_app.utils.http import ok, arg_int


def list_notifications_handler():
    user_id = request.user_id  # type: ignore
    limit = arg_int("limit", 50, min_value=1, max_value=200)
    try:
        return ok({"items": list_for_user(user_id, limit=limit)})
    except SQLAlchemyError:
        return store_failure("list_notifications", "Failed to fetch notifications", user_id=user_id)
