from flask import request
from sqlalchemy.exc import SQLAlchemyError

from cafe_app.controllers.cafe_controller import store_failure
from cafe_app.schemas.cafe_schema import SuggestionSchema
from cafe_app.services import suggestion_service
from cafe_app.utils.errors import CafeError
from cafe_app.utils.http import ok, error, cafe_error, json_body, validate_schema


def list_suggestions_handler():
    user_id = getattr(request, "user_id", None)
    try:
        return ok({
            "suggestions_open": suggestion_service.is_open(),
            "suggestions": suggestion_service.list_active(user_id),
        })
    except SQLAlchemyError:
        return store_failure("list_suggestions", "Failed to fetch suggestions", user_id=user_id)


def create_suggestion_handler():
    user_id = request.user_id  # type: ignore
    data, errors = validate_schema(SuggestionSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid suggestion", 400, details=errors)

    try:
        suggestion = suggestion_service.submit_suggestion(user_id, data["suggestion_text"])
        return ok({
            "success": True,
            "suggestion": {
                "id": suggestion.id,
                "suggestion_text": suggestion.suggestion_text,
                "created_at": suggestion.created_at.isoformat(),
            },
        }, 201)
    except CafeError as e:
        return cafe_error(e)
    except SQLAlchemyError:
        return store_failure("create_suggestion", "Failed to submit suggestion", user_id=user_id)


def upvote_handler(suggestion_id: int):
    user_id = request.user_id  # type: ignore
    try:
        suggestion_service.upvote(suggestion_id, user_id)
        return ok({"success": True})
    except CafeError as e:
        return cafe_error(e)
    except SQLAlchemyError:
        return store_failure("upvote", "Failed to upvote suggestion", suggestion_id=suggestion_id, user_id=user_id)


def remove_upvote_handler(suggestion_id: int):
    user_id = request.user_id  # type: ignore
    try:
        suggestion_service.remove_upvote(suggestion_id, user_id)
        return ok({"success": True})
    except SQLAlchemyError:
        return store_failure("remove_upvote", "Failed to remove upvote", suggestion_id=suggestion_id, user_id=user_id)


def open_suggestions_handler():
    user_id = request.user_id  # type: ignore
    try:
        suggestion_service.open_board(user_id)
        return ok({"success": True, "message": "Suggestions are now open"})
    except SQLAlchemyError:
        return store_failure("open_suggestions", "Failed to open suggestions", user_id=user_id)


def close_suggestions_handler():
    user_id = request.user_id  # type: ignore
    try:
        deactivated = suggestion_service.close_board(user_id)
        return ok({"success": True, "message": "Suggestions are now closed", "deactivated": deactivated})
    except SQLAlchemyError:
        return store_failure("close_suggestions", "Failed to close suggestions", user_id=user_id)


def delete_suggestion_handler(suggestion_id: int):
    try:
        suggestion_service.deactivate(suggestion_id)
        return ok({"success": True})
    except CafeError as e:
        return cafe_error(e)
    except SQLAlchemyError:
        return store_failure("delete_suggestion", "Failed to delete suggestion", suggestion_id=suggestion_id)
