"""
Cafe Controller Module

Handles the daily menu voting endpoints:
- Tomorrow's options, voting and the caller's vote
- Today's winner and the dashboard status widget
- Chef-side menu posting, vote counts, closing and tie breaking
- Decision history
"""

import logging
from datetime import date

from flask import request
from sqlalchemy.exc import SQLAlchemyError

from cafe_app.extensions import db
from cafe_app.schemas.cafe_schema import (
    PostMenuSchema,
    UpdateMenuOptionSchema,
    VoteSchema,
    DecideTieSchema,
    CloseVotingSchema,
)
from cafe_app.services import (
    menu_service,
    vote_service,
    tally_service,
    result_service,
    suggestion_service,
)
from cafe_app.services.clock import get_clock
from cafe_app.utils.errors import CafeError
from cafe_app.utils.http import ok, error, cafe_error, json_body, validate_schema, arg_int

logger = logging.getLogger(__name__)


def store_failure(operation: str, message: str, **keys):
    """Roll back, log with the identifying keys, answer with a generic 500."""
    db.session.rollback()
    logger.error("Store failure in %s %s", operation, keys, exc_info=True)
    return error("UNKNOWN_ERROR", message, 500)


def _user_id():
    return getattr(request, "user_id", None)


# ============================================================================
# Voting (all authenticated users)
# ============================================================================

def tomorrow_handler():
    clock = get_clock()
    now = clock.now()
    menu_date = clock.tomorrow(now)
    user_id = _user_id()
    voting_closed = clock.is_voting_closed(now)

    try:
        options = menu_service.get_options_for_date(menu_date, include_tally=voting_closed)
        user_vote = vote_service.get_vote(menu_date, user_id) if user_id else None
        return ok({
            "menu_date": menu_date.isoformat(),
            "options": options,
            "user_vote": user_vote["option_id"] if user_vote else None,
            "has_voted": user_vote is not None,
            "voting_closed": voting_closed,
            "voting_finalized": result_service.is_finalized(menu_date),
            "time_remaining": clock.time_remaining(now),
            "total_voters": menu_service.count_voters(menu_date),
        })
    except SQLAlchemyError:
        return store_failure("tomorrow", "Failed to fetch tomorrow's options", menu_date=menu_date)


def vote_handler():
    data, errors = validate_schema(VoteSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid vote data", 400, details=errors)

    clock = get_clock()
    now = clock.now()
    menu_date = clock.tomorrow(now)
    user_id = _user_id()

    try:
        vote_service.submit_vote(menu_date, user_id, data["option_id"], now, clock=clock)
        return ok({"success": True, "message": "Vote recorded successfully"})
    except CafeError as e:
        return cafe_error(e)
    except SQLAlchemyError:
        return store_failure(
            "vote", "Failed to submit vote",
            menu_date=menu_date, user_id=user_id, option_id=data["option_id"]
        )


def my_vote_handler():
    clock = get_clock()
    menu_date = clock.tomorrow(clock.now())
    user_id = _user_id()

    try:
        return ok({"vote": vote_service.get_vote(menu_date, user_id)})
    except SQLAlchemyError:
        return store_failure("my_vote", "Failed to fetch your vote", menu_date=menu_date, user_id=user_id)


def today_handler():
    clock = get_clock()
    today = clock.today(clock.now())

    try:
        menu = result_service.today_menu(today)
    except SQLAlchemyError:
        return store_failure("today", "Failed to fetch today's menu", menu_date=today)

    if menu is None:
        return ok({"menu": None, "message": "No menu set for today"})
    return ok({"menu": menu})


def status_handler():
    clock = get_clock()
    now = clock.now()
    today = clock.today(now)
    menu_date = clock.tomorrow(now)
    voting_closed = clock.is_voting_closed(now)

    try:
        options_count = menu_service.count_options(menu_date)
        finalized = result_service.is_finalized(menu_date)
        # A tie only matters once the window is shut
        has_tie = voting_closed and not finalized and tally_service.has_pending_tie(menu_date)
        return ok({
            "today_menu": result_service.today_menu(today),
            "has_tomorrow_options": options_count > 0,
            "tomorrow_options_count": options_count,
            "voting_open": options_count > 0 and not voting_closed,
            "voting_closed": voting_closed,
            "result_finalized": finalized,
            "has_tie": has_tie,
            "suggestions_open": suggestion_service.is_open(),
            "time_remaining": clock.time_remaining(now),
        })
    except SQLAlchemyError:
        return store_failure("status", "Failed to fetch cafe status", menu_date=menu_date)


# ============================================================================
# Chef endpoints (ADMIN / CAFE)
# ============================================================================

def post_menu_handler():
    data, errors = validate_schema(PostMenuSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid menu data", 400, details=errors)

    menu_date = data["menu_date"]
    try:
        options = menu_service.post_menu(menu_date, data["options"], created_by=_user_id())
        return ok({
            "success": True,
            "message": "Menu posted successfully",
            "options": [o.to_dict() for o in options],
        }, 201)
    except CafeError as e:
        return cafe_error(e)
    except SQLAlchemyError:
        return store_failure("post_menu", "Failed to post menu", menu_date=menu_date)


def update_option_handler(option_id: int):
    data, errors = validate_schema(UpdateMenuOptionSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid update data", 400, details=errors)

    try:
        option = menu_service.update_option(option_id, data)
        return ok({"success": True, "option": option.to_dict()})
    except CafeError as e:
        return cafe_error(e)
    except SQLAlchemyError:
        return store_failure("update_option", "Failed to update menu option", option_id=option_id)


def delete_option_handler(option_id: int):
    try:
        menu_service.delete_option(option_id)
        return ok({"success": True})
    except CafeError as e:
        return cafe_error(e)
    except SQLAlchemyError:
        return store_failure("delete_option", "Failed to delete menu option", option_id=option_id)


def upload_image_handler():
    return error(
        "NOT_IMPLEMENTED",
        "Image upload not yet implemented - use image URLs for now",
        501,
    )


def vote_counts_handler():
    clock = get_clock()
    now = clock.now()
    menu_date = clock.tomorrow(now)

    try:
        counts = tally_service.tally(menu_date)
    except SQLAlchemyError:
        return store_failure("vote_counts", "Failed to fetch vote counts", menu_date=menu_date)

    return ok({
        "menu_date": menu_date.isoformat(),
        "options": counts,
        "total_votes": sum(c["vote_count"] for c in counts),
        "voting_closed": clock.is_voting_closed(now),
    })


def close_voting_handler():
    data, errors = validate_schema(CloseVotingSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid data", 400, details=errors)

    clock = get_clock()
    menu_date = data.get("menu_date") or clock.tomorrow(clock.now())

    try:
        outcome = tally_service.close_voting_and_resolve(menu_date)
    except CafeError as e:
        return cafe_error(e)
    except SQLAlchemyError:
        return store_failure("close_voting", "Failed to close voting", menu_date=menu_date)

    if outcome["tie"]:
        return ok({
            "success": False,
            "is_tie": True,
            "menu_date": menu_date.isoformat(),
            "tied_options": outcome["tied_options"],
            "no_votes": outcome["no_votes"],
            "message": "There is a tie. Please decide the winner.",
        })

    return ok({
        "success": True,
        "is_tie": False,
        "menu_date": menu_date.isoformat(),
        "winner": outcome["winner"],
        "total_votes": outcome["total_votes"],
        "votes_cast": outcome["votes_cast"],
    })


def decide_tie_handler():
    """Chef override: finalizes the picked option even when no tie is pending, replacing any stored result."""
    data, errors = validate_schema(DecideTieSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid data", 400, details=errors)

    menu_date = data["menu_date"]
    option_id = data["winning_option_id"]
    user_id = _user_id()

    try:
        result = result_service.decide_tie(menu_date, option_id, user_id)
        return ok({
            "success": True,
            "winner": {
                "id": result.winning_option_id,
                "dish_name": result.winning_option.dish_name,
            },
            "result": result_service.serialize_result(result),
            "decided_by_chef": True,
        })
    except CafeError as e:
        return cafe_error(e)
    except SQLAlchemyError:
        return store_failure(
            "decide_tie", "Failed to decide tie",
            menu_date=menu_date, option_id=option_id, user_id=user_id
        )


def history_handler():
    limit = arg_int("limit", 30, min_value=1, max_value=365)
    offset = arg_int("offset", 0, min_value=0)

    try:
        return ok(result_service.history(limit=limit, offset=offset))
    except SQLAlchemyError:
        return store_failure("history", "Failed to fetch menu history", limit=limit, offset=offset)


def decisions_handler(menu_date: str):
    try:
        day = date.fromisoformat(menu_date)
    except ValueError:
        return error("VALIDATION_ERROR", "Invalid date format (YYYY-MM-DD)", 400)

    try:
        return ok({"menu_date": day.isoformat(), "decisions": result_service.decision_log(day)})
    except SQLAlchemyError:
        return store_failure("decisions", "Failed to fetch decisions", menu_date=day)
