"""
Suggestion Service

The suggestion board: a global open/closed switch, free-text suggestions
and one upvote per user per suggestion. Closing the board retires every
active suggestion for good.
"""

import logging
from datetime import datetime
from typing import Dict, Any, List, Optional

from sqlalchemy import func

from cafe_app.extensions import db
from cafe_app.models.cafe_setting import CafeSetting
from cafe_app.models.cafe_suggestion import CafeSuggestion, CafeSuggestionUpvote
from cafe_app.models.user import User
from cafe_app.utils.db import upsert_insert
from cafe_app.utils.errors import BoardClosedError, NotFoundError

logger = logging.getLogger(__name__)

SUGGESTIONS_OPEN_KEY = "suggestions_open"


def _set_setting(key: str, value: str, user_id: Optional[int]) -> None:
    stmt = upsert_insert(CafeSetting).values(
        key=key,
        value=value,
        updated_by=user_id,
        updated_at=datetime.utcnow(),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["key"],
        set_={
            "value": stmt.excluded.value,
            "updated_by": stmt.excluded.updated_by,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    db.session.execute(stmt)


def is_open() -> bool:
    setting = (
        CafeSetting.query
        .filter_by(key=SUGGESTIONS_OPEN_KEY)
        .execution_options(populate_existing=True)
        .first()
    )
    return setting is not None and setting.value == "true"


def open_board(user_id: Optional[int] = None) -> None:
    _set_setting(SUGGESTIONS_OPEN_KEY, "true", user_id)
    db.session.commit()
    logger.info("Suggestions opened by user %s", user_id)


def close_board(user_id: Optional[int] = None) -> int:
    """
    Close the board and deactivate every active suggestion.

    Returns:
        Number of suggestions deactivated
    """
    _set_setting(SUGGESTIONS_OPEN_KEY, "false", user_id)
    deactivated = (
        CafeSuggestion.query
        .filter_by(is_active=True)
        .update({"is_active": False}, synchronize_session=False)
    )
    db.session.commit()
    logger.info("Suggestions closed by user %s, %d deactivated", user_id, deactivated)
    return deactivated


def submit_suggestion(user_id: int, text: str) -> CafeSuggestion:
    if not is_open():
        raise BoardClosedError()

    suggestion = CafeSuggestion(suggestion_text=text, suggested_by=user_id)
    db.session.add(suggestion)
    db.session.commit()
    logger.info("Suggestion %s submitted by user %s", suggestion.id, user_id)
    return suggestion


def upvote(suggestion_id: int, user_id: int) -> None:
    """
    Add the user's upvote. Upvoting twice is a no-op.

    Raises:
        NotFoundError: If the suggestion does not exist or is inactive
    """
    suggestion = CafeSuggestion.query.filter_by(id=suggestion_id, is_active=True).first()
    if suggestion is None:
        raise NotFoundError("Suggestion not found or inactive")

    stmt = upsert_insert(CafeSuggestionUpvote).values(
        suggestion_id=suggestion_id,
        user_id=user_id,
        created_at=datetime.utcnow(),
    )
    stmt = stmt.on_conflict_do_nothing(index_elements=["suggestion_id", "user_id"])
    db.session.execute(stmt)
    db.session.commit()


def remove_upvote(suggestion_id: int, user_id: int) -> int:
    """Remove the user's upvote; returns how many rows went (0 or 1)."""
    removed = (
        CafeSuggestionUpvote.query
        .filter_by(suggestion_id=suggestion_id, user_id=user_id)
        .delete(synchronize_session=False)
    )
    db.session.commit()
    return removed


def deactivate(suggestion_id: int) -> None:
    suggestion = db.session.get(CafeSuggestion, suggestion_id)
    if suggestion is None:
        raise NotFoundError("Suggestion not found")
    suggestion.is_active = False
    db.session.commit()
    logger.info("Suggestion %s deactivated", suggestion_id)


def list_active(viewer_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """Active suggestions, most upvoted first, newest first among equals."""
    upvote_count = func.count(CafeSuggestionUpvote.user_id).label("upvote_count")
    rows = (
        db.session.query(CafeSuggestion, User.name, upvote_count)
        .join(User, User.id == CafeSuggestion.suggested_by)
        .outerjoin(CafeSuggestionUpvote, CafeSuggestionUpvote.suggestion_id == CafeSuggestion.id)
        .filter(CafeSuggestion.is_active.is_(True))
        .group_by(CafeSuggestion.id, User.name)
        .order_by(upvote_count.desc(), CafeSuggestion.created_at.desc(), CafeSuggestion.id.desc())
        .all()
    )

    upvoted = set()
    if viewer_id is not None:
        upvoted = {
            sid for (sid,) in db.session.query(CafeSuggestionUpvote.suggestion_id)
            .filter(CafeSuggestionUpvote.user_id == viewer_id)
            .all()
        }

    return [
        {
            "id": s.id,
            "suggestion_text": s.suggestion_text,
            "suggested_by": s.suggested_by,
            "suggested_by_name": name,
            "created_at": s.created_at.isoformat(),
            "upvote_count": int(count),
            "user_upvoted": s.id in upvoted,
        }
        for s, name, count in rows
    ]
