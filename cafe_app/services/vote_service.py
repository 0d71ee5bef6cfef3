"""
Vote Service

Records each user's current choice for a cycle date. A user holds at most
one vote per date; voting again before the cutoff changes it.
"""

import logging
from datetime import date, datetime
from typing import Dict, Any, Optional

from cafe_app.extensions import db
from cafe_app.models.cafe_menu_option import CafeMenuOption
from cafe_app.models.cafe_vote import CafeVote
from cafe_app.services.clock import VotingClock, get_clock
from cafe_app.utils.db import upsert_insert
from cafe_app.utils.errors import VotingClosedError, InvalidOptionError

logger = logging.getLogger(__name__)


def submit_vote(
    menu_date: date,
    user_id: int,
    option_id: int,
    now: datetime,
    clock: Optional[VotingClock] = None
) -> None:
    """
    Cast or change a vote.

    Args:
        menu_date: Cycle date being voted on
        user_id: Voter
        option_id: Chosen option, must belong to ``menu_date``
        now: Current time, checked against the cutoff
        clock: Time-window policy (defaults to the app's clock)

    Raises:
        VotingClosedError: If the cutoff has passed
        InvalidOptionError: If the option does not exist or is for another date
    """
    clock = clock or get_clock()
    if clock.is_voting_closed(now):
        raise VotingClosedError()

    option = (
        CafeMenuOption.query
        .filter_by(id=option_id, menu_date=menu_date)
        .first()
    )
    if option is None:
        raise InvalidOptionError("Invalid option or option not for this date")

    stamp = datetime.utcnow()
    stmt = upsert_insert(CafeVote).values(
        menu_date=menu_date,
        user_id=user_id,
        option_id=option_id,
        voted_at=stamp,
        updated_at=stamp,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["menu_date", "user_id"],
        set_={
            "option_id": stmt.excluded.option_id,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    db.session.execute(stmt)
    db.session.commit()
    logger.info("Vote recorded: date=%s user=%s option=%s", menu_date.isoformat(), user_id, option_id)


def get_vote(menu_date: date, user_id: int) -> Optional[Dict[str, Any]]:
    """Return the user's current vote for the date, or None."""
    row = (
        db.session.query(CafeVote, CafeMenuOption)
        .join(CafeMenuOption, CafeMenuOption.id == CafeVote.option_id)
        .filter(CafeVote.menu_date == menu_date, CafeVote.user_id == user_id)
        .first()
    )
    if row is None:
        return None

    vote, option = row
    return {
        "option_id": vote.option_id,
        "option_number": option.option_number,
        "dish_name": option.dish_name,
        "dish_name_ar": option.dish_name_ar,
        "voted_at": vote.voted_at.isoformat() if vote.voted_at else None,
        "updated_at": vote.updated_at.isoformat() if vote.updated_at else None,
    }


def count_votes(menu_date: date) -> int:
    return CafeVote.query.filter_by(menu_date=menu_date).count()
