"""
Tally Service

Counts a date's votes per option and decides whether there is a unique
winner or a tie. A unique winner is finalized in the same transaction as
the tally read; a tie is left for a chef to break via
``result_service.decide_tie``.
"""

import logging
from datetime import date
from typing import Dict, Any, List

from sqlalchemy import func

from cafe_app.extensions import db
from cafe_app.models.cafe_menu_option import CafeMenuOption
from cafe_app.models.cafe_vote import CafeVote
from cafe_app.services import result_service
from cafe_app.services.menu_service import lock_options_for_date
from cafe_app.utils.enums import DecisionSource
from cafe_app.utils.errors import NoOptionsError

logger = logging.getLogger(__name__)


def tally(menu_date: date) -> List[Dict[str, Any]]:
    """Vote count per option for the date, zero-vote options included."""
    rows = (
        db.session.query(
            CafeMenuOption.id,
            CafeMenuOption.option_number,
            CafeMenuOption.dish_name,
            CafeMenuOption.dish_name_ar,
            func.count(CafeVote.id).label("vote_count"),
        )
        .outerjoin(CafeVote, CafeVote.option_id == CafeMenuOption.id)
        .filter(CafeMenuOption.menu_date == menu_date)
        .group_by(
            CafeMenuOption.id,
            CafeMenuOption.option_number,
            CafeMenuOption.dish_name,
            CafeMenuOption.dish_name_ar,
        )
        .order_by(CafeMenuOption.option_number)
        .all()
    )
    return [
        {
            "id": r.id,
            "option_number": r.option_number,
            "dish_name": r.dish_name,
            "dish_name_ar": r.dish_name_ar,
            "vote_count": int(r.vote_count),
        }
        for r in rows
    ]


def resolve(counts: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Decide the outcome of a tally.

    A unique winner needs the single highest count and at least one vote.
    Two or more options sharing the highest count is a tie. When nobody
    voted every option is reported as tied, with ``no_votes`` set so the
    caller can tell that case apart from a real tie.

    Raises:
        NoOptionsError: If the tally is empty
    """
    if not counts:
        raise NoOptionsError()

    top = max(c["vote_count"] for c in counts)
    leaders = [c for c in counts if c["vote_count"] == top]
    votes_cast = sum(c["vote_count"] for c in counts)

    if len(leaders) == 1 and top > 0:
        return {
            "tie": False,
            "winner": leaders[0],
            "total_votes": top,
            "votes_cast": votes_cast,
            "no_votes": False,
        }

    return {
        "tie": True,
        "tied_options": leaders,
        "total_votes": top,
        "votes_cast": votes_cast,
        "no_votes": top == 0,
    }


def close_voting_and_resolve(
    menu_date: date,
    finalize: bool = True,
    source: str = DecisionSource.AUTO.value
) -> Dict[str, Any]:
    """
    Tally a date and, for a unique winner, finalize it.

    Allowed at any time once options exist, so a chef can close early.

    Args:
        menu_date: Cycle date to close
        finalize: False to only report the outcome
        source: Recorded in the decision log (auto or scheduler)

    Returns:
        The outcome from ``resolve``, plus ``finalized``

    Raises:
        NoOptionsError: If the date has no options
    """
    options = lock_options_for_date(menu_date)
    if not options:
        db.session.rollback()
        raise NoOptionsError()

    outcome = resolve(tally(menu_date))
    outcome["finalized"] = False

    if outcome["tie"]:
        logger.info(
            "Tie on %s between options %s (no_votes=%s)",
            menu_date.isoformat(), [o["id"] for o in outcome["tied_options"]], outcome["no_votes"]
        )
    elif finalize:
        winner = outcome["winner"]
        result_service.finalize(
            menu_date,
            winner["id"],
            winner["vote_count"],
            source=source,
            commit=False,
        )
        outcome["finalized"] = True

    db.session.commit()
    return outcome


def has_pending_tie(menu_date: date) -> bool:
    """True when the date's tally is a tie and no decision is stored yet."""
    counts = tally(menu_date)
    if not counts or result_service.is_finalized(menu_date):
        return False
    return resolve(counts)["tie"]
