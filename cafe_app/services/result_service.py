"""
Result Service

Persists the outcome of a cycle date. ``cafe_menu_results`` holds the
current decision (one row per date, written by upsert); every write is
also appended to ``cafe_decision_log`` so an overwritten decision stays
discoverable.
"""

import logging
from datetime import date, datetime
from typing import Dict, Any, List, Optional

from cafe_app.extensions import db
from cafe_app.models.cafe_menu_option import CafeMenuOption
from cafe_app.models.cafe_menu_result import CafeMenuResult, CafeDecisionLog
from cafe_app.models.cafe_vote import CafeVote
from cafe_app.models.user import User
from cafe_app.services.menu_service import lock_options_for_date
from cafe_app.utils.db import upsert_insert
from cafe_app.utils.enums import DecisionSource
from cafe_app.utils.errors import InvalidOptionError

logger = logging.getLogger(__name__)


def finalize(
    menu_date: date,
    winner_id: int,
    total_votes: int,
    was_tie: bool = False,
    decided_by: Optional[int] = None,
    source: str = DecisionSource.AUTO.value,
    commit: bool = True
) -> CafeMenuResult:
    """
    Write the decision for a date.

    Args:
        menu_date: Cycle date being decided
        winner_id: Winning option ID
        total_votes: Votes for the winner at decision time
        was_tie: True when a human broke a tie
        decided_by: User who broke the tie, None for automatic decisions
        source: auto, manual or scheduler (recorded in the decision log)
        commit: False when the caller owns the surrounding transaction

    Returns:
        The stored result row
    """
    stamp = datetime.utcnow()
    stmt = upsert_insert(CafeMenuResult).values(
        menu_date=menu_date,
        winning_option_id=winner_id,
        total_votes=total_votes,
        was_tie=was_tie,
        decided_by=decided_by,
        finalized_at=stamp,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["menu_date"],
        set_={
            "winning_option_id": stmt.excluded.winning_option_id,
            "total_votes": stmt.excluded.total_votes,
            "was_tie": stmt.excluded.was_tie,
            "decided_by": stmt.excluded.decided_by,
            "finalized_at": stmt.excluded.finalized_at,
        },
    )
    db.session.execute(stmt)

    db.session.add(CafeDecisionLog(
        menu_date=menu_date,
        winning_option_id=winner_id,
        total_votes=total_votes,
        was_tie=was_tie,
        decided_by=decided_by,
        source=source,
        created_at=stamp,
    ))

    if commit:
        db.session.commit()
    else:
        db.session.flush()

    logger.info(
        "Finalized %s: option=%s votes=%s tie=%s decided_by=%s source=%s",
        menu_date.isoformat(), winner_id, total_votes, was_tie, decided_by, source
    )
    return get_result(menu_date)


def decide_tie(menu_date: date, winning_option_id: int, decided_by: int) -> CafeMenuResult:
    """
    Finalize a tied date with the option a chef picked.

    This is an unconditional override: it does not check that the date is
    tied, and it replaces any result already stored (the decision log keeps
    the earlier one).

    The option's vote count is read again here, inside the same transaction
    as the write, rather than taken from the earlier tie detection.

    Raises:
        InvalidOptionError: If the option is not one of the date's options
    """
    options = lock_options_for_date(menu_date)
    if winning_option_id not in {o.id for o in options}:
        db.session.rollback()
        raise InvalidOptionError("Invalid option for this date")

    vote_count = CafeVote.query.filter_by(menu_date=menu_date, option_id=winning_option_id).count()

    result = finalize(
        menu_date,
        winning_option_id,
        vote_count,
        was_tie=True,
        decided_by=decided_by,
        source=DecisionSource.MANUAL.value,
        commit=False,
    )
    db.session.commit()
    return result


def get_result(menu_date: date) -> Optional[CafeMenuResult]:
    # Upserts bypass the identity map, so refresh whatever is loaded
    return (
        CafeMenuResult.query
        .filter_by(menu_date=menu_date)
        .execution_options(populate_existing=True)
        .first()
    )


def is_finalized(menu_date: date) -> bool:
    result = get_result(menu_date)
    return result is not None and result.finalized_at is not None


def serialize_result(result: CafeMenuResult) -> Dict[str, Any]:
    option = result.winning_option
    return {
        "menu_date": result.menu_date.isoformat(),
        "winning_option_id": result.winning_option_id,
        "dish_name": option.dish_name if option else None,
        "dish_name_ar": option.dish_name_ar if option else None,
        "total_votes": result.total_votes,
        "was_tie": result.was_tie,
        "decided_by": result.decided_by,
        "finalized_at": result.finalized_at.isoformat() if result.finalized_at else None,
    }


def today_menu(today: date) -> Optional[Dict[str, Any]]:
    """The finalized winner for ``today`` (decided in yesterday's cycle)."""
    row = (
        db.session.query(CafeMenuResult, CafeMenuOption)
        .join(CafeMenuOption, CafeMenuOption.id == CafeMenuResult.winning_option_id)
        .filter(CafeMenuResult.menu_date == today, CafeMenuResult.finalized_at.isnot(None))
        .first()
    )
    if row is None:
        return None

    result, option = row
    return {
        "menu_date": result.menu_date.isoformat(),
        "option_id": option.id,
        "option_number": option.option_number,
        "dish_name": option.dish_name,
        "dish_name_ar": option.dish_name_ar,
        "description": option.description,
        "description_ar": option.description_ar,
        "image_path": option.image_path,
        "total_votes": result.total_votes,
        "was_tie": result.was_tie,
        "finalized_at": result.finalized_at.isoformat(),
    }


def history(limit: int = 30, offset: int = 0) -> Dict[str, Any]:
    """Past decisions, newest date first."""
    rows = (
        db.session.query(CafeMenuResult, CafeMenuOption, User.name)
        .join(CafeMenuOption, CafeMenuOption.id == CafeMenuResult.winning_option_id)
        .outerjoin(User, User.id == CafeMenuResult.decided_by)
        .order_by(CafeMenuResult.menu_date.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )

    items = []
    for result, option, decider_name in rows:
        items.append({
            "menu_date": result.menu_date.isoformat(),
            "total_votes": result.total_votes,
            "was_tie": result.was_tie,
            "finalized_at": result.finalized_at.isoformat() if result.finalized_at else None,
            "dish_name": option.dish_name,
            "dish_name_ar": option.dish_name_ar,
            "decided_by_name": decider_name,
        })

    return {
        "history": items,
        "total": CafeMenuResult.query.count(),
        "limit": limit,
        "offset": offset,
    }


def decision_log(menu_date: date) -> List[Dict[str, Any]]:
    entries = (
        CafeDecisionLog.query
        .filter_by(menu_date=menu_date)
        .order_by(CafeDecisionLog.id)
        .all()
    )
    return [
        {
            "id": e.id,
            "menu_date": e.menu_date.isoformat(),
            "winning_option_id": e.winning_option_id,
            "total_votes": e.total_votes,
            "was_tie": e.was_tie,
            "decided_by": e.decided_by,
            "source": e.source,
            "created_at": e.created_at.isoformat(),
        }
        for e in entries
    ]
