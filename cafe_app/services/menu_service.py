"""
Menu Service

Handles the daily menu catalog: posting the three candidate options for a
date, editing or removing a single option, and reading options with or
without their vote tally.
"""

import logging
from datetime import date
from typing import Dict, Any, List, Optional

from sqlalchemy import func, distinct

from cafe_app.extensions import db
from cafe_app.models.cafe_menu_option import CafeMenuOption
from cafe_app.models.cafe_menu_result import CafeMenuResult
from cafe_app.models.cafe_vote import CafeVote
from cafe_app.utils.errors import ValidationError, NotFoundError, MenuHasVotesError, MenuFinalizedError

logger = logging.getLogger(__name__)

OPTIONS_PER_MENU = 3

# Descriptive fields an option update may touch
UPDATABLE_FIELDS = ("dish_name", "dish_name_ar", "description", "description_ar", "image_path")


def post_menu(menu_date: date, options: List[Dict[str, Any]], created_by: Optional[int] = None) -> List[CafeMenuOption]:
    """
    Replace the options for a date with exactly three new ones.

    Args:
        menu_date: Cycle date the options are for
        options: Three dicts with dish_name and optional bilingual fields
        created_by: User ID of the chef posting the menu

    Returns:
        The new options, numbered 1..3 in array order

    Raises:
        ValidationError: If not exactly three options are given
        MenuHasVotesError: If anyone already voted for this date
        MenuFinalizedError: If a result is already stored for this date
    """
    if len(options) != OPTIONS_PER_MENU:
        raise ValidationError(f"Exactly {OPTIONS_PER_MENU} menu options are required")

    if CafeMenuResult.query.filter_by(menu_date=menu_date).first() is not None:
        raise MenuFinalizedError()

    # Replacing options after votes were cast would orphan those votes
    if CafeVote.query.filter_by(menu_date=menu_date).first() is not None:
        raise MenuHasVotesError()

    CafeMenuOption.query.filter_by(menu_date=menu_date).delete(synchronize_session=False)

    created = []
    for number, opt in enumerate(options, start=1):
        option = CafeMenuOption(
            menu_date=menu_date,
            option_number=number,
            dish_name=opt["dish_name"],
            dish_name_ar=opt.get("dish_name_ar"),
            description=opt.get("description"),
            description_ar=opt.get("description_ar"),
            image_path=opt.get("image_path"),
            created_by=created_by,
        )
        db.session.add(option)
        created.append(option)

    db.session.commit()
    logger.info("Posted menu for %s by user %s", menu_date.isoformat(), created_by)
    return created


def update_option(option_id: int, fields: Dict[str, Any]) -> CafeMenuOption:
    """
    Partially update the descriptive fields of one option.

    ``option_number`` and ``menu_date`` are never changed here.

    Raises:
        ValidationError: If no updatable field is given
        NotFoundError: If the option does not exist
    """
    updates = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
    if not updates:
        raise ValidationError("No fields to update")

    option = db.session.get(CafeMenuOption, option_id)
    if option is None:
        raise NotFoundError("Option not found")

    for key, value in updates.items():
        setattr(option, key, value)

    db.session.commit()
    logger.info("Updated menu option %s (%s)", option_id, ", ".join(sorted(updates)))
    return option


def delete_option(option_id: int) -> None:
    """
    Hard delete a single option together with the votes cast for it.

    Raises:
        NotFoundError: If the option does not exist
        MenuFinalizedError: If the option is a stored winner
    """
    option = db.session.get(CafeMenuOption, option_id)
    if option is None:
        raise NotFoundError("Option not found")

    if CafeMenuResult.query.filter_by(winning_option_id=option_id).first() is not None:
        raise MenuFinalizedError("This option won its date and cannot be deleted")

    removed_votes = CafeVote.query.filter_by(option_id=option_id).delete(synchronize_session=False)
    db.session.delete(option)
    db.session.commit()
    logger.info("Deleted menu option %s and %d vote(s)", option_id, removed_votes)


def get_options_for_date(menu_date: date, include_tally: bool) -> List[Dict[str, Any]]:
    """
    List a date's options ordered by option number.

    While voting is open callers pass ``include_tally=False`` and every
    ``vote_count`` is reported as 0 so running totals cannot sway voters.
    """
    if not include_tally:
        options = (
            CafeMenuOption.query
            .filter_by(menu_date=menu_date)
            .order_by(CafeMenuOption.option_number)
            .all()
        )
        return [o.to_dict(vote_count=0) for o in options]

    rows = (
        db.session.query(CafeMenuOption, func.count(CafeVote.id))
        .outerjoin(CafeVote, CafeVote.option_id == CafeMenuOption.id)
        .filter(CafeMenuOption.menu_date == menu_date)
        .group_by(CafeMenuOption.id)
        .order_by(CafeMenuOption.option_number)
        .all()
    )
    return [option.to_dict(vote_count=count) for option, count in rows]


def count_options(menu_date: date) -> int:
    return CafeMenuOption.query.filter_by(menu_date=menu_date).count()


def count_voters(menu_date: date) -> int:
    total = (
        db.session.query(func.count(distinct(CafeVote.user_id)))
        .filter(CafeVote.menu_date == menu_date)
        .scalar()
    )
    return int(total or 0)


def lock_options_for_date(menu_date: date) -> List[CafeMenuOption]:
    """
    Lock a date's option rows until the current transaction ends.

    On PostgreSQL a vote insert or update takes a key-share lock on the
    option it references, so holding these rows ``FOR UPDATE`` keeps the
    tally stable between reading it and writing the result.
    """
    return (
        CafeMenuOption.query
        .filter_by(menu_date=menu_date)
        .order_by(CafeMenuOption.option_number)
        .with_for_update()
        .all()
    )
