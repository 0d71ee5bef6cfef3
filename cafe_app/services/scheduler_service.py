"""
Scheduler Service

Jobs an external scheduler (cron) runs through the ``flask cafe`` CLI:
the half-hour-before-cutoff voting reminder and the cutoff close.
"""

import logging
from datetime import date
from typing import Dict, Any

from cafe_app.extensions import db
from cafe_app.models.cafe_vote import CafeVote
from cafe_app.models.role import Role
from cafe_app.models.user import User
from cafe_app.services import menu_service, result_service, tally_service
from cafe_app.services.notification_service import notify_users
from cafe_app.utils.enums import DecisionSource, NotificationType, RoleName

logger = logging.getLogger(__name__)


def send_voting_reminder(menu_date: date) -> int:
    """
    Remind every active user who has not voted for ``menu_date`` yet.

    Returns:
        Number of reminders created (0 when the date has no options)
    """
    if menu_service.count_options(menu_date) == 0:
        logger.info("No menu options for %s, skipping reminder", menu_date.isoformat())
        return 0

    voted = db.session.query(CafeVote.user_id).filter(CafeVote.menu_date == menu_date)
    pending = (
        db.session.query(User.id)
        .filter(User.is_active.is_(True), User.id.notin_(voted))
        .all()
    )

    created = notify_users(
        [uid for (uid,) in pending],
        title="Don't forget to vote!",
        title_ar="لا تنسى التصويت!",
        message="Voting for tomorrow's lunch closes in 30 minutes",
        message_ar="التصويت لغداء الغد يغلق خلال 30 دقيقة",
        type=NotificationType.CAFE_REMINDER.value,
        priority="medium",
        action_url="/",
    )
    db.session.commit()
    logger.info("Sent %d voting reminder(s) for %s", created, menu_date.isoformat())
    return created


def close_voting(menu_date: date) -> Dict[str, Any]:
    """
    Close the date's voting at the cutoff.

    A unique winner is finalized; a tie notifies every active cafe user
    so one of them breaks it.

    Returns:
        ``{"status": ...}`` with one of no_options, already_finalized,
        finalized or tie
    """
    if menu_service.count_options(menu_date) == 0:
        logger.info("No menu options for %s, skipping close", menu_date.isoformat())
        return {"status": "no_options"}

    if result_service.is_finalized(menu_date):
        logger.info("Voting already finalized for %s", menu_date.isoformat())
        return {"status": "already_finalized"}

    outcome = tally_service.close_voting_and_resolve(menu_date, source=DecisionSource.SCHEDULER.value)
    if not outcome["tie"]:
        return {"status": "finalized", "winner": outcome["winner"]}

    cafe_users = (
        db.session.query(User.id)
        .join(Role, Role.id == User.role_id)
        .filter(Role.name == RoleName.CAFE.value, User.is_active.is_(True))
        .all()
    )
    notified = notify_users(
        [uid for (uid,) in cafe_users],
        title="Tie Breaker Needed",
        title_ar="مطلوب فاصل للتعادل",
        message="There's a tie in tomorrow's lunch vote. Please decide the winner.",
        message_ar="هناك تعادل في تصويت غداء الغد. الرجاء تحديد الفائز.",
        type=NotificationType.CAFE_TIE.value,
        priority="high",
        action_url="/cafe",
    )
    db.session.commit()
    logger.info("Tie on %s, notified %d cafe user(s)", menu_date.isoformat(), notified)
    return {"status": "tie", "tied_options": outcome["tied_options"], "notified": notified}
