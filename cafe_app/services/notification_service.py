from typing import Dict, Any, Iterable, List

from cafe_app.extensions import db
from cafe_app.models.notification import Notification


def notify_users(user_ids: Iterable[int], **fields) -> int:
    """
    Queue the same notification for several users.

    ``fields`` are Notification columns (title, message, type, ...).
    The caller commits.
    """
    count = 0
    for user_id in user_ids:
        db.session.add(Notification(user_id=user_id, **fields))
        count += 1
    return count


def list_for_user(user_id: int, limit: int = 50) -> List[Dict[str, Any]]:
    items = (
        Notification.query
        .filter_by(user_id=user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": n.id,
            "title": n.title,
            "title_ar": n.title_ar,
            "message": n.message,
            "message_ar": n.message_ar,
            "type": n.type,
            "priority": n.priority,
            "action_url": n.action_url,
            "is_read": n.is_read,
            "created_at": n.created_at.isoformat(),
        }
        for n in items
    ]
