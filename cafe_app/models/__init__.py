from .role import Role
from .user import User
from .cafe_menu_option import CafeMenuOption
from .cafe_vote import CafeVote
from .cafe_menu_result import CafeMenuResult, CafeDecisionLog
from .cafe_suggestion import CafeSuggestion, CafeSuggestionUpvote
from .cafe_setting import CafeSetting
from .notification import Notification

__all__ = [
    "Role",
    "User",
    "CafeMenuOption",
    "CafeVote",
    "CafeMenuResult",
    "CafeDecisionLog",
    "CafeSuggestion",
    "CafeSuggestionUpvote",
    "CafeSetting",
    "Notification",
]
