from enum import Enum


class RoleName(str, Enum):
    ADMIN = "ADMIN"
    CAFE = "CAFE"
    USER = "USER"


# Roles allowed to run the chef-side operations
CAFE_MANAGER_ROLES = (RoleName.ADMIN.value, RoleName.CAFE.value)


class DecisionSource(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"
    SCHEDULER = "scheduler"


class NotificationType(str, Enum):
    CAFE_REMINDER = "cafe_reminder"
    CAFE_TIE = "cafe_tie"
