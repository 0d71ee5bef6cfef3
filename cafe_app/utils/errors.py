"""
Cafe domain errors.

Every error carries a stable machine-readable ``code`` and the HTTP status
the controllers answer with. Services raise them; controllers turn them
into the ``{"error": {...}}`` envelope via ``utils.http.error``.
"""

from typing import Any, Dict, Optional


class CafeError(Exception):
    code = "CAFE_ERROR"
    status = 400
    default_message = "Cafe request failed"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(CafeError):
    code = "VALIDATION_ERROR"
    default_message = "Invalid request data"


class VotingClosedError(CafeError):
    code = "VOTING_CLOSED"
    default_message = "Voting has closed for today"


class InvalidOptionError(CafeError):
    code = "INVALID_OPTION"
    default_message = "Invalid option or option not for this date"


class NoOptionsError(CafeError):
    code = "NO_OPTIONS"
    default_message = "No menu options for this date"


class BoardClosedError(CafeError):
    code = "SUGGESTIONS_CLOSED"
    default_message = "Suggestions are currently closed"


class NotAuthenticatedError(CafeError):
    code = "UNAUTHORIZED"
    status = 401
    default_message = "User not authenticated"


class NotAuthorizedError(CafeError):
    code = "FORBIDDEN"
    status = 403
    default_message = "You do not have permission to perform this action"


class NotFoundError(CafeError):
    code = "NOT_FOUND"
    status = 404
    default_message = "Resource not found"


class MenuHasVotesError(CafeError):
    code = "MENU_HAS_VOTES"
    status = 409
    default_message = "Votes already exist for this date; the menu cannot be replaced"


class MenuFinalizedError(CafeError):
    code = "MENU_FINALIZED"
    status = 409
    default_message = "A winner is already finalized for this date; the menu cannot be changed"
