"""
Domain error taxonomy.

Service functions raise these; ``linkup.main`` turns them into JSON
responses carrying ``status_code``. Anything else bubbles up as a 500.
"""


class LinkupError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LinkupError):
    """Malformed input or an illegal state transition."""
    status_code = 400


class AuthorizationError(LinkupError):
    """Caller is not a legitimate participant."""
    status_code = 403


class NotFoundError(LinkupError):
    status_code = 404


class ConflictError(LinkupError):
    """Duplicate relationship between the same pair."""
    status_code = 409
