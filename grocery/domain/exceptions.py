"""Domain errors raised by services and translated to HTTP responses by the API layer."""


class ValidationError(ValueError):
    """A required field is missing or malformed, or a transition is not allowed."""


class NotFoundError(ValueError):
    """The id does not exist or is not visible to the requester."""


class UnauthorizedError(Exception):
    """Missing, malformed or expired credential."""


class ForbiddenError(PermissionError):
    """Authenticated, but the role may not perform this operation."""


class ConflictError(RuntimeError):
    """A concurrent write won the race; the caller has to re-initiate."""


class UpstreamError(RuntimeError):
    """The payment gateway or the notification channel failed."""
