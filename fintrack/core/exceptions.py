"""
Domain exceptions.

Services raise these; the application registers handlers that map each one to
an HTTP status (see ``fintrack.main``). Nothing here is retried internally.
"""


class FinTrackError(Exception):
    """Base class for all domain errors."""
    status_code: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class InvalidInputError(FinTrackError):
    """Malformed or out-of-range input (zero participants, non-positive total...)."""
    status_code = 400


class InvalidSplitError(InvalidInputError):
    """A split cannot be computed from the given participants."""


class InvalidAmountError(InvalidInputError):
    """A monetary amount is zero or negative where it must be positive."""


class ImbalancedSplitError(InvalidInputError):
    """Percentages or custom amounts do not add up."""
    status_code = 422


class InvalidTransitionError(FinTrackError):
    """A state change is not allowed from the record's current state."""
    status_code = 409


class UnauthorizedError(FinTrackError):
    """Caller may not perform this operation on this record."""
    status_code = 403

    def __init__(self, message: str = "Not allowed"):
        super().__init__(message)


class NotFoundError(FinTrackError):
    status_code = 404


class ExternalServiceError(FinTrackError):
    """A third-party API (quotes, email) failed."""
    status_code = 502


class RateLimitError(ExternalServiceError):
    """The third-party API refused the request because of its rate limit. Retryable."""
    status_code = 429
