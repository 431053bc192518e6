"""
Domain errors.
Raised by use cases and adapters; the HTTP layer maps each to a status code.
"""


class RollCallError(Exception):
    """Base for every error the service reports to a caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RollCallError):
    """Malformed or out-of-range input. Caller-correctable."""

    status_code = 400


class NotFoundError(RollCallError):
    status_code = 404


class UnauthorizedError(RollCallError):
    """Admin token missing or wrong."""

    status_code = 401


class AdminMisconfiguredError(RollCallError):
    """The admin secret is unset or too short. An operator fault, not a caller fault."""

    status_code = 500


class UpstreamFetchError(RollCallError):
    """The directory source was unreachable or answered with a non-success status."""

    status_code = 500


class StoreError(RollCallError):
    status_code = 500
