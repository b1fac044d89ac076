"""Domain errors raised by account operations and serialized by a single API handler."""


class AccountError(Exception):
    """Base for all account-service errors. Carries a human-readable message and an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class InvalidInputError(AccountError):
    """Missing or malformed request fields."""

    status_code = 400


class ConflictError(AccountError):
    """A unique key (the email) is already taken."""

    status_code = 400


class UnauthorizedError(AccountError):
    """Bad credentials or missing/invalid session token."""

    status_code = 401


class NotFoundError(AccountError):
    """The referenced user does not exist."""

    status_code = 404


class InvalidTokenError(AccountError):
    """Token signature, purpose, or expiry check failed."""

    status_code = 400


class DeliveryError(AccountError):
    """The notification sink could not deliver (SMTP failure, timeout, not configured)."""

    status_code = 500


class StoreError(AccountError):
    """The user directory failed for a reason unrelated to the request (I/O, driver error)."""

    status_code = 500

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)
