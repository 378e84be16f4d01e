from enum import StrEnum


class ErrorKind(StrEnum):
    AUTH_ERROR = 'AUTH_ERROR'
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    AVAILABILITY_ERROR = 'AVAILABILITY_ERROR'
    AUTHORIZATION_ERROR = 'AUTHORIZATION_ERROR'
    NETWORK_ERROR = 'NETWORK_ERROR'
    SERVER_ERROR = 'SERVER_ERROR'
    NOT_FOUND = 'NOT_FOUND'


class AuthErrorCode(StrEnum):
    INVALID_CREDENTIALS = 'INVALID_CREDENTIALS'
    SESSION_EXPIRED = 'SESSION_EXPIRED'
    LOGIN_REQUIRED = 'LOGIN_REQUIRED'
    SUPERSEDED = 'SUPERSEDED'


# Shown when the API does not provide a message of its own
FALLBACK_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.AUTH_ERROR: 'Authentication failed',
    ErrorKind.VALIDATION_ERROR: 'Invalid input',
    ErrorKind.AVAILABILITY_ERROR: 'Not enough tickets available',
    ErrorKind.AUTHORIZATION_ERROR: "You don't have permission to perform this action",
    ErrorKind.NETWORK_ERROR: 'Unable to reach the server, please try again',
    ErrorKind.SERVER_ERROR: 'Something went wrong on our side, please try again later',
    ErrorKind.NOT_FOUND: 'The requested resource was not found',
}


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    kind: ErrorKind = ErrorKind.SERVER_ERROR

    def __init__(self, message: str | None, status_code: int) -> None:
        self.message = message or FALLBACK_MESSAGES[self.kind]
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        return self.message


class DomainError(CustomBaseError):
    kind = ErrorKind.VALIDATION_ERROR

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class AuthenticationError(CustomBaseError):
    kind = ErrorKind.AUTH_ERROR

    def __init__(
        self,
        message: str | None = None,
        code: AuthErrorCode = AuthErrorCode.INVALID_CREDENTIALS,
    ) -> None:
        self.code = code
        super().__init__(message, 401)


class SessionExpiredError(AuthenticationError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message or 'Your session has expired, please log in again',
            AuthErrorCode.SESSION_EXPIRED,
        )


class ForbiddenError(CustomBaseError):
    """
    Role mismatch on a protected action

    `session_expired` is set when the rejection also ended the session, so
    callers can send the user to the login page instead of showing the error.
    """

    kind = ErrorKind.AUTHORIZATION_ERROR

    def __init__(self, message: str | None = None, *, session_expired: bool = False) -> None:
        self.session_expired = session_expired
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, 404)


class AvailabilityError(CustomBaseError):
    kind = ErrorKind.AVAILABILITY_ERROR

    def __init__(self, message: str | None = None, status_code: int = 409) -> None:
        super().__init__(message, status_code)


class NetworkError(CustomBaseError):
    kind = ErrorKind.NETWORK_ERROR

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, 0)


class ServerError(CustomBaseError):
    kind = ErrorKind.SERVER_ERROR

    def __init__(self, message: str | None = None, status_code: int = 500) -> None:
        super().__init__(message, status_code)


class InvalidStateTransitionError(DomainError):
    """An operation was called in a workflow stage that does not allow it"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)
