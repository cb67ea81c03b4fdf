class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class PosPayloadError(CustomBaseError):
    """Provider payload could not be normalized into a RawTransaction"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 422)


class TransientError(CustomBaseError):
    """Raised once a retried operation (lock wait, POS call) gives up"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


class UpstreamError(CustomBaseError):
    """A POS provider answered with a non-retryable error (bad credentials, unknown location)"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 502)
