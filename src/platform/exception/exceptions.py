from enum import StrEnum


class ErrorKind(StrEnum):
    VALIDATION = 'validation'
    UNAUTHORIZED = 'unauthorized'
    FORBIDDEN = 'forbidden'
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    INTERNAL = 'internal'


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io

    The kind is the only classification carried by an error; the HTTP status
    is derived from it in exception_handlers.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        self.message = message
        if kind is not None:
            self.kind = kind
        super().__init__(message)


class DomainError(CustomBaseError):
    kind = ErrorKind.VALIDATION


class ValidationError(DomainError):
    pass


class ForbiddenError(CustomBaseError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(CustomBaseError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(CustomBaseError):
    kind = ErrorKind.CONFLICT


class AuthenticationError(CustomBaseError):
    kind = ErrorKind.UNAUTHORIZED


class InternalError(CustomBaseError):
    kind = ErrorKind.INTERNAL
