"""Errors raised by the service layer.

All of them derive from ValueError so callers that only know about
ValueError keep working; controllers use ``status_code`` for the response.
"""


class ServiceError(ValueError):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = 404


class UnavailableError(ServiceError):
    status_code = 409


class InvalidStateError(ServiceError):
    status_code = 409


class ConflictError(ServiceError):
    """Another transaction changed the same row first."""
    status_code = 409
