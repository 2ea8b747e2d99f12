# crm/core/errors.py
"""Domain errors raised by services and rendered by the app's exception handlers."""


class DomainError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(DomainError):
    status_code = 404


class BadRequest(DomainError):
    status_code = 400


class Unauthorized(DomainError):
    status_code = 401


class VersionConflict(DomainError):
    status_code = 409
