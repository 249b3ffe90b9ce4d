from __future__ import annotations


class DomainError(Exception):
    pass


class ValidationError(DomainError, ValueError):
    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.details = {"field": field} if field else {}


class NotFoundError(DomainError):
    pass


class InvalidTransitionError(DomainError):
    def __init__(self, message: str, from_status: str, to_status: str) -> None:
        super().__init__(message)
        self.from_status = from_status
        self.to_status = to_status
        self.details = {"from": from_status, "to": to_status}
