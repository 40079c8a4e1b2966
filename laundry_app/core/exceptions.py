"""Custom exceptions for the Laundry Girl API."""
from __future__ import annotations


class LaundryException(Exception):
    """Base exception for all Laundry Girl errors."""

    status_code = 500

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationException(LaundryException):
    """Input validation errors."""

    status_code = 400


class AuthenticationException(LaundryException):
    """No active session or rejected credentials."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class AuthorizationException(LaundryException):
    """Authorization/permission errors."""

    status_code = 403


class NotFoundException(LaundryException):
    """Requested row does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class BackendException(LaundryException):
    """Network or database failure reported by the backend service."""

    status_code = 502

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ConfigurationException(LaundryException):
    """Configuration errors."""

    pass
