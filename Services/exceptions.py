# Services/exceptions.py
"""Failure taxonomy for the inventory store and its storage adapters."""

from typing import Optional


class InventoryError(Exception):
    """Base exception for all inventory errors."""


class InvalidArgument(InventoryError):
    """Malformed id, unknown status or missing input."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message)


class NotFound(InventoryError):
    """The target car or image does not exist."""


class PreconditionFailed(NotFound):
    """A guarded write matched no document.

    Raised when the car is missing or is not in the status the operation
    requires, e.g. reserving a car that is already sold. Both cases look the
    same to the store: zero documents matched the filter.
    """

    def __init__(self, message: str, *, car_id: str = "", required_status: str = "") -> None:
        self.car_id = car_id
        self.required_status = required_status
        super().__init__(message)


class StorageError(InventoryError):
    """The document collection or the image store failed."""
