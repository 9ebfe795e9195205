"""Error taxonomy for inventory reconciliation and store access.

Input errors fail fast before any store call. Store errors are raised by the
adapters and pass through the inventory client unmodified. Decode errors are
always surfaced; a payload that cannot be read is never treated as empty.
"""

from __future__ import annotations


class InventoryError(RuntimeError):
    """Base class for inventory failures."""


class InvalidInventoryError(InventoryError, ValueError):
    """Raised when a local inventory descriptor is missing or unusable."""


class InventoryDecodeError(InventoryError):
    """Raised when an anchor payload contains a malformed entry."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class InventoryEncodeError(InventoryError):
    """Raised when a member cannot be written as a key that reads back unchanged."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class UnknownResourceError(InventoryError):
    """Raised when a group/kind cannot be mapped to a store resource."""


class StoreError(RuntimeError):
    """Base class for remote store failures."""


class StoreAPIError(StoreError):
    """Raised when the store answers with an error status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class ObjectNotFoundError(StoreAPIError):
    """Raised when the addressed object does not exist."""


class ObjectAlreadyExistsError(StoreAPIError):
    """Raised when creating an object whose identity is already taken."""
