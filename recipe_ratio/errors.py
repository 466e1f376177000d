"""Exception hierarchy shared by the store, remote client, and services."""

from __future__ import annotations


class RecipeRatioError(Exception):
    """Base class for every recoverable failure raised by this package."""


class StoreError(RecipeRatioError):
    """Raised when the local persistent store rejects an operation."""

    def __init__(self, operation: str, table: str, reason: str = "store failure"):
        super().__init__(f"{operation} on {table} failed: {reason}")
        self.operation = operation
        self.table = table
        self.reason = reason


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


class RemoteFetchError(RecipeRatioError):
    """Raised when a recipe snapshot cannot be obtained from the catalog."""

    def __init__(self, recipe_id: int | None, reason: str = "Request failed"):
        super().__init__(f"Failed to fetch recipe {recipe_id}: {reason}")
        self.recipe_id = recipe_id
        self.reason = reason


class RemoteTimeoutError(RemoteFetchError):
    def __init__(self, recipe_id: int | None, timeout_seconds: float):
        super().__init__(
            recipe_id, f"Request timed out after {timeout_seconds:g} seconds."
        )
        self.timeout_seconds = timeout_seconds


class ValidationFailure(RecipeRatioError):
    """Raised when user input is rejected before it reaches the store."""

    def __init__(self, message: str, *, field: str | None = None, value: object = None):
        super().__init__(message)
        self.field = field
        self.value = value


__all__ = [
    "RecipeRatioError",
    "RemoteFetchError",
    "RemoteTimeoutError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "ValidationFailure",
]
