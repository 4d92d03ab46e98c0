"""Errors raised by range map construction and lookup.

Construction errors all derive from ``RangeMapError`` (itself a ``ValueError``)
and are raised eagerly by the validator; nothing is deferred to query time.
``KeyNotFoundError`` is the only query-time error and is a ``KeyError``.
"""

from typing import Any


class RangeMapError(ValueError):
    """Base class for every construction-time failure."""


class SizeMismatchError(RangeMapError):
    pass


class EmptyRangeMapError(RangeMapError):
    pass


class InvalidIntervalShapeError(RangeMapError):
    pass


class OutOfOrderError(RangeMapError):
    pass


class KeyNotFoundError(KeyError):
    def __init__(self, key: Any, message: str):
        super().__init__(message)
        self.key: Any = key
        self.message: str = message

    def __str__(self) -> str:
        return self.message
