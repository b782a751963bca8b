"""Custom exceptions for warmable."""

from __future__ import annotations

__all__ = [
    "UnknownOperationError",
    "WarmableError",
]


class WarmableError(Exception):
    """Base exception for all warmable errors."""


class UnknownOperationError(WarmableError, AttributeError):
    """Raised when an undefined operation is invoked on a Warmable."""

    def __init__(self, owner: type, name: str) -> None:
        super().__init__(
            f"Call to undefined method {owner.__module__}.{owner.__qualname__}.{name}()"
        )
        self.owner = owner
        self.name = name
