"""Exceptions shared across bounded contexts."""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when a caller-supplied value fails a structural precondition.

    Covers wrong types, wrong lengths and "exactly one of" violations. The
    offending argument name is kept on the exception so an outer layer can
    translate it into a field-level error.

    Attributes:
        argument: Name of the offending argument
    """

    def __init__(self, argument: str, message: str | None = None):
        super().__init__(message or f"Invalid argument: {argument}")
        self.argument = argument
