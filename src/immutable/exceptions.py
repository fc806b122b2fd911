"""Errors raised by the mutation engine."""

from __future__ import annotations


class MutationError(RuntimeError):
    """Base class for all mutation failures."""


class PropertyDoesNotExistError(MutationError):
    """Raised when a change set names a field the target shape does not declare."""

    def __init__(self, field: str, shape: str) -> None:
        self.field = field
        self.shape = shape
        super().__init__(f'Field "{field}" does not exist on "{shape}".')


class TypeMismatchError(MutationError):
    """Raised when a proposed value does not satisfy the field's declared type."""

    def __init__(self, field: str, expected_type: str, actual_type: str) -> None:
        self.field = field
        self.expected_type = expected_type
        self.actual_type = actual_type
        super().__init__(
            f'Field "{field}" expects type "{expected_type}", got "{actual_type}".'
        )


class UnsupportedTypeError(MutationError):
    """Raised when the value handed to the dispatcher cannot be mutated."""

    def __init__(self, actual_type: str) -> None:
        self.actual_type = actual_type
        super().__init__(
            f'Cannot mutate value of type "{actual_type}". '
            "Supported types: mapping, sequence, record."
        )


class ReadOnlyPropertyError(MutationError):
    """Raised when a field is marked immutable beyond construction.

    Reserved: the engine assembles fields directly and does not raise this yet.
    """

    def __init__(self, field: str, shape: str) -> None:
        self.field = field
        self.shape = shape
        super().__init__(f'Field "{field}" on "{shape}" is read-only and cannot be mutated.')


__all__ = [
    "MutationError",
    "PropertyDoesNotExistError",
    "ReadOnlyPropertyError",
    "TypeMismatchError",
    "UnsupportedTypeError",
]
