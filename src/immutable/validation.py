"""Checks a proposed value against a single field's declared type."""

from __future__ import annotations

from typing import Any

from .exceptions import TypeMismatchError
from .shapes import FieldDescriptor
from .types import TypeKind, type_name


def describe_runtime_type(value: Any) -> str:
    """Debug name of a value's runtime type, used in error messages."""

    if value is None:
        return "None"
    return type_name(type(value))


def _is_integral(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate(descriptor: FieldDescriptor, value: Any) -> Any:
    """Return the value to store for ``descriptor`` or raise ``TypeMismatchError``.

    Integers proposed for a ``float`` field are widened, every other accepted
    value is returned unchanged.
    """

    spec = descriptor.declared_type
    if spec is None or spec.skips_validation:
        return value
    if value is None and descriptor.nullable:
        return value

    kind = spec.kind
    if kind is TypeKind.INT:
        valid = _is_integral(value)
    elif kind is TypeKind.FLOAT:
        if _is_integral(value):
            try:
                return float(value)
            except OverflowError as exc:
                raise TypeMismatchError(
                    descriptor.name, spec.name, describe_runtime_type(value)
                ) from exc
        valid = isinstance(value, float)
    elif kind is TypeKind.STRING:
        valid = isinstance(value, str)
    elif kind is TypeKind.BOOL:
        valid = isinstance(value, bool)
    elif kind is TypeKind.MIXED:
        valid = True
    elif kind is TypeKind.OBJECT:
        valid = value is not None
    elif spec.target is None:
        msg = f"Type spec {spec.name!r} of kind {kind} has no target class"
        raise ValueError(msg)
    else:
        valid = isinstance(value, spec.target)

    if not valid:
        raise TypeMismatchError(descriptor.name, spec.name, describe_runtime_type(value))
    return value


__all__ = ["describe_runtime_type", "validate"]
