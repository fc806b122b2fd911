"""Record and map mutators."""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from .exceptions import PropertyDoesNotExistError, UnsupportedTypeError
from .shapes import reflect
from .types import type_name
from .validation import describe_runtime_type, validate

ChangeSet = Mapping[Any, Any]


def merge_changes(changes: ChangeSet | None, overrides: Mapping[str, Any]) -> dict[Any, Any]:
    """Combine a positional change set with keyword overrides, keywords win."""

    merged: dict[Any, Any] = {}
    if changes is not None:
        if not isinstance(changes, Mapping):
            msg = f"Change set must be a mapping, got {describe_runtime_type(changes)}"
            raise TypeError(msg)
        merged.update(changes)
    merged.update(overrides)
    return merged


def mutate_record(source: Any, changes: ChangeSet) -> Any:
    """Return a copy of ``source`` with ``changes`` validated and applied.

    Every non-static field is either taken from ``changes`` (after type
    validation), copied from ``source`` or left unset when ``source`` never set
    it. Unknown names are reported only after all known fields have been
    validated, so a type mismatch always wins over an unknown field.

    Raises:
        TypeMismatchError: a proposed value does not fit its field's type.
        PropertyDoesNotExistError: a change names a field the shape lacks.
        UnsupportedTypeError: ``source`` has no reflectable shape.
    """

    shape = reflect(source)
    if shape is None:
        raise UnsupportedTypeError(describe_runtime_type(source))

    values: dict[str, Any] = {}
    for descriptor in shape.instance_fields():
        name = descriptor.name
        if name in changes:
            values[name] = validate(descriptor, changes[name])
        elif descriptor.is_initialized:
            values[name] = shape.current[name]

    for name in changes:
        if not shape.has_field(name):
            raise PropertyDoesNotExistError(str(name), shape.identity)

    return shape.assemble(values, frozenset(name for name in changes if name in values))


def _overlay_sequence(source: Sequence[Any], changes: ChangeSet) -> Sequence[Any]:
    result = copy.copy(source) if isinstance(source, list) else list(source)
    for key, value in changes.items():
        if isinstance(key, bool) or not isinstance(key, int) or not 0 <= key < len(result):
            raise PropertyDoesNotExistError(str(key), type_name(type(source)))
        result[key] = value
    if isinstance(source, list):
        return result
    return type(source)(result)


def mutate_map(source: Mapping[Any, Any] | Sequence[Any], changes: ChangeSet) -> Any:
    """Overlay ``changes`` onto a copy of ``source``.

    Keys keep their identity: ``{0: "x"}`` replaces the entry at key ``0``.
    ``dict`` subclasses keep their class, read-only proxies stay read-only and
    any other mapping becomes a plain ``dict``. Mappings never fail.

    Lists and tuples are treated as maps keyed by index. They are the one
    exception: a key that is not an existing index raises
    ``PropertyDoesNotExistError``, since a sequence cannot hold sparse keys.
    """

    if isinstance(source, (list, tuple)):
        return _overlay_sequence(source, changes)
    if isinstance(source, dict):
        result = copy.copy(source)
        result.update(changes)
        return result
    if isinstance(source, MappingProxyType):
        return MappingProxyType({**source, **changes})
    return {**source, **changes}


__all__ = ["ChangeSet", "merge_changes", "mutate_map", "mutate_record"]
