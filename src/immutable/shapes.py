"""Reflection over record shapes.

A shape is the fixed set of named fields a record class declares. Shapes are
recomputed on every mutation: the descriptors capture the source instance's
initialization state, so they are never cached.

Supported record kinds, in lookup order:

* pydantic models (``model_fields``, ``__class_vars__``, extras, private attributes)
* named tuples (``_fields``)
* dataclasses (``dataclasses.fields`` plus ``ClassVar`` annotations)
* plain classes (annotations across the MRO, ``__slots__`` and instance ``__dict__``)
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import BuiltinFunctionType, FunctionType, MethodType, ModuleType
from typing import Any, ClassVar, get_origin, get_type_hints

from pydantic import BaseModel

from .exceptions import UnsupportedTypeError
from .types import TypeSpec, resolve_annotation, type_name

_MISSING: Any = object()

_OPAQUE_TYPES = (
    type,
    ModuleType,
    FunctionType,
    BuiltinFunctionType,
    MethodType,
    Enum,
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
)

Assembler = Callable[[Mapping[str, Any], frozenset[str]], Any]


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Per-field metadata used while mutating a single record."""

    name: str
    declared_type: TypeSpec | None = None
    nullable: bool = False
    is_static: bool = False
    is_initialized: bool = False


@dataclass(frozen=True, slots=True)
class RecordShape:
    """Reflected view of one record instance."""

    identity: str
    fields: tuple[FieldDescriptor, ...]
    current: Mapping[str, Any]
    assembler: Assembler

    def has_field(self, name: str) -> bool:
        return any(descriptor.name == name for descriptor in self.fields)

    def instance_fields(self) -> Iterable[FieldDescriptor]:
        return (descriptor for descriptor in self.fields if not descriptor.is_static)

    def assemble(self, values: Mapping[str, Any], changed: frozenset[str]) -> Any:
        """Build a new instance of the record's class from ``values``."""

        return self.assembler(values, changed)


def is_opaque(value: Any) -> bool:
    """True for scalars, enum members, classes, modules and callables."""

    return value is None or isinstance(value, _OPAQUE_TYPES)


def _is_class_var(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return False


def _evaluate(annotation: Any, globalns: dict[str, Any], localns: dict[str, Any]) -> Any:
    if not isinstance(annotation, str):
        return annotation
    try:
        # Same evaluation typing.get_type_hints applies to string annotations.
        return eval(annotation, globalns, localns)  # noqa: S307
    except (NameError, AttributeError, TypeError, SyntaxError):
        return annotation


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls)
    except (NameError, TypeError):
        # Resolve field by field so only unresolvable annotations lose their constraint.
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            module = sys.modules.get(klass.__module__)
            globalns = dict(vars(module)) if module is not None else {}
            localns = dict(vars(klass))
            for name, annotation in inspect.get_annotations(klass).items():
                hints[name] = _evaluate(annotation, globalns, localns)
        return hints


def _declared_slots(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in {"__dict__", "__weakref__"} or name in names:
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{klass.__name__.lstrip('_')}{name}"
            names.append(name)
    return names


def _describe(
    name: str,
    annotation: Any,
    current: Mapping[str, Any],
    *,
    static: bool = False,
) -> FieldDescriptor:
    spec, nullable = (None, False) if annotation is _MISSING else resolve_annotation(annotation)
    return FieldDescriptor(
        name=name,
        declared_type=spec,
        nullable=nullable,
        is_static=static,
        is_initialized=name in current,
    )


def _allocate(cls: type) -> Any:
    try:
        return cls.__new__(cls)
    except TypeError as exc:
        raise UnsupportedTypeError(type_name(cls)) from exc


def _assemble_attributes(cls: type) -> Assembler:
    def assemble(values: Mapping[str, Any], changed: frozenset[str]) -> Any:
        clone = _allocate(cls)
        for name, value in values.items():
            object.__setattr__(clone, name, value)
        return clone

    return assemble


def _reflect_model(source: BaseModel) -> RecordShape:
    cls = type(source)
    model_fields = cls.model_fields
    extra = getattr(source, "__pydantic_extra__", None)
    private = getattr(source, "__pydantic_private__", None)

    current: dict[str, Any] = {}
    for name in model_fields:
        if name in source.__dict__:
            current[name] = source.__dict__[name]
    current.update(extra or {})
    current.update(private or {})

    fields = [_describe(name, info.annotation, current) for name, info in model_fields.items()]
    fields.extend(_describe(name, _MISSING, current) for name in (extra or {}))
    fields.extend(_describe(name, _MISSING, current) for name in cls.__private_attributes__)
    fields.extend(
        _describe(name, _MISSING, current, static=True) for name in sorted(cls.__class_vars__)
    )

    def assemble(values: Mapping[str, Any], changed: frozenset[str]) -> Any:
        # Same slots pydantic's own __copy__ populates, without running validators.
        clone = _allocate(cls)
        field_values = {name: values[name] for name in model_fields if name in values}
        extra_values = None
        if extra is not None:
            extra_values = {name: values[name] for name in extra if name in values}
        private_values = None
        if private is not None:
            private_values = {
                name: values[name] for name in cls.__private_attributes__ if name in values
            }
        fields_set = set(source.model_fields_set)
        fields_set.update(name for name in changed if name in model_fields)
        if extra_values is not None:
            fields_set.update(name for name in changed if name in extra_values)
        object.__setattr__(clone, "__dict__", field_values)
        object.__setattr__(clone, "__pydantic_extra__", extra_values)
        object.__setattr__(clone, "__pydantic_fields_set__", fields_set)
        object.__setattr__(clone, "__pydantic_private__", private_values)
        return clone

    return RecordShape(type_name(cls), tuple(fields), current, assemble)


def _reflect_named_tuple(source: tuple[Any, ...]) -> RecordShape:
    cls = type(source)
    names: tuple[str, ...] = cls._fields  # type: ignore[attr-defined]
    hints = _type_hints(cls)
    current = dict(zip(names, source, strict=True))
    fields = tuple(_describe(name, hints.get(name, _MISSING), current) for name in names)

    def assemble(values: Mapping[str, Any], changed: frozenset[str]) -> Any:
        return cls._make(values[name] for name in names)  # type: ignore[attr-defined]

    return RecordShape(type_name(cls), fields, current, assemble)


def _instance_values(source: Any, names: Iterable[str]) -> dict[str, Any]:
    current: dict[str, Any] = {}
    for name in names:
        value = getattr(source, name, _MISSING)
        if value is not _MISSING:
            current[name] = value
    return current


def _reflect_dataclass(source: Any) -> RecordShape:
    cls = type(source)
    hints = _type_hints(cls)
    declared = {field.name: hints.get(field.name, field.type) for field in dataclasses.fields(cls)}
    dynamic = [name for name in getattr(source, "__dict__", {}) if name not in declared]
    current = _instance_values(source, [*declared, *dynamic])

    fields = [_describe(name, annotation, current) for name, annotation in declared.items()]
    fields.extend(_describe(name, _MISSING, current) for name in dynamic)
    fields.extend(
        _describe(name, annotation, {}, static=True)
        for name, annotation in hints.items()
        if _is_class_var(annotation)
    )
    return RecordShape(type_name(cls), tuple(fields), current, _assemble_attributes(cls))


def _reflect_object(source: Any) -> RecordShape:
    cls = type(source)
    hints = _type_hints(cls)
    statics = [name for name, annotation in hints.items() if _is_class_var(annotation)]
    declared: dict[str, Any] = {
        name: annotation for name, annotation in hints.items() if name not in statics
    }
    for name in _declared_slots(cls):
        declared.setdefault(name, _MISSING)
    for name in getattr(source, "__dict__", {}):
        declared.setdefault(name, _MISSING)
    current = _instance_values(source, declared)

    fields = [_describe(name, annotation, current) for name, annotation in declared.items()]
    fields.extend(_describe(name, hints[name], {}, static=True) for name in statics)
    return RecordShape(type_name(cls), tuple(fields), current, _assemble_attributes(cls))


def is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def reflect(value: Any) -> RecordShape | None:
    """Return the shape of ``value`` or ``None`` when it is not a reflectable record."""

    if is_opaque(value):
        return None
    if isinstance(value, BaseModel):
        return _reflect_model(value)
    if is_named_tuple(value):
        return _reflect_named_tuple(value)
    if dataclasses.is_dataclass(value):
        return _reflect_dataclass(value)
    if hasattr(value, "__dict__") or _declared_slots(type(value)):
        return _reflect_object(value)
    return None


__all__ = ["FieldDescriptor", "RecordShape", "is_named_tuple", "is_opaque", "reflect"]
