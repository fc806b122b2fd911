"""Declared-type descriptors derived from field annotations."""

from __future__ import annotations

from collections import abc
from dataclasses import dataclass
from enum import StrEnum
from types import NoneType, UnionType
from typing import (
    Annotated,
    Any,
    ForwardRef,
    Literal,
    NewType,
    TypeVar,
    Union,
    get_args,
    get_origin,
    is_typeddict,
)


class TypeKind(StrEnum):
    """Categories the validator distinguishes."""

    INT = "int"
    FLOAT = "float"
    STRING = "str"
    BOOL = "bool"
    ARRAY = "array"
    OBJECT = "object"
    MIXED = "mixed"
    CLASS = "class"
    UNION = "union"


_SCALAR_KINDS: dict[type, TypeKind] = {
    int: TypeKind.INT,
    float: TypeKind.FLOAT,
    str: TypeKind.STRING,
    bool: TypeKind.BOOL,
}

_ARRAY_TYPES: frozenset[type] = frozenset(
    {
        list,
        tuple,
        dict,
        set,
        frozenset,
        abc.Sequence,
        abc.MutableSequence,
        abc.Mapping,
        abc.MutableMapping,
        abc.Set,
        abc.MutableSet,
    }
)


@dataclass(frozen=True, slots=True)
class TypeSpec:
    """Validation target for a single field."""

    kind: TypeKind
    name: str
    target: type | None = None

    @property
    def skips_validation(self) -> bool:
        return self.kind is TypeKind.UNION


def type_name(annotation: Any) -> str:
    """Human readable name for a class or typing construct."""

    if isinstance(annotation, type) and get_origin(annotation) is None:
        if annotation.__module__ == "builtins":
            return annotation.__qualname__
        return f"{annotation.__module__}.{annotation.__qualname__}"
    return repr(annotation).replace("typing.", "")


def _is_static_protocol(cls: type) -> bool:
    return bool(getattr(cls, "_is_protocol", False)) and not getattr(
        cls, "_is_runtime_protocol", False
    )


def _supports_instance_checks(cls: type) -> bool:
    try:
        isinstance(None, cls)
    except TypeError:
        return False
    return True


def resolve_annotation(annotation: Any) -> tuple[TypeSpec | None, bool]:
    """Translate a resolved annotation into ``(spec, nullable)``.

    A ``None`` spec means the annotation carries no checkable constraint:
    unresolved forward references, type variables and typing constructs the
    validator does not model.
    """

    if isinstance(annotation, (str, ForwardRef, TypeVar)):
        return None, False
    if annotation is Any:
        return TypeSpec(TypeKind.MIXED, "mixed"), True
    if isinstance(annotation, NewType):
        return resolve_annotation(annotation.__supertype__)

    origin = get_origin(annotation)
    if origin is Annotated:
        return resolve_annotation(get_args(annotation)[0])
    if origin is Union or origin is UnionType:
        args = get_args(annotation)
        members = [arg for arg in args if arg is not NoneType]
        nullable = len(members) != len(args)
        if nullable and len(members) == 1:
            spec, _ = resolve_annotation(members[0])
            return spec, True
        return TypeSpec(TypeKind.UNION, type_name(annotation)), nullable
    if origin is Literal:
        return TypeSpec(TypeKind.UNION, type_name(annotation)), None in get_args(annotation)

    cls = origin if origin is not None else annotation
    if not isinstance(cls, type):
        return None, False
    name = type_name(annotation)
    if cls is object:
        return TypeSpec(TypeKind.OBJECT, name, object), False
    if origin is None and cls in _SCALAR_KINDS:
        return TypeSpec(_SCALAR_KINDS[cls], name, cls), False
    if cls in _ARRAY_TYPES:
        return TypeSpec(TypeKind.ARRAY, name, cls), False
    if is_typeddict(cls):
        return TypeSpec(TypeKind.ARRAY, name, dict), False
    if _is_static_protocol(cls) or not _supports_instance_checks(cls):
        # Structural protocols and classes refusing isinstance cannot be checked nominally.
        return TypeSpec(TypeKind.UNION, name), False
    return TypeSpec(TypeKind.CLASS, name, cls), cls is NoneType


__all__ = ["TypeKind", "TypeSpec", "resolve_annotation", "type_name"]
