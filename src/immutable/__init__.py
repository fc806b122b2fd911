"""Type-checked copy-with-modifications for mappings and records."""

from .contracts import Immutable, Mutable
from .dispatch import MutationBuilder, begin, mutate
from .exceptions import (
    MutationError,
    PropertyDoesNotExistError,
    ReadOnlyPropertyError,
    TypeMismatchError,
    UnsupportedTypeError,
)
from .facade import AccessorRegistry, Mutator, register_accessor, registry, resolve
from .mutator import mutate_map, mutate_record
from .shapes import FieldDescriptor, RecordShape, reflect
from .types import TypeKind, TypeSpec
from .validation import describe_runtime_type, validate

__all__ = [
    "AccessorRegistry",
    "FieldDescriptor",
    "Immutable",
    "Mutable",
    "MutationBuilder",
    "MutationError",
    "Mutator",
    "PropertyDoesNotExistError",
    "ReadOnlyPropertyError",
    "RecordShape",
    "TypeKind",
    "TypeMismatchError",
    "TypeSpec",
    "UnsupportedTypeError",
    "begin",
    "describe_runtime_type",
    "mutate",
    "mutate_map",
    "mutate_record",
    "reflect",
    "register_accessor",
    "registry",
    "resolve",
    "validate",
]
