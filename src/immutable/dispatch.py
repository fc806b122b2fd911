"""Entry points routing a value to the right mutation strategy."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from types import MappingProxyType, SimpleNamespace
from typing import Any

from .contracts import Mutable
from .exceptions import UnsupportedTypeError
from .mutator import ChangeSet, merge_changes, mutate_map, mutate_record
from .shapes import is_named_tuple, is_opaque
from .validation import describe_runtime_type

logger = logging.getLogger(__name__)


def is_map(value: Any) -> bool:
    """True for values handled by the map mutator."""

    if isinstance(value, Mapping):
        return True
    return isinstance(value, (list, tuple)) and not is_named_tuple(value)


def _mutate_namespace(value: SimpleNamespace, changes: ChangeSet) -> SimpleNamespace:
    clone = copy.copy(value)
    for name, new_value in changes.items():
        setattr(clone, name, new_value)
    return clone


def apply(value: Any, changes: ChangeSet) -> Any:
    """Mutate ``value`` with an already merged change set."""

    if is_map(value):
        logger.debug("Overlaying %d change(s) onto %s", len(changes), type(value).__name__)
        return mutate_map(value, changes)
    if is_opaque(value):
        raise UnsupportedTypeError(describe_runtime_type(value))
    if isinstance(value, Mutable):
        logger.debug("Delegating mutation to %s.mutate", type(value).__name__)
        return value.mutate(changes)
    if isinstance(value, SimpleNamespace):
        logger.debug("Assigning %d attribute(s) onto namespace clone", len(changes))
        return _mutate_namespace(value, changes)
    logger.debug("Reflecting %s for record mutation", type(value).__name__)
    return mutate_record(value, changes)


class MutationBuilder:
    """Accumulates pending changes for one value until ``commit``.

    The builder is a mutable accumulator and is not safe to share between
    threads. Committing never touches earlier results, so it may be repeated.
    """

    def __init__(self, value: Any) -> None:
        self._value = value
        self._pending: dict[Any, Any] = {}

    @property
    def value(self) -> Any:
        return self._value

    @property
    def pending(self) -> Mapping[Any, Any]:
        return MappingProxyType(dict(self._pending))

    def with_(self, changes: ChangeSet | None = None, /, **overrides: Any) -> MutationBuilder:
        """Merge a partial change set, later names override earlier ones."""

        self._pending.update(merge_changes(changes, overrides))
        return self

    def set(self, name: Any, value: Any) -> MutationBuilder:
        self._pending[name] = value
        return self

    def commit(self) -> Any:
        return apply(self._value, dict(self._pending))

    def __repr__(self) -> str:
        return f"MutationBuilder({type(self._value).__name__}, pending={sorted(map(str, self._pending))})"


def begin(value: Any) -> MutationBuilder:
    """Start a chained mutation of ``value``."""

    return MutationBuilder(value)


def mutate(value: Any, changes: ChangeSet | None = None, /, **overrides: Any) -> Any:
    """Return a modified copy of ``value``; the original is never changed.

    ```python
    mutate({"name": "John", "age": 30}, {"age": 31})
    mutate(user, age=31)
    ```
    """

    return begin(value).with_(changes, **overrides).commit()


__all__ = ["MutationBuilder", "apply", "begin", "is_map", "mutate"]
