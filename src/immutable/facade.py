"""Accessor registry exposing the engine under global names."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .dispatch import MutationBuilder, begin, mutate
from .mutator import ChangeSet


class Mutator:
    """Stateless service wrapping the dispatcher for host integrations."""

    def mutate(self, value: Any, changes: ChangeSet | None = None, /, **overrides: Any) -> Any:
        return mutate(value, changes, **overrides)

    def begin(self, value: Any) -> MutationBuilder:
        return begin(value)


@dataclass(slots=True)
class AccessorRegistry:
    """Runtime registry mapping accessor names to engine services."""

    _services: dict[str, Mutator] = field(default_factory=dict)

    def register(self, name: str, service: Mutator, *, override: bool = False) -> None:
        if not override and name in self._services:
            msg = f"Accessor {name!r} already registered"
            raise ValueError(msg)
        self._services[name] = service

    def get(self, name: str) -> Mutator:
        try:
            return self._services[name]
        except KeyError as exc:
            msg = f"Unknown accessor {name!r}"
            raise KeyError(msg) from exc

    def names(self) -> Iterable[str]:
        return tuple(self._services)


DEFAULT_ACCESSOR = "mutator"

registry = AccessorRegistry()
registry.register(DEFAULT_ACCESSOR, Mutator())


def register_accessor(name: str, service: Mutator, *, override: bool = False) -> None:
    """Register a service on the global registry."""

    registry.register(name, service, override=override)


def resolve(name: str = DEFAULT_ACCESSOR) -> Mutator:
    """Look up a service on the global registry."""

    return registry.get(name)


__all__ = [
    "DEFAULT_ACCESSOR",
    "AccessorRegistry",
    "Mutator",
    "register_accessor",
    "registry",
    "resolve",
]
