"""Self-mutation capability."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, Self, runtime_checkable

from .mutator import merge_changes, mutate_record


@runtime_checkable
class Mutable(Protocol):
    """Values that know how to produce a modified copy of themselves.

    The dispatcher prefers this capability over reflection when present.
    """

    def mutate(self, changes: Mapping[str, Any], /) -> Self: ...


class Immutable:
    """Mixin adding a validated ``mutate`` to any record class.

    ```python
    @dataclass(frozen=True)
    class UserData(Immutable):
        name: str
        age: int

    user = UserData("John", 30)
    older = user.mutate(age=31)  # user.age is still 30
    ```
    """

    __slots__ = ()

    def mutate(self, changes: Mapping[str, Any] | None = None, /, **overrides: Any) -> Self:
        """Return a new instance with the given fields replaced."""

        result: Self = mutate_record(self, merge_changes(changes, overrides))
        return result


__all__ = ["Immutable", "Mutable"]
