from __future__ import annotations

from collections import OrderedDict, defaultdict
from datetime import datetime, timedelta
from types import MappingProxyType, SimpleNamespace

import pytest
from sample_records import (
    ClassTypedGenericObject,
    Color,
    GenericObject,
    Invoice,
    Message,
    OperationData,
    OperationStatus,
    Reading,
    SelfMutating,
    Tagged,
    UnionTypeGenericObject,
    UntypedObject,
    UserData,
)

from immutable import (
    MutationBuilder,
    PropertyDoesNotExistError,
    TypeMismatchError,
    UnsupportedTypeError,
    begin,
    mutate,
)


def test_mutate_map_overlays_changes() -> None:
    original = {"name": "John", "age": 30}

    updated = mutate(original, {"age": 31})

    assert updated == {"name": "John", "age": 31}
    assert original == {"name": "John", "age": 30}


def test_mutate_map_adds_keys_and_handles_empty_maps() -> None:
    assert mutate({"a": 1, "b": 2}, {"c": 3}) == {"a": 1, "b": 2, "c": 3}
    assert mutate({}, {"a": 1}) == {"a": 1}


def test_mutate_map_replaces_nested_values_wholesale() -> None:
    original = {"user": {"name": "John", "age": 30}}

    updated = mutate(original, {"user": {"name": "Jane"}})

    assert updated["user"] == {"name": "Jane"}
    assert original["user"] == {"name": "John", "age": 30}


def test_mutate_map_numeric_keys_replace_instead_of_insert() -> None:
    assert mutate({0: 1, 1: 2, 2: 3}, {0: 10}) == {0: 10, 1: 2, 2: 3}
    assert mutate([1, 2, 3], {0: 10}) == [10, 2, 3]
    assert mutate((1, 2, 3), {2: 30}) == (1, 2, 30)


def test_mutate_sequence_rejects_missing_index() -> None:
    original = [1, 2, 3]

    with pytest.raises(PropertyDoesNotExistError) as excinfo:
        mutate(original, {3: 4})

    assert excinfo.value.shape == "list"
    assert original == [1, 2, 3]


def test_mutate_map_preserves_mapping_flavour() -> None:
    ordered = OrderedDict([("b", 1), ("a", 2)])
    counts: defaultdict[str, int] = defaultdict(int, {"x": 1})
    proxy = MappingProxyType({"k": "v"})

    assert isinstance(mutate(ordered, {"a": 3}), OrderedDict)
    assert list(mutate(ordered, {"c": 0})) == ["b", "a", "c"]
    bumped = mutate(counts, {"y": 2})
    assert isinstance(bumped, defaultdict)
    assert bumped["missing"] == 0
    assert "missing" not in counts
    overlaid = mutate(proxy, {"k": "w"})
    assert isinstance(overlaid, MappingProxyType)
    assert overlaid["k"] == "w"
    assert proxy["k"] == "v"


def test_map_overlay_is_idempotent() -> None:
    changes = {"age": 31, "email": "john@example.com"}
    once = mutate({"name": "John", "age": 30}, changes)

    assert mutate(once, changes) == once


def test_mutate_delegates_to_mixin() -> None:
    user = UserData(name="John", email="john@example.com", age=30)

    updated = mutate(user, {"age": 31})

    assert isinstance(updated, UserData)
    assert updated.age == 31
    assert user.age == 30


def test_mutate_prefers_value_own_mutate() -> None:
    value = SelfMutating(1)

    updated = mutate(value, value=2)

    assert isinstance(updated, SelfMutating)
    assert updated.value == 2
    assert updated.received == {"value": 2}
    assert value.value == 1


def test_mutate_generic_dataclass() -> None:
    obj = GenericObject("test", 42, "optional")

    updated = mutate(obj, {"value": 100})

    assert isinstance(updated, GenericObject)
    assert updated.value == 100
    assert updated.name == "test"
    assert updated.optional == "optional"
    assert obj.value == 42


def test_mutate_nullable_field_to_value_and_back() -> None:
    obj = GenericObject("test", 42)

    assert mutate(obj, {"optional": "now set"}).optional == "now set"
    assert mutate(GenericObject("test", 42, "value"), {"optional": None}).optional is None


def test_mutate_untyped_object_accepts_anything() -> None:
    obj = UntypedObject("test", 42)

    updated = mutate(obj, {"value": "string now"})

    assert updated.value == "string now"
    assert obj.value == 42


def test_mutate_namespace_assigns_new_attributes() -> None:
    bag = SimpleNamespace(name="John", age=30)

    updated = mutate(bag, {"age": 31, "email": "john@example.com"})

    assert isinstance(updated, SimpleNamespace)
    assert updated == SimpleNamespace(name="John", age=31, email="john@example.com")
    assert bag == SimpleNamespace(name="John", age=30)


def test_mutate_union_field_skips_validation() -> None:
    obj = UnionTypeGenericObject(value="string")

    assert mutate(obj, {"value": 123}).value == 123


def test_mutate_class_typed_field(now: datetime) -> None:
    later = now + timedelta(days=1)
    obj = ClassTypedGenericObject(name="test", created_at=now)

    assert mutate(obj, {"created_at": later}).created_at == later
    with pytest.raises(TypeMismatchError):
        mutate(obj, {"created_at": "tomorrow"})


def test_cancel_operation_scenario(operation: OperationData, now: datetime) -> None:
    cancelled = mutate(
        operation,
        {"status": OperationStatus.CANCELLED, "cancelled_at": now},
    )

    assert cancelled.status is OperationStatus.CANCELLED
    assert cancelled.cancelled_at == now
    assert cancelled.id == "op-123"
    assert cancelled.function == "process"
    assert cancelled.version == "1.0.0"
    assert cancelled.progress == 50
    assert cancelled.metadata == {"key": "value"}
    assert operation.status is OperationStatus.RUNNING
    assert operation.cancelled_at is None


def test_mutate_rejects_unknown_field() -> None:
    obj = GenericObject("test", 42)

    with pytest.raises(PropertyDoesNotExistError) as excinfo:
        mutate(obj, {"ghost": 1})

    assert excinfo.value.field == "ghost"
    assert excinfo.value.shape.endswith("GenericObject")


def test_mutate_rejects_type_mismatch_without_touching_source() -> None:
    obj = GenericObject("test", 42)

    with pytest.raises(TypeMismatchError):
        mutate(obj, {"value": "not an int"})

    assert obj.value == 42


def test_type_mismatch_reported_before_unknown_field() -> None:
    obj = GenericObject("test", 42)

    with pytest.raises(TypeMismatchError):
        mutate(obj, {"ghost": 1, "value": "thirty"})


@pytest.mark.parametrize(
    "value",
    [
        None,
        42,
        1.5,
        "text",
        b"bytes",
        True,
        GenericObject,
        len,
        object(),
        datetime.now(),
        Color.RED,
        Tagged("x"),
    ],
)
def test_mutate_rejects_unsupported_values(value: object) -> None:
    with pytest.raises(UnsupportedTypeError):
        mutate(value, {})


def test_mutate_rejects_non_mapping_change_set() -> None:
    with pytest.raises(TypeError):
        mutate({"a": 1}, [("a", 2)])  # type: ignore[arg-type]


def test_mutate_keyword_changes_override_positional() -> None:
    assert mutate({"a": 1}, {"a": 2}, a=3) == {"a": 3}


def test_begin_returns_builder() -> None:
    assert isinstance(begin({"name": "John"}), MutationBuilder)


def test_builder_chains_with_and_set() -> None:
    result = (
        begin({"a": 1, "b": 2, "c": 3})
        .set("a", 10)
        .with_({"b": 20})
        .with_(c=30)
        .commit()
    )

    assert result == {"a": 10, "b": 20, "c": 30}


def test_builder_last_write_wins() -> None:
    builder = begin({"name": "John"}).set("name", "Jane").set("name", "Bob")

    assert builder.pending == {"name": "Bob"}
    assert builder.commit() == {"name": "Bob"}


def test_builder_commit_replays_independently() -> None:
    source = GenericObject("test", 42)
    builder = begin(source).set("value", 7)

    first = builder.commit()
    second = builder.set("value", 8).commit()

    assert first.value == 7
    assert second.value == 8
    assert first is not second
    assert builder.value is source


def test_builder_type_failures_surface_on_commit() -> None:
    builder = begin(UserData(name="John", email="john@example.com", age=30)).set("age", "old")

    with pytest.raises(TypeMismatchError):
        builder.commit()


def test_typed_dict_field_is_checked_as_mapping() -> None:
    message = Message(body={"a": 1})

    updated = mutate(message, {"body": {"a": 2}})

    assert updated.body == {"a": 2}
    assert message.body == {"a": 1}
    with pytest.raises(TypeMismatchError):
        mutate(message, {"body": [("a", 2)]})


def test_unresolvable_annotation_only_opens_its_own_field() -> None:
    invoice = Invoice(name="rent", amount=100)  # type: ignore[arg-type]

    with pytest.raises(TypeMismatchError):
        mutate(invoice, {"name": 123})
    assert mutate(invoice, {"amount": "100.00"}).amount == "100.00"


def test_float_widening_overflow_is_a_type_mismatch() -> None:
    reading = Reading(1.0)

    with pytest.raises(TypeMismatchError) as excinfo:
        mutate(reading, {"value": 10**400})

    assert excinfo.value.field == "value"
    assert reading.value == 1.0
