from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Annotated, Any, Literal, NewType, Optional, Protocol, TypeVar, Union, runtime_checkable

import pytest

from ctxwire._internal.type_checks import is_assignable, is_runtime_class


class Animal:
    pass


class Dog(Animal):
    pass


class Named(Protocol):
    name: str


@runtime_checkable
class Closeable(Protocol):
    def close(self) -> None: ...


class Door:
    def close(self) -> None:
        pass


UserId = NewType("UserId", int)
AnimalT = TypeVar("AnimalT", bound=Animal)
ScalarT = TypeVar("ScalarT", int, str)
AnyT = TypeVar("AnyT")


@pytest.mark.parametrize(
    ("value", "declared", "expected"),
    [
        (Dog(), Animal, True),
        (Animal(), Dog, False),
        (1, int, True),
        (True, int, True),
        ("1", int, False),
        (1, Any, True),
        (1, object, True),
        (1, Optional[int], True),
        ("x", Optional[int], False),
        ("x", Union[int, str], True),
        ("x", int | str, True),
        (b"x", int | str, False),
        ([1], list[int], True),
        ((1,), list[int], False),
        ([1], Sequence[int], True),
        (len, Callable[..., int], True),
        (1, Callable[..., int], False),
        ("a", Literal["a", "b"], True),
        ("c", Literal["a", "b"], False),
        (Dog, type[Animal], True),
        (int, type[Animal], False),
        (Dog(), type[Animal], False),
        (Dog(), AnimalT, True),
        (1, AnimalT, False),
        ("x", ScalarT, True),
        (1.0, ScalarT, False),
        (object(), AnyT, True),
        (5, UserId, True),
        ("5", UserId, False),
        (1, Annotated[int, "meta"], True),
        ("1", Annotated[int, "meta"], False),
        (Door(), Closeable, True),
        (1, Closeable, False),
        (1, Named, True),
        (1, "UnresolvedName", True),
        (1, type(None), False),
        (1, None, False),
    ],
)
def test_is_assignable(value: object, declared: Any, expected: bool) -> None:
    assert is_assignable(value, declared) is expected


@pytest.mark.parametrize("declared", [int, type(None), Any, "Name", list[int], Optional[int]])
def test_none_is_always_assignable(declared: Any) -> None:
    assert is_assignable(None, declared) is True


def test_is_runtime_class() -> None:
    assert is_runtime_class(int) is True
    assert is_runtime_class(list[int]) is False
    assert is_runtime_class("int") is False
