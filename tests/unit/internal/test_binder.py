import logging
from dataclasses import dataclass
from typing import Any, Optional

import pytest

from ctxwire._internal.binder import Binder
from ctxwire._internal.members import MemberClassifier, MemberDescriptor, MemberKind, MemberRole


class Logger:
    pass


class _Target:
    di_log: Optional[Logger] = None
    di_count: int = 0

    def __init__(self) -> None:
        self.received: list[Any] = []

    def set_log(self, log: Optional[Logger]) -> None:
        self.received.append(log)

    def set_broken(self, value: object) -> None:
        msg = "setter exploded"
        raise RuntimeError(msg)


@dataclass(frozen=True)
class _Frozen:
    di_log: Optional[Logger] = None


class _ReadOnly:
    __slots__ = ("__weakref__", "di_log")

    def __setattr__(self, name: str, value: object) -> None:
        msg = f"{name} is read-only"
        raise AttributeError(msg)


class _Immutable:
    __slots__ = ("__weakref__",)
    di_log: Optional[Logger]


class _Hooked:
    def __init__(self) -> None:
        self.calls = 0

    def start(self) -> None:
        self.calls += 1

    def fail(self) -> None:
        msg = "hook exploded"
        raise ValueError(msg)


def _member(cls: type, name: str) -> MemberDescriptor:
    members = MemberClassifier().classify(cls, additive=True)
    return next(member for member in members if member.name == name)


def _hook(cls: type, name: str) -> MemberDescriptor:
    return MemberDescriptor(
        owner=cls,
        name=name,
        kind=MemberKind.SETTER,
        key=None,
        role=MemberRole.POST_CONSTRUCT,
        function=vars(cls)[name],
    )


def test_bind_field_writes_value(binder: Binder) -> None:
    target = _Target()
    logger = Logger()

    assert binder.bind(target, _member(_Target, "di_log"), logger) is True
    assert target.di_log is logger


def test_bind_field_with_none_unbinds(binder: Binder) -> None:
    target = _Target()
    target.di_log = Logger()

    assert binder.bind(target, _member(_Target, "di_log"), None) is True
    assert target.di_log is None


def test_bind_field_accepts_none_even_for_non_optional_types(binder: Binder) -> None:
    target = _Target()

    assert binder.bind(target, _member(_Target, "di_count"), None) is True
    assert target.di_count is None


def test_bind_field_skips_incompatible_value(binder: Binder) -> None:
    target = _Target()

    assert binder.bind(target, _member(_Target, "di_count"), "many") is False
    assert target.di_count == 0


def test_bind_setter_invokes_with_single_argument(binder: Binder) -> None:
    target = _Target()
    logger = Logger()

    assert binder.bind(target, _member(_Target, "set_log"), logger) is True
    assert binder.bind(target, _member(_Target, "set_log"), None) is True
    assert target.received == [logger, None]


def test_bind_setter_skips_incompatible_value(binder: Binder) -> None:
    target = _Target()

    assert binder.bind(target, _member(_Target, "set_log"), 42) is False
    assert target.received == []


def test_bind_setter_failure_is_logged_and_skipped(
    binder: Binder,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING, logger="ctxwire")

    assert binder.bind(_Target(), _member(_Target, "set_broken"), 1) is False
    assert "Injection failed for _Target.set_broken" in caplog.text
    assert "setter exploded" in caplog.text


def test_bind_setter_without_single_parameter_is_skipped(binder: Binder) -> None:
    def set_pair(self: object, first: int, second: int) -> None:
        raise AssertionError

    member = MemberDescriptor(
        owner=_Target,
        name="set_pair",
        kind=MemberKind.SETTER,
        key="pair",
        function=set_pair,
    )

    assert binder.bind(_Target(), member, 1) is False


def test_bind_field_of_frozen_dataclass(binder: Binder) -> None:
    target = _Frozen()
    logger = Logger()

    assert binder.bind(target, _member(_Frozen, "di_log"), logger) is True
    assert target.di_log is logger


def test_bind_field_bypasses_refusing_setattr(binder: Binder) -> None:
    target = _ReadOnly()
    logger = Logger()

    assert binder.bind(target, _member(_ReadOnly, "di_log"), logger) is True
    assert target.di_log is logger


def test_bind_field_without_storage_is_logged_and_skipped(
    binder: Binder,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING, logger="ctxwire")

    assert binder.bind(_Immutable(), _member(_Immutable, "di_log"), Logger()) is False
    assert "Injection failed for _Immutable.di_log" in caplog.text


def test_invoke_hook_calls_without_arguments(binder: Binder) -> None:
    target = _Hooked()

    assert binder.invoke_hook(target, _hook(_Hooked, "start")) is True
    assert target.calls == 1


def test_invoke_hook_failure_is_logged_and_swallowed(
    binder: Binder,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING, logger="ctxwire")

    assert binder.invoke_hook(_Hooked(), _hook(_Hooked, "fail")) is False
    assert "Post-construct hook _Hooked.fail failed" in caplog.text
