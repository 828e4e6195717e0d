from __future__ import annotations

import gc
import weakref

import pytest

from ctxwire._internal.registry import TrackedTargetSet, make_weak_ref
from ctxwire.exceptions import CtxWireInvalidArgumentError


class _Target:
    pass


class _Slotted:
    __slots__ = ("value",)


def test_new_set_is_empty() -> None:
    targets = TrackedTargetSet()

    assert targets.is_empty() is True
    assert len(targets) == 0
    assert targets.snapshot() == ()


def test_snapshot_returns_live_targets_in_insertion_order() -> None:
    targets = TrackedTargetSet()
    first, second = _Target(), _Target()

    targets.add(first)
    targets.add(second)

    assert targets.snapshot() == (first, second)
    assert targets.is_empty() is False


def test_add_does_not_keep_target_alive() -> None:
    targets = TrackedTargetSet()
    target = _Target()
    ref = weakref.ref(target)
    targets.add(target)

    del target
    gc.collect()

    assert ref() is None


def test_dead_entries_are_pruned_lazily_on_snapshot() -> None:
    targets = TrackedTargetSet()
    survivor, doomed = _Target(), _Target()
    targets.add(doomed)
    targets.add(survivor)

    del doomed
    gc.collect()

    assert len(targets) == 2
    assert targets.snapshot() == (survivor,)
    assert len(targets) == 1


def test_set_reports_empty_after_last_target_is_pruned() -> None:
    targets = TrackedTargetSet()
    target = _Target()
    targets.add(target)

    del target
    gc.collect()

    assert targets.is_empty() is False
    assert targets.snapshot() == ()
    assert targets.is_empty() is True


def test_add_rejects_objects_without_weak_reference_support() -> None:
    targets = TrackedTargetSet()

    with pytest.raises(CtxWireInvalidArgumentError, match="_Slotted"):
        targets.add(_Slotted())

    assert targets.is_empty() is True


def test_make_weak_ref_wraps_type_error() -> None:
    with pytest.raises(CtxWireInvalidArgumentError) as exc_info:
        make_weak_ref(42)

    assert isinstance(exc_info.value.__cause__, TypeError)
    assert isinstance(exc_info.value, ValueError)
