from __future__ import annotations

import threading
import weakref

from ctxwire.exceptions import CtxWireInvalidArgumentError


class TrackedTargetSet:
    """Hold bound targets through weak references.

    The set never keeps a target alive and never removes an entry on its
    own: references whose target was collected are dropped the next time a
    snapshot is taken. The internal lock only guards the reference list and
    is never held while callers work with the snapshot.
    """

    def __init__(self) -> None:
        self._refs: list[weakref.ReferenceType[object]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._refs)

    def add(self, target: object) -> None:
        """Track ``target`` weakly.

        Args:
            target: Object to track.

        Raises:
            CtxWireInvalidArgumentError: If ``target`` cannot be weakly referenced.

        """
        ref = make_weak_ref(target)
        with self._lock:
            self._refs.append(ref)

    def snapshot(self) -> tuple[object, ...]:
        """Return the live targets and forget the collected ones."""
        with self._lock:
            live: list[object] = []
            survivors: list[weakref.ReferenceType[object]] = []
            for ref in self._refs:
                target = ref()
                if target is None:
                    continue
                live.append(target)
                survivors.append(ref)
            if len(survivors) != len(self._refs):
                self._refs = survivors
        return tuple(live)

    def is_empty(self) -> bool:
        """Return whether no entries are stored, dead references included."""
        with self._lock:
            return not self._refs


def make_weak_ref(target: object) -> weakref.ReferenceType[object]:
    """Return a weak reference to ``target``.

    Raises:
        CtxWireInvalidArgumentError: If ``target`` cannot be weakly referenced.

    """
    try:
        return weakref.ref(target)
    except TypeError as error:
        msg = (
            f"Cannot track {type(target).__qualname__!r} instances: the type does not "
            "support weak references. Add '__weakref__' to its __slots__."
        )
        raise CtxWireInvalidArgumentError(msg) from error


__all__ = ["TrackedTargetSet", "make_weak_ref"]
