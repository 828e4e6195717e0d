from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from ctxwire._internal.events import EventType, RunAndTrack


class ContextProtocol(Protocol):
    """Protocol for the key-value context consumed by the binding engine."""

    def contains_key(self, key: str) -> bool:
        """Return whether the context holds a value for ``key``.

        Args:
            key: Context key to look up.

        """
        ...

    def get(self, key: str, parameter_types: tuple[Any, ...] | None = None) -> Any:
        """Return the value stored under ``key`` or ``None`` when it is absent.

        Args:
            key: Context key to look up.
            parameter_types: Types expected by the consumer, used by computed
                values to pick a suitable result.

        """
        ...

    def run_and_track(self, listener: RunAndTrack, args: Sequence[Any] | None = None) -> None:
        """Deliver ``INITIAL`` to ``listener`` and keep it subscribed while it asks to be.

        Args:
            listener: Listener receiving context events.
            args: Payload passed along with the ``INITIAL`` event.

        """
        ...


class ContextFunction(ABC):
    """Compute a context value lazily on every read.

    Store an instance in a ``Context`` to have ``Context.get`` return the
    result of ``compute`` instead of the function object itself.

    Examples:
        .. code-block:: python

            class Clock(ContextFunction):
                def compute(self, context, parameter_types):
                    return time.monotonic()


            context.set("now", Clock())

    """

    @abstractmethod
    def compute(self, context: ContextProtocol, parameter_types: tuple[Any, ...] | None) -> Any:
        """Return the value for the current read.

        Args:
            context: Context the value is read from.
            parameter_types: Types expected by the consumer, if known.

        """


class Context:
    """Hold string-keyed values and notify tracking listeners about changes.

    Mutations are applied under an internal lock. Listeners are notified
    synchronously on the mutating thread, after the lock is released, so a
    listener may read or mutate the context again. A listener returning
    ``False`` from ``notify`` is unsubscribed.

    Examples:
        .. code-block:: python

            context = Context({"log": logging.getLogger("app")})
            context.run_and_track(link, (service,))
            context.set("log", logging.getLogger("other"))

    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values) if values is not None else {}
        self._listeners: list[RunAndTrack] = []
        self._lock = threading.RLock()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={self.keys()!r})"

    def keys(self) -> tuple[str, ...]:
        """Return the keys currently stored in the context."""
        with self._lock:
            return tuple(self._values)

    def contains_key(self, key: str) -> bool:
        """Return whether the context holds a value for ``key``.

        A key stored with a ``None`` value is present.

        Args:
            key: Context key to look up.

        """
        return key in self

    def get(self, key: str, parameter_types: tuple[Any, ...] | None = None) -> Any:
        """Return the value stored under ``key`` or ``None`` when it is absent.

        ``ContextFunction`` values are computed on every read.

        Args:
            key: Context key to look up.
            parameter_types: Types expected by the consumer, forwarded to
                ``ContextFunction.compute``.

        """
        with self._lock:
            value = self._values.get(key)
        if isinstance(value, ContextFunction):
            return value.compute(self, parameter_types)
        return value

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and deliver ``ADDED`` to listeners.

        Args:
            key: Context key to write.
            value: Value to store, ``None`` included.

        """
        with self._lock:
            self._values[key] = value
        self._dispatch(key, EventType.ADDED)

    def remove(self, key: str) -> None:
        """Delete ``key`` and deliver ``REMOVED`` to listeners.

        Removing an absent key is a no-op and produces no event.

        Args:
            key: Context key to delete.

        """
        with self._lock:
            if key not in self._values:
                return
            del self._values[key]
        self._dispatch(key, EventType.REMOVED)

    def run_and_track(self, listener: RunAndTrack, args: Sequence[Any] | None = None) -> None:
        """Deliver ``INITIAL`` to ``listener`` and subscribe it when it asks to be.

        Subscribing the same listener twice keeps a single subscription.

        Args:
            listener: Listener receiving context events.
            args: Payload passed along with the ``INITIAL`` event.

        """
        if not listener.notify(self, None, EventType.INITIAL, args):
            return
        with self._lock:
            if not any(existing is listener for existing in self._listeners):
                self._listeners.append(listener)

    def _dispatch(self, key: str, event_type: EventType) -> None:
        with self._lock:
            listeners = tuple(self._listeners)
        dropped = [
            listener
            for listener in listeners
            if not listener.notify(self, key, event_type, None)
        ]
        if not dropped:
            return
        with self._lock:
            self._listeners = [
                listener
                for listener in self._listeners
                if not any(listener is candidate for candidate in dropped)
            ]


__all__ = ["Context", "ContextFunction", "ContextProtocol"]
