from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ctxwire._internal.context import ContextProtocol


class EventType(Enum):
    """Classify a context change delivered to tracking listeners.

    ``INITIAL`` is delivered once, synchronously, when a listener subscribes.
    ``ADDED`` and ``REMOVED`` follow every later mutation of a context key.
    """

    INITIAL = "initial"
    """Subscription event; ``args`` carries the payload given at subscription time."""

    ADDED = "added"
    """A key was set (or replaced) in the context."""

    REMOVED = "removed"
    """A key was removed from the context."""


class RunAndTrack(Protocol):
    """Protocol for listeners subscribed through ``ContextProtocol.run_and_track``."""

    def notify(
        self,
        context: ContextProtocol,
        name: str | None,
        event_type: EventType,
        args: Sequence[Any] | None,
    ) -> bool:
        """Handle a context event.

        Args:
            context: Context that produced the event.
            name: Changed key, ``None`` for ``INITIAL``.
            event_type: Kind of change.
            args: Subscription payload for ``INITIAL``, ``None`` otherwise.

        Returns:
            ``True`` to stay subscribed, ``False`` to be dropped by the context.

        """
        ...


__all__ = ["EventType", "RunAndTrack"]
