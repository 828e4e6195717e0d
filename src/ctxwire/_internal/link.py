from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ctxwire._internal.binder import Binder
from ctxwire._internal.context import ContextProtocol
from ctxwire._internal.defaults import DEFAULT_FIELD_PREFIX, DEFAULT_SETTER_PREFIX
from ctxwire._internal.events import EventType
from ctxwire._internal.keys import KeyResolver
from ctxwire._internal.members import MemberClassifier, MemberDescriptor, MemberKind
from ctxwire._internal.registry import TrackedTargetSet, make_weak_ref
from ctxwire._internal.settings import LinkSettings
from ctxwire.exceptions import CtxWireInvalidArgumentError

logger = logging.getLogger(__name__)


class Link:
    """Keep the injectable members of tracked targets in sync with a context.

    A ``Link`` is a ``RunAndTrack`` listener. Subscribing it with a target as
    the ``INITIAL`` payload injects every matching context value into the
    target, calls its post-construct hooks once, and starts tracking the
    target weakly. Later ``ADDED`` and ``REMOVED`` events rewrite or clear
    the members whose key matches the changed context key.

    Members are found by naming convention (``field_prefix`` for attributes,
    ``setter_prefix`` for single-argument methods) or by explicit markers
    from ``ctxwire.markers``. Only members declared on the class are
    found: an attribute assigned solely in ``__init__`` needs a class-level
    annotation or default to be injected.

    All work happens synchronously on the thread delivering the event.

    Examples:
        .. code-block:: python

            class Service:
                di_log: Logger | None = None

                @post_construct
                def start(self) -> None: ...


            context = Context({"log": logging.getLogger("app")})
            service = Service()
            context.run_and_track(Link(), (service,))
            context.remove("log")  # service.di_log is None again

    """

    def __init__(
        self,
        *,
        field_prefix: str | None = None,
        setter_prefix: str | None = None,
        settings: LinkSettings | None = None,
    ) -> None:
        """Initialize a link with member naming conventions.

        Args:
            field_prefix: Prefix of injected attribute names. Defaults to
                ``settings.field_prefix`` or ``DEFAULT_FIELD_PREFIX``.
            setter_prefix: Prefix of setter method names. Defaults to
                ``settings.setter_prefix`` or ``DEFAULT_SETTER_PREFIX``.
            settings: Settings providing defaults for both prefixes.

        Raises:
            CtxWireInvalidArgumentError: If a resulting prefix is empty.

        """
        if field_prefix is None:
            field_prefix = settings.field_prefix if settings is not None else DEFAULT_FIELD_PREFIX
        if setter_prefix is None:
            setter_prefix = (
                settings.setter_prefix if settings is not None else DEFAULT_SETTER_PREFIX
            )
        if not field_prefix or not setter_prefix:
            msg = "Member prefixes must be non-empty strings."
            raise CtxWireInvalidArgumentError(msg)

        self._classifier = MemberClassifier(field_prefix, setter_prefix)
        self._keys = KeyResolver()
        self._binder = Binder()
        self._targets = TrackedTargetSet()

    @classmethod
    def from_settings(cls, settings: LinkSettings | None = None) -> Link:
        """Build a link from ``LinkSettings``, read from the environment when omitted."""
        return cls(settings=settings if settings is not None else LinkSettings())

    @property
    def field_prefix(self) -> str:
        return self._classifier.field_prefix

    @property
    def setter_prefix(self) -> str:
        return self._classifier.setter_prefix

    def targets(self) -> tuple[object, ...]:
        """Return the targets that are still alive."""
        return self._targets.snapshot()

    def notify(
        self,
        context: ContextProtocol,
        name: str | None,
        event_type: EventType,
        args: Sequence[Any] | None,
    ) -> bool:
        """Apply a context event to the tracked targets.

        Args:
            context: Context that produced the event.
            name: Changed key for ``ADDED``/``REMOVED``.
            event_type: Kind of change.
            args: For ``INITIAL``, a one-element sequence holding the new target.

        Returns:
            Whether any target is tracked, i.e. whether further events are useful.

        Raises:
            CtxWireInvalidArgumentError: If an ``INITIAL`` event carries no
                valid target. Nothing is registered in that case.

        """
        if event_type is EventType.INITIAL:
            self._register(context, _initial_target(args))
        else:
            for target in self._targets.snapshot():
                self._update(context, name, event_type, target)
        return not self._targets.is_empty()

    def _register(self, context: ContextProtocol, target: object) -> None:
        make_weak_ref(target)

        hooks: list[MemberDescriptor] = []
        for member in self._classifier.classify(type(target), additive=True):
            if member.is_hook:
                hooks.append(member)
                continue
            key = self._resolve(member, context)
            if key is None:
                continue
            self._binder.bind(target, member, self._value(context, key, member))

        for hook in hooks:
            self._binder.invoke_hook(target, hook)

        self._targets.add(target)
        logger.debug("Tracking %r", target)

    def _update(
        self,
        context: ContextProtocol,
        name: str | None,
        event_type: EventType,
        target: object,
    ) -> None:
        if event_type is EventType.ADDED:
            for member in self._classifier.classify(type(target), additive=True):
                if member.is_hook or not self._keys.matches(name, member.key):
                    continue
                key = self._resolve(member, context)
                if key is None:
                    continue
                self._binder.bind(target, member, self._value(context, key, member))
        elif event_type is EventType.REMOVED:
            for member in self._classifier.classify(type(target), additive=False):
                if member.is_hook or not self._keys.matches(name, member.key):
                    continue
                self._binder.bind(target, member, None)
        else:
            logger.warning("Ignoring unknown event type %r for %r", event_type, target)

    def _resolve(self, member: MemberDescriptor, context: ContextProtocol) -> str | None:
        if member.key is None:
            return None
        return self._keys.resolve(member.key, context)

    @staticmethod
    def _value(context: ContextProtocol, key: str, member: MemberDescriptor) -> Any:
        if member.kind is MemberKind.SETTER:
            return context.get(key, (member.declared_type,))
        return context.get(key)


def track(
    target: object,
    context: ContextProtocol,
    *,
    field_prefix: str | None = None,
    setter_prefix: str | None = None,
) -> Link:
    """Inject ``context`` into ``target`` and keep it updated.

    Creates a ``Link`` and subscribes it with ``context.run_and_track`` so
    that ``target`` receives the initial values, its post-construct hooks
    run, and later context changes are applied while it stays alive.

    Args:
        target: Object receiving context values.
        context: Context to track.
        field_prefix: Prefix of injected attribute names.
        setter_prefix: Prefix of setter method names.

    Returns:
        The subscribed link.

    Raises:
        CtxWireInvalidArgumentError: If ``target`` is ``None`` or cannot be
            weakly referenced.

    """
    link = Link(field_prefix=field_prefix, setter_prefix=setter_prefix)
    context.run_and_track(link, (target,))
    return link


def _initial_target(args: Sequence[Any] | None) -> object:
    if (
        not isinstance(args, Sequence)
        or isinstance(args, (str, bytes))
        or len(args) != 1
        or args[0] is None
    ):
        msg = (
            "INITIAL event requires exactly one non-None target in args, "
            f"got {args!r}."
        )
        raise CtxWireInvalidArgumentError(msg)
    return args[0]


__all__ = ["Link", "track"]
