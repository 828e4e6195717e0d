from __future__ import annotations

import logging
from typing import Any

from ctxwire._internal.members import MemberDescriptor, MemberKind, single_parameter
from ctxwire._internal.type_checks import is_assignable

logger = logging.getLogger(__name__)


class Binder:
    """Write resolved context values onto target members.

    Binding never raises for member-level problems: type mismatches are
    skipped silently (debug log), access and invocation failures are logged
    as warnings. The boolean result tells whether the member was written.
    Passing ``None`` unbinds the member.
    """

    def bind(self, target: object, member: MemberDescriptor, value: Any) -> bool:
        """Write ``value`` onto ``member`` of ``target``.

        Args:
            target: Object receiving the value.
            member: Field or setter descriptor of ``target``'s class.
            value: Value to inject, ``None`` to unbind.

        Returns:
            ``True`` when the member was written, ``False`` when skipped.

        """
        if member.kind is MemberKind.FIELD:
            return self._set_field(target, member, value)
        return self._call_setter(target, member, value)

    def invoke_hook(self, target: object, member: MemberDescriptor) -> bool:
        """Call a post-construct hook without arguments.

        Exceptions raised by the hook are logged and swallowed.

        Args:
            target: Object owning the hook.
            member: Post-construct descriptor of ``target``'s class.

        Returns:
            ``True`` when the hook returned normally.

        """
        if member.function is None:
            return False
        try:
            member.function(target)
        except Exception:
            logger.warning("Post-construct hook %s failed on %r", member, target, exc_info=True)
            return False
        return True

    def _set_field(self, target: object, member: MemberDescriptor, value: Any) -> bool:
        if not is_assignable(value, member.declared_type):
            logger.debug(
                "Skipping %s: %s is not assignable to %r",
                member,
                type(value).__qualname__,
                member.declared_type,
            )
            return False
        try:
            _write_attribute(target, member.name, value)
        except Exception:
            logger.warning("Injection failed for %s on %r", member, target, exc_info=True)
            return False
        return True

    def _call_setter(self, target: object, member: MemberDescriptor, value: Any) -> bool:
        if member.function is None or single_parameter(member.function) is None:
            return False
        if not is_assignable(value, member.declared_type):
            logger.debug(
                "Skipping %s: %s is not assignable to %r",
                member,
                type(value).__qualname__,
                member.declared_type,
            )
            return False
        try:
            member.function(target, value)
        except Exception:
            logger.warning("Injection failed for %s on %r", member, target, exc_info=True)
            return False
        return True


def _write_attribute(target: object, name: str, value: Any) -> None:
    """Set an attribute, bypassing a refusing ``__setattr__`` when needed.

    Frozen dataclasses and classes guarding ``__setattr__`` reject the plain
    write with ``AttributeError``; the value is then stored through
    ``object.__setattr__`` for this single write only.
    """
    try:
        setattr(target, name, value)
    except AttributeError:
        object.__setattr__(target, name, value)


__all__ = ["Binder"]
