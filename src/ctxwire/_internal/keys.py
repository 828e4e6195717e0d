from __future__ import annotations

from ctxwire._internal.context import ContextProtocol


class KeyResolver:
    """Match member keys against context keys.

    An exact match always wins. Otherwise the single alternate spelling
    obtained by toggling the case of the first character is tried, so a
    member named ``log`` binds to a context key ``Log`` and vice versa.
    """

    @staticmethod
    def alternate_key(key: str) -> str | None:
        """Return ``key`` with the case of its first character toggled.

        Returns ``None`` for the empty string, for keys whose first
        character has no case and when toggling would change the length
        of the key.
        """
        if not key:
            return None
        first = key[0]
        if first.isupper():
            toggled = first.lower()
        elif first.islower():
            toggled = first.upper()
        else:
            return None
        # "ß".upper() is "SS"
        if len(toggled) != 1:
            return None
        return toggled + key[1:]

    def resolve(self, candidate: str, context: ContextProtocol) -> str | None:
        """Return the context key matching ``candidate`` or ``None`` when nothing matches.

        ``None`` means "not set" and is distinct from a key stored with a
        ``None`` value.

        Args:
            candidate: Key derived from the member declaration.
            context: Context whose current keys are checked.

        """
        if context.contains_key(candidate):
            return candidate
        alternate = self.alternate_key(candidate)
        if alternate is None:
            return None
        if context.contains_key(alternate):
            return alternate
        return None

    def matches(self, event_key: str | None, candidate: str | None) -> bool:
        """Return whether an event for ``event_key`` concerns the member key ``candidate``.

        Args:
            event_key: Key carried by the context event.
            candidate: Key derived from the member declaration.

        """
        if event_key is None or candidate is None:
            return event_key is None and candidate is None
        if event_key == candidate:
            return True
        alternate = self.alternate_key(candidate)
        if alternate is None:
            return False
        return event_key == alternate


__all__ = ["KeyResolver"]
