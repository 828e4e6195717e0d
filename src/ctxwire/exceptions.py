class CtxWireError(Exception):
    """Represent a base class for all ctxwire-specific failures.

    Catch this type when you want to handle any ctxwire error path without
    matching each concrete exception class individually.
    """


class CtxWireInvalidArgumentError(CtxWireError, ValueError):
    """Signal a contract violation by the caller of the binding engine.

    Raised by ``Link.notify`` when an ``INITIAL`` event carries no target
    payload (missing, empty, or ``None``) or a target that cannot be weakly
    referenced, and by ``Link`` construction when a member prefix is empty.

    The engine registers nothing when this error is raised. Typical fixes
    include passing the target as the first element of ``args`` in
    ``context.run_and_track(link, (target,))`` and adding ``"__weakref__"``
    to ``__slots__`` of slotted target classes.
    """
