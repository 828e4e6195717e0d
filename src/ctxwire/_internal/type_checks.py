from __future__ import annotations

import types
from typing import Annotated, Any, ForwardRef, Literal, TypeGuard, TypeVar, Union, get_args, get_origin


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_assignable(value: object, declared: Any) -> bool:  # noqa: C901, PLR0911
    """Return true when ``value`` may be stored in a member annotated with ``declared``.

    ``None`` is always assignable because it represents an unbound member.
    Annotations that cannot be checked at runtime (unresolved strings, forward
    references, non-runtime protocols) accept any value.

    Args:
        value: Value about to be injected.
        declared: Member annotation with ``Annotated`` metadata already stripped.

    """
    if value is None:
        return True
    if declared is Any or declared is object:
        return True
    if isinstance(declared, (str, ForwardRef)):
        return True
    if declared is None or declared is type(None):
        return False
    if isinstance(declared, TypeVar):
        if declared.__bound__ is not None:
            return is_assignable(value, declared.__bound__)
        if declared.__constraints__:
            return any(is_assignable(value, constraint) for constraint in declared.__constraints__)
        return True
    supertype = getattr(declared, "__supertype__", None)
    if supertype is not None:
        return is_assignable(value, supertype)

    origin = get_origin(declared)
    if origin is Annotated:
        return is_assignable(value, get_args(declared)[0])
    if origin is Union or origin is types.UnionType:
        return any(is_assignable(value, argument) for argument in get_args(declared))
    if origin is Literal:
        return value in get_args(declared)
    if origin is type:
        if not isinstance(value, type):
            return False
        type_args = get_args(declared)
        if type_args and is_runtime_class(type_args[0]):
            return issubclass(value, type_args[0])
        return True
    if origin is not None:
        declared = origin

    if not is_runtime_class(declared):
        return True
    try:
        return isinstance(value, declared)
    except TypeError:
        return True


__all__ = ["is_assignable", "is_runtime_class"]
