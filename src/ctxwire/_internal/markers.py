from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated, Any, NamedTuple, TypeVar, Union, get_args, get_origin, overload

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

INJECT_ATTR = "__ctxwire_inject__"
POST_CONSTRUCT_ATTR = "__ctxwire_post_construct__"
_ANNOTATED_MARKER_MIN_ARGS = 2


class InjectMarker:
    """A marker forcing a field to be injected regardless of its name.

    Attached to ``typing.Annotated`` metadata by ``Injected[T]``.
    """

    def __repr__(self) -> str:
        return "InjectMarker()"


class Named(NamedTuple):
    """Override the context key used for an injected field.

    ``Named`` only renames: the field still needs the field prefix or an
    ``InjectMarker`` to be injected.

    Examples:
        .. code-block:: python

            class Service:
                logger: Injected[Annotated[Logger, Named("log")]]

    """

    value: str


class Resource(NamedTuple):
    """Force injection of a field and optionally override its context key.

    An empty ``name`` keeps the key derived from the field name.

    Examples:
        .. code-block:: python

            class Service:
                storage: Annotated[Storage, Resource("blob-store")]

    """

    name: str = ""


class InjectSpec(NamedTuple):
    """Inject metadata stored on a decorated setter."""

    name: str | None = None


if TYPE_CHECKING:
    Injected = Union[T, T]  # noqa: UP007,PYI016
    """Mark a field for injection regardless of its name.

    At runtime ``Injected[T]`` becomes ``Annotated[T, InjectMarker()]``.
    """

else:

    class Injected:
        """Mark a field for injection regardless of its name.

        At runtime ``Injected[T]`` resolves to ``Annotated[T, InjectMarker()]``.

        Examples:
            .. code-block:: python

                class Service:
                    log: Injected[Logger]

        """

        def __class_getitem__(cls, item: T) -> Annotated[T, InjectMarker]:
            if get_origin(item) is Annotated:
                args = get_args(item)
                inner = args[0]
                metadata = args[1:]
                return _build_annotated((inner, *metadata, InjectMarker()))
            return _build_annotated((item, InjectMarker()))


@overload
def inject(func: F, /) -> F: ...


@overload
def inject(*, name: str | None = None) -> Callable[[F], F]: ...


def inject(func: F | None = None, /, *, name: str | None = None) -> F | Callable[[F], F]:
    """Force a single-argument method to be used as a setter.

    Use bare (``@inject``) or with a key override (``@inject(name="log")``).

    Args:
        func: Method being decorated when used without arguments.
        name: Context key overriding the one derived from the method name.

    """
    spec = InjectSpec(name=name or None)

    def decorator(target: F) -> F:
        setattr(target, INJECT_ATTR, spec)
        return target

    if func is None:
        return decorator
    return decorator(func)


def post_construct(func: F) -> F:
    """Mark a no-argument method to be called once after initial injection."""
    setattr(func, POST_CONSTRUCT_ATTR, True)
    return func


def get_inject_spec(func: Callable[..., Any]) -> InjectSpec | None:
    """Return inject metadata attached by ``inject`` or ``None``."""
    spec = getattr(func, INJECT_ATTR, None)
    return spec if isinstance(spec, InjectSpec) else None


def is_post_construct(func: Callable[..., Any]) -> bool:
    """Return True when ``func`` was decorated with ``post_construct``."""
    return getattr(func, POST_CONSTRUCT_ATTR, False) is True


def split_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Return the inner type and metadata of an ``Annotated`` annotation.

    Non-annotated values are returned unchanged with empty metadata.
    """
    if get_origin(annotation) is not Annotated:
        return annotation, ()
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return annotation_args[0], ()
    return annotation_args[0], tuple(annotation_args[1:])


def _build_annotated(params: tuple[object, ...]) -> Any:
    """Return Annotated[...] with a pre-built params tuple (Py 3.10+ compatible)."""
    try:
        return Annotated.__class_getitem__(params)  # type: ignore[attr-defined]
    except AttributeError:
        return Annotated.__getitem__(params)  # type: ignore[attr-defined]
