from __future__ import annotations

import builtins
import dataclasses
import functools
import inspect
import logging
import sys
import types
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, ForwardRef, get_origin

from ctxwire._internal.defaults import DEFAULT_FIELD_PREFIX, DEFAULT_SETTER_PREFIX
from ctxwire._internal.markers import (
    InjectMarker,
    Named,
    Resource,
    get_inject_spec,
    is_post_construct,
    split_annotated,
)

logger = logging.getLogger(__name__)

_SETTER_PARAMETER_COUNT = 2
_LEVELS_CACHE_SIZE = 512
_ANNOTATION_ERRORS = (AttributeError, NameError, SyntaxError, TypeError)
_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class MemberKind(Enum):
    """Kind of injectable member."""

    FIELD = "field"
    """An instance attribute written with ``setattr``."""

    SETTER = "setter"
    """A method called with the value as its single argument."""


class MemberRole(Enum):
    """Role of a classified member."""

    INJECT = "inject"
    """Receives context values."""

    POST_CONSTRUCT = "post_construct"
    """Called once without arguments after initial injection."""


@dataclass(frozen=True, slots=True)
class MemberDescriptor:
    """Describe one injectable member of a class.

    ``name`` is the attribute name as stored on instances (mangled for
    private members). ``key`` is the candidate context key before it is
    matched against a concrete context.
    """

    owner: type[Any]
    name: str
    kind: MemberKind
    key: str | None
    role: MemberRole = MemberRole.INJECT
    declared_type: Any = Any
    function: Callable[..., Any] | None = None

    @property
    def is_hook(self) -> bool:
        return self.role is MemberRole.POST_CONSTRUCT

    def __str__(self) -> str:
        return f"{self.owner.__qualname__}.{self.name}"


@dataclass(frozen=True, slots=True)
class _ClassLevel:
    fields: tuple[MemberDescriptor, ...]
    methods: tuple[MemberDescriptor, ...]


class MemberClassifier:
    """Discover the injectable members of a class hierarchy.

    For additive events classes are walked from the most-base user class
    down to the concrete class, fields before methods within each class.
    Subtractive events reverse the walk: the concrete class first,
    methods before fields. A setter therefore sees its backing field already
    set when values arrive and can still read it when values leave, and
    subclass members are torn down before the base members they build on.

    Only class-level declarations are discovered: annotations, ``__slots__``
    entries and plain class attributes. An attribute that is only assigned
    in ``__init__`` (``self.di_log = None``) is invisible to the classifier;
    declare it on the class (``di_log: Logger | None = None``) to inject it.

    A field redeclared by a subclass is a single attribute. It is reported
    once, at the most derived class annotating it, with that class's type.

    Descriptor lists are cached per concrete class in a bounded LRU cache.
    Key matching against a context is not part of classification and is
    redone for every event.
    """

    def __init__(
        self,
        field_prefix: str = DEFAULT_FIELD_PREFIX,
        setter_prefix: str = DEFAULT_SETTER_PREFIX,
    ) -> None:
        self.field_prefix = field_prefix
        self.setter_prefix = setter_prefix
        self._levels = functools.lru_cache(maxsize=_LEVELS_CACHE_SIZE)(self._build_levels)

    def classify(self, cls: type[Any], *, additive: bool) -> list[MemberDescriptor]:
        """Return the ordered member descriptors of ``cls``.

        Args:
            cls: Concrete class of a target.
            additive: ``True`` for ``INITIAL``/``ADDED`` ordering (base class
                first, fields first), ``False`` for ``REMOVED`` ordering
                (concrete class first, methods first).

        """
        members: list[MemberDescriptor] = []
        if additive:
            for level in self._levels(cls):
                members.extend(level.fields)
                members.extend(level.methods)
        else:
            for level in reversed(self._levels(cls)):
                members.extend(level.methods)
                members.extend(level.fields)
        return members

    def _build_levels(self, cls: type[Any]) -> tuple[_ClassLevel, ...]:
        mro = cls.__mro__
        return tuple(
            _ClassLevel(
                fields=self._classify_fields(
                    owner,
                    derived=mro[:index],
                    bases=mro[index + 1 :],
                ),
                methods=self._classify_methods(owner, derived=mro[:index]),
            )
            for index, owner in reversed(list(enumerate(mro)))
            if owner is not object
        )

    def _classify_fields(
        self,
        owner: type[Any],
        *,
        derived: tuple[type[Any], ...],
        bases: tuple[type[Any], ...],
    ) -> tuple[MemberDescriptor, ...]:
        annotations = inspect.get_annotations(owner)
        hints = _field_type_hints(owner, annotations)
        fields: list[MemberDescriptor] = []

        for name, declared in hints.items():
            if _is_class_level_annotation(declared):
                continue
            # redeclared further down: the most derived annotation wins
            if any(name in inspect.get_annotations(subclass) for subclass in derived):
                continue
            if isinstance(declared, str) and not _demangle(owner, name).startswith(
                self.field_prefix,
            ):
                logger.warning(
                    "Cannot evaluate annotation %r of %s.%s; its inject markers are ignored",
                    declared,
                    owner.__qualname__,
                    name,
                )
            descriptor = self._field_descriptor(owner, name, declared)
            if descriptor is not None:
                fields.append(descriptor)

        for name, value in vars(owner).items():
            if name in annotations or _is_dunder(name):
                continue
            if not isinstance(value, types.MemberDescriptorType) and (
                callable(value) or _is_attribute_descriptor(value)
            ):
                continue
            if any(name in inspect.get_annotations(base) for base in bases):
                continue
            if any(
                name in vars(subclass) or name in inspect.get_annotations(subclass)
                for subclass in derived
            ):
                continue
            descriptor = self._field_descriptor(owner, name, Any)
            if descriptor is not None:
                fields.append(descriptor)

        return tuple(fields)

    def _field_descriptor(
        self,
        owner: type[Any],
        name: str,
        declared: Any,
    ) -> MemberDescriptor | None:
        plain_name = _demangle(owner, name)
        declared_type, metadata = split_annotated(declared)

        inject = plain_name.startswith(self.field_prefix)
        key = plain_name[len(self.field_prefix) :] if inject else plain_name
        named_key: str | None = None
        resource_key: str | None = None
        for item in metadata:
            if isinstance(item, InjectMarker):
                inject = True
            elif isinstance(item, Named):
                named_key = item.value
            elif isinstance(item, Resource):
                inject = True
                if item.name:
                    resource_key = item.name

        if not inject:
            return None
        return MemberDescriptor(
            owner=owner,
            name=name,
            kind=MemberKind.FIELD,
            key=resource_key or named_key or key,
            declared_type=declared_type,
        )

    def _classify_methods(
        self,
        owner: type[Any],
        *,
        derived: tuple[type[Any], ...],
    ) -> tuple[MemberDescriptor, ...]:
        methods: list[MemberDescriptor] = []
        for name, value in vars(owner).items():
            if not inspect.isfunction(value) or _is_dunder(name):
                continue
            if any(name in vars(subclass) for subclass in derived):
                continue
            descriptor = self._method_descriptor(owner, name, value)
            if descriptor is not None:
                methods.append(descriptor)
        return tuple(methods)

    def _method_descriptor(
        self,
        owner: type[Any],
        name: str,
        function: Callable[..., Any],
    ) -> MemberDescriptor | None:
        if is_post_construct(function):
            return MemberDescriptor(
                owner=owner,
                name=name,
                kind=MemberKind.SETTER,
                key=None,
                role=MemberRole.POST_CONSTRUCT,
                function=function,
            )

        plain_name = _demangle(owner, name)
        spec = get_inject_spec(function)
        prefixed = plain_name.startswith(self.setter_prefix)
        if not prefixed and spec is None:
            return None

        parameter = single_parameter(function)
        if parameter is None:
            logger.debug(
                "Skipping setter %s.%s: it must accept exactly one argument",
                owner.__qualname__,
                name,
            )
            return None

        if spec is not None and spec.name:
            key = spec.name
        elif prefixed:
            key = plain_name[len(self.setter_prefix) :]
        else:
            key = plain_name

        hints = _parameter_type_hints(function)
        if parameter.name in hints:
            declared = hints[parameter.name]
        elif parameter.annotation is inspect.Parameter.empty:
            declared = Any
        else:
            declared = _evaluate_annotation(
                parameter.annotation,
                getattr(function, "__globals__", {}),
            )
        declared_type, _metadata = split_annotated(declared)
        return MemberDescriptor(
            owner=owner,
            name=name,
            kind=MemberKind.SETTER,
            key=key,
            declared_type=declared_type,
            function=function,
        )


def _field_type_hints(owner: type[Any], annotations: Mapping[str, Any]) -> dict[str, Any]:
    """Resolve the annotations declared on ``owner`` itself.

    The whole class is resolved at once when possible. Otherwise every
    annotation is evaluated on its own so that one unresolvable name does
    not hide the markers of the other fields.
    """
    try:
        hints = typing.get_type_hints(owner, include_extras=True)
    except _ANNOTATION_ERRORS:
        logger.debug("Resolving annotations of %s one by one", owner.__qualname__, exc_info=True)
        hints = {}

    module = sys.modules.get(owner.__module__)
    module_namespace = vars(module) if module is not None else {}
    return {
        name: hints[name]
        if name in hints
        else _evaluate_annotation(annotation, module_namespace, vars(owner))
        for name, annotation in annotations.items()
    }


def _parameter_type_hints(function: Callable[..., Any]) -> Mapping[str, Any]:
    try:
        return typing.get_type_hints(function, include_extras=True)
    except _ANNOTATION_ERRORS:
        logger.debug("Resolving annotations of %s one by one", function.__qualname__, exc_info=True)
        return {}


class _AnnotationNamespace(dict[str, Any]):
    """Evaluation namespace turning unknown names into forward references."""

    def __missing__(self, name: str) -> Any:
        return vars(builtins).get(name, ForwardRef(name))


def _evaluate_annotation(
    annotation: Any,
    global_namespace: Mapping[str, Any],
    local_namespace: Mapping[str, Any] | None = None,
) -> Any:
    """Evaluate a single string annotation.

    Names that are not visible from the declaring module, such as
    ``TYPE_CHECKING`` imports or classes local to a function, become
    ``ForwardRef`` objects. The raw string is returned when evaluation
    still fails.
    """
    if not isinstance(annotation, str):
        return annotation
    namespace = _AnnotationNamespace(global_namespace)
    if local_namespace is not None:
        namespace.update(local_namespace)
    try:
        return eval(annotation, {}, namespace)  # noqa: S307
    except _ANNOTATION_ERRORS:
        logger.debug("Cannot evaluate annotation %r", annotation, exc_info=True)
        return annotation


def single_parameter(function: Callable[..., Any]) -> inspect.Parameter | None:
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return None
    parameters = list(signature.parameters.values())
    if len(parameters) != _SETTER_PARAMETER_COUNT:
        return None
    if any(parameter.kind not in _POSITIONAL_KINDS for parameter in parameters):
        return None
    return parameters[1]


def _is_class_level_annotation(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    if isinstance(annotation, dataclasses.InitVar):
        return True
    return isinstance(annotation, str) and annotation.startswith(("ClassVar", "typing.ClassVar"))


def _is_attribute_descriptor(value: Any) -> bool:
    return isinstance(value, (property, classmethod, staticmethod, types.GetSetDescriptorType))


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _demangle(owner: type[Any], name: str) -> str:
    """Return the declared name of a private attribute without its mangling prefix.

    ``_Service__di_log`` declared in ``Service`` becomes ``di_log``.
    """
    class_name = owner.__name__.lstrip("_")
    if not class_name:
        return name
    mangled_prefix = f"_{class_name}__"
    if name.startswith(mangled_prefix) and len(name) > len(mangled_prefix):
        return name[len(mangled_prefix) :]
    return name


__all__ = ["MemberClassifier", "MemberDescriptor", "MemberKind", "MemberRole", "single_parameter"]
