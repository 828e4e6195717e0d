from ctxwire.context import Context, ContextFunction, ContextProtocol
from ctxwire.defaults import DEFAULT_FIELD_PREFIX, DEFAULT_SETTER_PREFIX
from ctxwire.events import EventType, RunAndTrack
from ctxwire.exceptions import CtxWireError, CtxWireInvalidArgumentError
from ctxwire.link import Link, track
from ctxwire.markers import Injected, InjectMarker, Named, Resource, inject, post_construct
from ctxwire.settings import LinkSettings

__all__ = [
    "DEFAULT_FIELD_PREFIX",
    "DEFAULT_SETTER_PREFIX",
    "Context",
    "ContextFunction",
    "ContextProtocol",
    "CtxWireError",
    "CtxWireInvalidArgumentError",
    "EventType",
    "InjectMarker",
    "Injected",
    "Link",
    "LinkSettings",
    "Named",
    "Resource",
    "RunAndTrack",
    "inject",
    "post_construct",
    "track",
]
