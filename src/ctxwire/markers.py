from ctxwire._internal.markers import (
    Injected,
    InjectMarker,
    InjectSpec,
    Named,
    Resource,
    inject,
    post_construct,
)

__all__ = [
    "InjectMarker",
    "InjectSpec",
    "Injected",
    "Named",
    "Resource",
    "inject",
    "post_construct",
]
