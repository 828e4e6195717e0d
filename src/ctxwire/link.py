from ctxwire._internal.link import Link, track

__all__ = ["Link", "track"]
