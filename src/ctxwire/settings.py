from ctxwire._internal.settings import LinkSettings

__all__ = ["LinkSettings"]
