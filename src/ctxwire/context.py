from ctxwire._internal.context import Context, ContextFunction, ContextProtocol

__all__ = ["Context", "ContextFunction", "ContextProtocol"]
