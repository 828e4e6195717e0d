from ctxwire._internal.events import EventType, RunAndTrack

__all__ = ["EventType", "RunAndTrack"]
