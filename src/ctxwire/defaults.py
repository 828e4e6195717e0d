from ctxwire._internal.defaults import DEFAULT_FIELD_PREFIX, DEFAULT_SETTER_PREFIX

__all__ = ["DEFAULT_FIELD_PREFIX", "DEFAULT_SETTER_PREFIX"]
