DEFAULT_FIELD_PREFIX = "di_"
"""Field names starting with this prefix are injected; the rest of the name is the key."""

DEFAULT_SETTER_PREFIX = "set_"
"""Single-argument methods starting with this prefix are used as setters."""
