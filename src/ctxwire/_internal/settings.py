from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ctxwire._internal.defaults import DEFAULT_FIELD_PREFIX, DEFAULT_SETTER_PREFIX


class LinkSettings(BaseSettings):
    """Configure member naming conventions of a ``Link``.

    Values are read from ``CTXWIRE_FIELD_PREFIX`` and
    ``CTXWIRE_SETTER_PREFIX`` environment variables when not passed
    explicitly.

    Examples:
        .. code-block:: python

            link = Link.from_settings(LinkSettings(field_prefix="inject_"))

    """

    model_config = SettingsConfigDict(env_prefix="CTXWIRE_", frozen=True)

    field_prefix: str = Field(default=DEFAULT_FIELD_PREFIX, min_length=1)
    setter_prefix: str = Field(default=DEFAULT_SETTER_PREFIX, min_length=1)


__all__ = ["LinkSettings"]
