"""Settings: configure member prefixes from code or the environment.

``LinkSettings`` reads ``CTXWIRE_FIELD_PREFIX`` and ``CTXWIRE_SETTER_PREFIX``.
"""

from __future__ import annotations

import os

from ctxwire import Context, Link, LinkSettings


class Worker:
    inject_queue: str | None = None
    di_queue: str | None = None

    def __init__(self) -> None:
        self.concurrency = 0

    def apply_concurrency(self, value: int) -> None:
        self.concurrency = value


def main() -> None:
    os.environ["CTXWIRE_FIELD_PREFIX"] = "inject_"
    settings = LinkSettings(setter_prefix="apply_")
    print(f"prefixes={settings.field_prefix},{settings.setter_prefix}")  # => prefixes=inject_,apply_

    context = Context({"queue": "emails", "concurrency": 4})
    worker = Worker()
    context.run_and_track(Link.from_settings(settings), (worker,))

    print(f"inject_queue={worker.inject_queue}")  # => inject_queue=emails
    print(f"di_queue={worker.di_queue}")  # => di_queue=None
    print(f"concurrency={worker.concurrency}")  # => concurrency=4


if __name__ == "__main__":
    main()
