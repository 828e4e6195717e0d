"""Quickstart: keep an object in sync with a context.

Prefix an attribute with ``di_`` and track the object: the attribute follows
the context key named by the rest of the attribute name.
"""

from __future__ import annotations

from ctxwire import Context, track


class Logger:
    def __init__(self, name: str) -> None:
        self.name = name


class ReportJob:
    di_log: Logger | None = None

    def describe(self) -> str:
        return self.di_log.name if self.di_log is not None else "<none>"


def main() -> None:
    context = Context({"log": Logger("console")})
    job = ReportJob()

    track(job, context)
    print(f"initial={job.describe()}")  # => initial=console

    context.remove("log")
    print(f"after_remove={job.describe()}")  # => after_remove=<none>

    context.set("log", Logger("file"))
    print(f"after_set={job.describe()}")  # => after_set=file

    context.set("Log", Logger("capitalized"))
    print(f"exact_match_wins={job.describe()}")  # => exact_match_wins=file


if __name__ == "__main__":
    main()
