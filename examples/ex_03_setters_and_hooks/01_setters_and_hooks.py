"""Setters and hooks: react to context changes with methods.

Single-argument methods prefixed with ``set_`` receive values, ``inject``
marks setters with other names, and ``post_construct`` runs once after the
first injection.
"""

from __future__ import annotations

from ctxwire import Context, inject, post_construct, track


class Dashboard:
    di_theme: str | None = None

    def __init__(self) -> None:
        self.rendered: list[str] = []

    def set_theme(self, theme: str | None) -> None:
        self.rendered.append(f"theme:{theme}")

    @inject(name="user")
    def greet(self, user: str | None) -> None:
        self.rendered.append(f"user:{user}")

    def set_size(self, width: int, height: int) -> None:
        self.rendered.append("never called")

    @post_construct
    def ready(self) -> None:
        self.rendered.append(f"ready:{self.di_theme}")


def main() -> None:
    context = Context({"theme": "dark", "user": "ada", "size": (640, 480)})
    dashboard = Dashboard()

    track(dashboard, context)
    print(dashboard.rendered)  # => ['theme:dark', 'user:ada', 'ready:dark']

    dashboard.rendered.clear()
    context.remove("theme")
    print(dashboard.rendered)  # => ['theme:None']
    print(f"field={dashboard.di_theme}")  # => field=None

    dashboard.rendered.clear()
    context.set("user", "grace")
    print(dashboard.rendered)  # => ['user:grace']


if __name__ == "__main__":
    main()
