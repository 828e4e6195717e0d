"""Markers: inject attributes whose names do not follow the prefix convention.

``Injected[T]`` forces injection, ``Named`` renames the context key, and
``Resource`` does both at once.
"""

from __future__ import annotations

from typing import Annotated

from ctxwire import Context, Injected, Named, Resource, track


class Storage:
    def __init__(self, url: str) -> None:
        self.url = url


class UploadService:
    region: Injected[str] = "unset"
    bucket: Injected[Annotated[str, Named("defaultBucket")]] = "unset"
    storage: Annotated[Storage | None, Resource("blob-store")] = None
    comment: Annotated[str, Named("comment")] = "not injected"


def main() -> None:
    context = Context(
        {
            "region": "eu-west-1",
            "defaultBucket": "uploads",
            "blob-store": Storage("s3://uploads"),
            "comment": "ignored",
        },
    )
    service = UploadService()

    track(service, context)

    print(f"region={service.region}")  # => region=eu-west-1
    print(f"bucket={service.bucket}")  # => bucket=uploads
    print(f"storage={service.storage.url if service.storage else None}")  # => storage=s3://uploads
    print(f"comment={service.comment}")  # => comment=not injected


if __name__ == "__main__":
    main()
