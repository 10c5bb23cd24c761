"""Shared helpers for resolving a release source on the command line."""

from __future__ import annotations

from relstage.storage import ObjectStore
from relstage.storage.http import HttpBucket
from relstage.storage.local import LocalBucket


def store_for_source(source: str) -> ObjectStore:
    """Return an HTTP store for ``http(s)://`` sources, a local one otherwise."""
    if source.startswith(("http://", "https://")):
        return HttpBucket(source)
    return LocalBucket(source)
