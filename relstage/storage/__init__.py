"""Storage protocols for reading staged release objects.

The unpack core never constructs storage clients itself.  Callers supply an
``ObjectStore`` (a bucket-like backend) and the core reads artifacts through
a ``RemoteHandle`` scoped to one staged release.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class ObjectStore(Protocol):
    """A bucket-like backend addressed by slash-separated object names."""

    @property
    def store_name(self) -> str:
        """Return a human-readable identifier, e.g. a directory or base URL."""
        ...

    def open(self, object_name: str) -> AbstractContextManager[BinaryIO]:
        """Open a readable binary stream for *object_name*.

        Raises ``StorageIOError`` if the object cannot be opened.
        """
        ...


@runtime_checkable
class RemoteHandle(Protocol):
    """Capability to open the backing object of an artifact by name."""

    def open_reader(self, artifact_name: str) -> AbstractContextManager[BinaryIO]:
        """Open a fresh readable byte stream for the named artifact."""
        ...


__all__ = ["ObjectStore", "RemoteHandle"]
