"""Directory-backed object store.

Layout: {root}/{object_name}, where object names use ``/`` separators.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from relstage.core.errors import StorageIOError

logger = logging.getLogger(__name__)


class LocalBucket:
    """Serves staged release objects from a local directory.

    Parameters
    ----------
    root:
        Directory that plays the role of the bucket root.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def store_name(self) -> str:
        return str(self._root)

    def _object_path(self, object_name: str) -> Path:
        relative = PurePosixPath(object_name)
        if relative.is_absolute() or ".." in relative.parts:
            raise StorageIOError(f"invalid object name {object_name!r}")
        return self._root.joinpath(*relative.parts)

    @contextmanager
    def open(self, object_name: str) -> Iterator[BinaryIO]:
        path = self._object_path(object_name)
        try:
            fh = open(path, "rb")
        except OSError as exc:
            raise StorageIOError(
                f"failed to open object {object_name!r} in {self._root}: {exc}"
            ) from exc
        logger.debug("LocalBucket: opened %s", path)
        with fh:
            yield fh
