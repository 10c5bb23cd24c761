"""HTTP object store — streams objects from a bucket exposed over HTTP(S).

Object ``a/b.tar.gz`` is read from ``{base_url}/a/b.tar.gz``.  Authentication
is the caller's concern: pass a pre-configured ``requests.Session``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO
from urllib.parse import quote

import requests
import urllib3

from relstage.core.errors import StorageIOError

logger = logging.getLogger(__name__)


class _ResponseStream:
    """Binary reader over a streamed response body.

    Transport failures while reading (dropped connections, read timeouts)
    surface as ``StorageIOError`` naming the object.
    """

    def __init__(self, raw: BinaryIO, object_name: str, url: str) -> None:
        self._raw = raw
        self._object_name = object_name
        self._url = url

    def read(self, size: int = -1) -> bytes:
        try:
            return self._raw.read(size)
        except (urllib3.exceptions.HTTPError, requests.RequestException) as exc:
            raise StorageIOError(
                f"failed reading object {self._object_name!r} at {self._url}: {exc}"
            ) from exc


class HttpBucket:
    """Reads staged release objects with streaming GET requests.

    Parameters
    ----------
    base_url:
        URL prefix of the bucket, e.g. ``https://storage.example.com/releases``.
    session:
        Optional session carrying credentials or custom adapters.
    timeout:
        Connect/read timeout in seconds for each request.
    """

    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def store_name(self) -> str:
        return self._base_url

    def object_url(self, object_name: str) -> str:
        return f"{self._base_url}/{quote(object_name.lstrip('/'))}"

    @contextmanager
    def open(self, object_name: str) -> Iterator[BinaryIO]:
        url = self.object_url(object_name)
        try:
            response = self._session.get(url, stream=True, timeout=self._timeout)
        except requests.RequestException as exc:
            raise StorageIOError(f"failed to open object {object_name!r} at {url}: {exc}") from exc
        if not response.ok:
            response.close()
            raise StorageIOError(
                f"failed to open object {object_name!r} at {url}: HTTP {response.status_code}"
            )

        logger.debug("HttpBucket: streaming %s (status %s)", url, response.status_code)
        # Artifacts are hashed byte for byte; never undo a Content-Encoding
        response.raw.decode_content = False
        with response:
            yield _ResponseStream(response.raw, object_name, url)
