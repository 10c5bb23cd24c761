"""Integrity-verified download of staged artifacts.

The fetcher writes each artifact to its own local temporary file, flushes it
to disk, rewinds it and hashes the local copy.  Only a file whose digest
matches the declared ``sha256`` is handed back to the caller for extraction;
extraction later re-reads that verified copy without touching the network
again.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path

from relstage.core.cancellation import CancelScope
from relstage.core.errors import IntegrityError, StorageIOError, UnpackCancelledError
from relstage.core.hasher import DEFAULT_CHUNK_SIZE, sha256_stream
from relstage.models.artifacts import ArtifactRecord
from relstage.storage import RemoteHandle

logger = logging.getLogger(__name__)


class SecureFetcher:
    """Downloads artifacts through a ``RemoteHandle`` and verifies them.

    Parameters
    ----------
    remote:
        Capability that opens the backing object of an artifact.
    download_dir:
        Directory that receives the temporary download files.
    chunk_size:
        Copy and hash buffer size in bytes.
    cancel_event:
        Optional signal checked between chunks; when set the download stops
        and ``UnpackCancelledError`` is raised.
    """

    def __init__(
        self,
        remote: RemoteHandle,
        download_dir: Path,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        cancel_event: threading.Event | CancelScope | None = None,
    ) -> None:
        self._remote = remote
        self._download_dir = Path(download_dir)
        self._chunk_size = chunk_size
        self._cancel = cancel_event

    def _check_cancelled(self, record: ArtifactRecord) -> None:
        if self._cancel is not None and self._cancel.is_set():
            raise UnpackCancelledError(f"download of artifact {record.name!r} cancelled")

    def fetch(self, record: ArtifactRecord) -> Path:
        """Download *record* to a local file and verify its SHA-256 digest.

        Returns the path of the verified local copy.  On any failure the
        temporary file is removed and the error propagates.

        Raises
        ------
        IntegrityError
            If the local bytes do not hash to ``record.sha256``.
        StorageIOError
            If the remote object cannot be read or the local copy written.
        UnpackCancelledError
            If the cancel event is set during the download.
        """
        self._check_cancelled(record)
        self._download_dir.mkdir(parents=True, exist_ok=True)

        fh = tempfile.NamedTemporaryFile(
            dir=self._download_dir, prefix="temp-artifact-", delete=False
        )
        local_path = Path(fh.name)
        try:
            with fh:
                self._copy_remote(record, fh)
                fh.flush()
                os.fsync(fh.fileno())
                fh.seek(0)
                digest = sha256_stream(fh, self._chunk_size)
            if digest != record.sha256:
                raise IntegrityError(record.name, record.sha256, digest)
        except BaseException:
            local_path.unlink(missing_ok=True)
            raise

        logger.info("Validated sha256sum of artifact %r: %s", record.name, digest)
        return local_path

    def _copy_remote(self, record: ArtifactRecord, fh) -> None:
        copied = 0
        with self._remote.open_reader(record.name) as reader:
            while True:
                self._check_cancelled(record)
                try:
                    chunk = reader.read(self._chunk_size)
                except OSError as exc:
                    raise StorageIOError(
                        f"failed reading artifact {record.name!r} after {copied} bytes: {exc}"
                    ) from exc
                if not chunk:
                    break
                try:
                    fh.write(chunk)
                except OSError as exc:
                    raise StorageIOError(
                        f"failed writing local copy of artifact {record.name!r}: {exc}"
                    ) from exc
                copied += len(chunk)
        logger.debug("Downloaded %d bytes for artifact %r", copied, record.name)
