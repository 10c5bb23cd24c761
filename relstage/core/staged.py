"""Staged releases: release metadata bound to the store that holds its artifacts."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

from pydantic import ValidationError

from relstage.core.errors import MetadataError, StorageIOError
from relstage.models.artifacts import ArtifactRecord, ReleaseMetadata
from relstage.storage import ObjectStore

logger = logging.getLogger(__name__)

METADATA_FILE_NAME = "metadata.json"


class StagedRelease:
    """A release staged under ``name`` in an object store.

    Artifacts are stored next to the metadata document, so an artifact's
    object name is ``{name}/{artifact.name}``.  A ``StagedRelease`` satisfies
    the ``RemoteHandle`` protocol for its own artifacts.

    Parameters
    ----------
    name:
        Object name prefix of the release, e.g. ``stage/gcb/release/v1.4.0``.
    metadata:
        The release's published metadata.
    store:
        Backend that serves the release's objects.
    """

    def __init__(self, name: str, metadata: ReleaseMetadata, store: ObjectStore) -> None:
        self.name = name.strip("/")
        self.metadata = metadata
        self._store = store

    def __repr__(self) -> str:
        return f"StagedRelease(name={self.name!r}, version={self.metadata.release_version!r})"

    @property
    def artifacts(self) -> list[ArtifactRecord]:
        return list(self.metadata.artifacts)

    def object_name(self, artifact_name: str) -> str:
        if not self.name:
            return artifact_name
        return f"{self.name}/{artifact_name}"

    @contextmanager
    def open_reader(self, artifact_name: str) -> Iterator[BinaryIO]:
        with self._store.open(self.object_name(artifact_name)) as reader:
            yield reader


def parse_metadata(raw: bytes | str, source: str = "<memory>") -> ReleaseMetadata:
    """Parse a ``metadata.json`` document into :class:`ReleaseMetadata`."""
    try:
        return ReleaseMetadata.model_validate(json.loads(raw))
    except json.JSONDecodeError as exc:
        raise MetadataError(f"release metadata at {source} is not valid JSON: {exc}") from exc
    except ValidationError as exc:
        raise MetadataError(f"release metadata at {source} is invalid: {exc}") from exc


def load_staged_release(
    store: ObjectStore,
    name: str,
    metadata_file_name: str = METADATA_FILE_NAME,
) -> StagedRelease:
    """Read a release's metadata document from *store* and bind them together."""
    name = name.strip("/")
    object_name = f"{name}/{metadata_file_name}" if name else metadata_file_name
    try:
        with store.open(object_name) as reader:
            raw = reader.read()
    except StorageIOError as exc:
        raise MetadataError(f"cannot read metadata for staged release {name!r}: {exc}") from exc

    metadata = parse_metadata(raw, source=f"{store.store_name}/{object_name}")
    logger.info(
        "Loaded staged release %r (version %r, %d artifacts)",
        name,
        metadata.release_version,
        len(metadata.artifacts),
    )
    return StagedRelease(name, metadata, store)
