"""relstage data models — all Pydantic v2, all frozen (immutable)."""

from relstage.models.artifacts import (
    ArtifactKind,
    ArtifactRecord,
    ReleaseMetadata,
    infer_kind,
)
from relstage.models.bundle import (
    Chart,
    ComponentImageBundle,
    ImageDescriptor,
    UnpackedRelease,
    YAMLManifest,
)
from relstage.models.events import UnpackEvent, UnpackEventType

__all__ = [
    # artifacts
    "ArtifactKind",
    "ArtifactRecord",
    "ReleaseMetadata",
    "infer_kind",
    # bundle
    "Chart",
    "YAMLManifest",
    "ImageDescriptor",
    "ComponentImageBundle",
    "UnpackedRelease",
    # events
    "UnpackEvent",
    "UnpackEventType",
]
