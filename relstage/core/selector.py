"""Artifact selection by kind, with cardinality rules for single-result kinds."""

from __future__ import annotations

from relstage.core.errors import AmbiguousError, NotFoundError
from relstage.core.staged import StagedRelease
from relstage.models.artifacts import ArtifactKind, ArtifactRecord


def artifacts_of_kind(release: StagedRelease, kind: ArtifactKind) -> list[ArtifactRecord]:
    """Return every artifact of *kind* in the release's declared order."""
    return [a for a in release.metadata.artifacts if a.kind is kind]


def manifests_artifact(release: StagedRelease) -> ArtifactRecord:
    """Return the release's single ``manifests`` artifact.

    Raises
    ------
    NotFoundError
        If the release declares no manifests artifact.
    AmbiguousError
        If it declares more than one.
    """
    artifacts = artifacts_of_kind(release, ArtifactKind.MANIFESTS)
    if not artifacts:
        raise NotFoundError(
            f"cannot find 'manifests' artifact in staged release {release.name!r}"
        )
    if len(artifacts) > 1:
        raise AmbiguousError(
            f"found multiple 'manifests' artifacts in staged release {release.name!r}"
        )
    return artifacts[0]
