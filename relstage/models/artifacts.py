"""Release metadata models: artifact records and the release they belong to."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ArtifactKind(str, Enum):
    """The closed set of artifact kinds a staged release may contain."""

    MANIFESTS = "manifests"
    SERVER = "server"
    CLIENT = "client"


def infer_kind(name: str) -> ArtifactKind:
    """Infer an artifact's kind from its staged file name.

    Staged names follow ``<project>-manifests.tar.gz``,
    ``<project>-server-<os>-<arch>.tar.gz`` and
    ``<project>-<tool>-<os>-<arch>.tar.gz`` for client tools.
    """
    if name.endswith("-manifests.tar.gz"):
        return ArtifactKind.MANIFESTS
    if "-server-" in name:
        return ArtifactKind.SERVER
    return ArtifactKind.CLIENT


class ArtifactRecord(BaseModel):
    """One staged artifact as declared in the release metadata.

    ``sha256`` is the lowercase hex digest the downloaded bytes must match
    before anything extracts them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    sha256: str = Field(pattern=r"^[0-9a-f]{64}$")
    os: str = ""
    architecture: str = ""
    kind: ArtifactKind

    @model_validator(mode="before")
    @classmethod
    def _default_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("kind") and data.get("name"):
            data = {**data, "kind": infer_kind(data["name"])}
        return data

    @property
    def platform(self) -> str:
        """``os/architecture``, or an empty string for platform-less artifacts."""
        if not self.os and not self.architecture:
            return ""
        return f"{self.os}/{self.architecture}"


class ReleaseMetadata(BaseModel):
    """The published metadata document for one staged release."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    release_version: str = Field(default="", alias="releaseVersion")
    git_commit_ref: str = Field(alias="gitCommitRef")
    artifacts: list[ArtifactRecord] = []
