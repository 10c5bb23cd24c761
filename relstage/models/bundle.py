"""Unpacked release models — what the pipeline hands to downstream consumers."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class Chart(BaseModel):
    """A packaged Helm chart (``.tgz``) found in the manifests archive."""

    model_config = ConfigDict(frozen=True)

    path: Path

    @property
    def name(self) -> str:
        return self.path.stem


class YAMLManifest(BaseModel):
    """A static Kubernetes manifest (``.yaml``) found in the manifests archive."""

    model_config = ConfigDict(frozen=True)

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


class ImageDescriptor(BaseModel):
    """A container image tarball found in a server archive.

    ``image_name`` is read from the tarball's own metadata, not its filename.
    ``os`` and ``architecture`` come from the artifact that contained it.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    os: str
    architecture: str
    image_name: str


ComponentImageBundle = dict[str, list[ImageDescriptor]]


class UnpackedRelease(BaseModel):
    """A staged release that has been fetched, verified and unpacked locally.

    Every path in the release lives under ``workspace``.  The caller owns
    that directory once unpacking succeeds and releases it with
    :meth:`cleanup`.
    """

    model_config = ConfigDict(frozen=True)

    release_version: str
    git_commit_ref: str
    charts: list[Chart] = []
    yamls: list[YAMLManifest] = []
    component_image_bundles: ComponentImageBundle = {}
    workspace: Path | None = None

    def cleanup(self) -> None:
        """Remove the workspace directory holding the unpacked files."""
        if self.workspace is None:
            return
        logger.debug("Removing unpack workspace %s", self.workspace)
        shutil.rmtree(self.workspace, ignore_errors=True)
