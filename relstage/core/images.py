"""Inspection of docker-archive image tarballs.

A ``docker save`` style tarball carries a top-level ``manifest.json`` listing
each image's config, layers and ``RepoTags``.  The image name of a tarball
is its first repo tag.
"""

from __future__ import annotations

import json
import tarfile
from pathlib import Path

from relstage.core.errors import ImageInspectionError

MANIFEST_MEMBER = "manifest.json"


def inspect_image_name(tar_path: Path | str) -> str:
    """Return the canonical image name recorded inside an image tarball.

    Raises
    ------
    ImageInspectionError
        If the tarball cannot be read or has no ``manifest.json`` repo tag.
    """
    tar_path = Path(tar_path)
    try:
        with tarfile.open(tar_path, mode="r:") as tar:
            try:
                member = tar.getmember(MANIFEST_MEMBER)
            except KeyError:
                raise ImageInspectionError(
                    f"image tar {tar_path} has no {MANIFEST_MEMBER}"
                ) from None
            stream = tar.extractfile(member)
            if stream is None:
                raise ImageInspectionError(
                    f"{MANIFEST_MEMBER} in image tar {tar_path} is not a regular file"
                )
            with stream:
                manifest = json.load(stream)
    except (tarfile.TarError, OSError) as exc:
        raise ImageInspectionError(f"failed to read image tar {tar_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ImageInspectionError(
            f"{MANIFEST_MEMBER} in image tar {tar_path} is not valid JSON: {exc}"
        ) from exc

    if not isinstance(manifest, list):
        raise ImageInspectionError(f"{MANIFEST_MEMBER} in image tar {tar_path} is not a list")
    for entry in manifest:
        tags = entry.get("RepoTags") if isinstance(entry, dict) else None
        if tags:
            return tags[0]
    raise ImageInspectionError(f"image tar {tar_path} declares no RepoTags")
