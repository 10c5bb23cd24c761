"""Shared test fixtures for relstage."""

from __future__ import annotations

import io
import json
import tarfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from relstage.config import UnpackSettings
from relstage.core.hasher import sha256_file
from relstage.core.staged import StagedRelease, load_staged_release
from relstage.routing.sinks.memory import MemorySink
from relstage.storage.local import LocalBucket

RELEASE_NAME = "stage/gcb/release/v1.4.0-abc1234"


def write_tar_gz(path: Path, members: dict[str, bytes]) -> Path:
    """Write a gzip tarball containing *members* (name -> bytes) to *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, mode="w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return path


def image_tar_bytes(image_name: str | None) -> bytes:
    """Build an uncompressed docker-archive tarball tagged *image_name*."""
    manifest = [{
        "Config": "config.json",
        "RepoTags": [image_name] if image_name else [],
        "Layers": [],
    }]
    payloads = {
        "manifest.json": json.dumps(manifest).encode(),
        "config.json": b"{}",
    }
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w") as tar:
        for name, data in payloads.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def bucket_root(tmp_dir: Path) -> Path:
    root = tmp_dir / "bucket"
    root.mkdir()
    return root


@pytest.fixture
def bucket(bucket_root: Path) -> LocalBucket:
    """Provide a LocalBucket rooted in a temp directory."""
    return LocalBucket(bucket_root)


@pytest.fixture
def settings(tmp_dir: Path) -> UnpackSettings:
    """Settings with a temp work dir and a small copy buffer."""
    return UnpackSettings(work_dir=tmp_dir / "work", chunk_size=64, max_workers=2)


@pytest.fixture
def memory_sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def stage_release(
    bucket: LocalBucket, bucket_root: Path
) -> Callable[..., StagedRelease]:
    """Factory fixture: write artifacts plus metadata.json and load the release.

    Each artifact spec is a dict with ``name``, ``members`` (archive
    contents) and optional ``kind``, ``os``, ``architecture`` and ``sha256``
    (to declare a digest that differs from the real one).
    """

    def _factory(
        artifacts: list[dict[str, Any]],
        *,
        name: str = RELEASE_NAME,
        release_version: str = "v1.4.0",
        git_commit_ref: str = "abc1234def5678",
    ) -> StagedRelease:
        records = []
        for spec in artifacts:
            path = write_tar_gz(bucket_root / name / spec["name"], spec.get("members", {}))
            record = {
                "name": spec["name"],
                "sha256": spec.get("sha256") or sha256_file(path),
                "os": spec.get("os", ""),
                "architecture": spec.get("architecture", ""),
            }
            if "kind" in spec:
                record["kind"] = spec["kind"]
            records.append(record)

        metadata = {
            "releaseVersion": release_version,
            "gitCommitRef": git_commit_ref,
            "artifacts": records,
        }
        meta_path = bucket_root / name / "metadata.json"
        meta_path.parent.mkdir(parents=True, exist_ok=True)
        meta_path.write_text(json.dumps(metadata, indent=1))
        return load_staged_release(bucket, name)

    return _factory


@pytest.fixture
def make_tar_gz() -> Callable[[Path, dict[str, bytes]], Path]:
    """Factory fixture: write a gzip tarball from a name -> bytes mapping."""
    return write_tar_gz


@pytest.fixture
def make_image_tar() -> Callable[[str | None], bytes]:
    """Factory fixture: build docker-archive image tarball bytes."""
    return image_tar_bytes
