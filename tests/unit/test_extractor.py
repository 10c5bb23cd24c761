"""Tests for gzip tarball extraction."""

from __future__ import annotations

import io
import os
import tarfile
from pathlib import Path

import pytest

from relstage.core.errors import ExtractionError
from relstage.core.extractor import extract_tar_gz


def _tar_with(path: Path, *members: tarfile.TarInfo) -> Path:
    with tarfile.open(path, mode="w:gz") as tar:
        for info in members:
            tar.addfile(info, io.BytesIO(b"x" * info.size) if info.isfile() else None)
    return path


class TestExtractTarGz:
    def test_preserves_directory_structure(self, tmp_path: Path, make_tar_gz):
        archive = make_tar_gz(tmp_path / "a.tar.gz", {
            "deploy/chart.tgz": b"chart",
            "deploy/manifests/install.yaml": b"kind: List",
            "README": b"readme",
        })
        dest = tmp_path / "out"
        extracted = extract_tar_gz(archive, dest)

        assert (dest / "deploy" / "chart.tgz").read_bytes() == b"chart"
        assert (dest / "deploy" / "manifests" / "install.yaml").read_bytes() == b"kind: List"
        assert (dest / "README").read_bytes() == b"readme"
        assert len(extracted) == 3

    def test_creates_destination(self, tmp_path: Path, make_tar_gz):
        archive = make_tar_gz(tmp_path / "a.tar.gz", {"f": b"1"})
        dest = tmp_path / "nested" / "dest"
        extract_tar_gz(archive, dest)
        assert (dest / "f").exists()

    def test_not_gzip_raises_with_archive_path(self, tmp_path: Path):
        archive = tmp_path / "broken.tar.gz"
        archive.write_bytes(b"definitely not gzip")
        with pytest.raises(ExtractionError, match="broken.tar.gz"):
            extract_tar_gz(archive, tmp_path / "out")

    def test_truncated_archive_raises(self, tmp_path: Path, make_tar_gz):
        archive = make_tar_gz(tmp_path / "full.tar.gz", {"big": os.urandom(50_000)})
        truncated = tmp_path / "truncated.tar.gz"
        truncated.write_bytes(archive.read_bytes()[:200])
        with pytest.raises(ExtractionError, match="truncated.tar.gz"):
            extract_tar_gz(truncated, tmp_path / "out")

    def test_missing_archive_raises(self, tmp_path: Path):
        with pytest.raises(ExtractionError):
            extract_tar_gz(tmp_path / "missing.tar.gz", tmp_path / "out")

    def test_rejects_parent_traversal(self, tmp_path: Path):
        info = tarfile.TarInfo("../escape.txt")
        info.size = 1
        archive = _tar_with(tmp_path / "evil.tar.gz", info)
        with pytest.raises(ExtractionError, match="escapes"):
            extract_tar_gz(archive, tmp_path / "out")
        assert not (tmp_path / "escape.txt").exists()

    def test_rejects_absolute_names(self, tmp_path: Path):
        info = tarfile.TarInfo("/etc/evil")
        info.size = 1
        archive = _tar_with(tmp_path / "abs.tar.gz", info)
        with pytest.raises(ExtractionError):
            extract_tar_gz(archive, tmp_path / "out")

    def test_rejects_symlink_outside(self, tmp_path: Path):
        info = tarfile.TarInfo("link")
        info.type = tarfile.SYMTYPE
        info.linkname = "../../outside"
        archive = _tar_with(tmp_path / "link.tar.gz", info)
        with pytest.raises(ExtractionError, match="symlink"):
            extract_tar_gz(archive, tmp_path / "out")

    def test_rejects_device_entries(self, tmp_path: Path):
        info = tarfile.TarInfo("dev")
        info.type = tarfile.CHRTYPE
        archive = _tar_with(tmp_path / "dev.tar.gz", info)
        with pytest.raises(ExtractionError, match="unsupported"):
            extract_tar_gz(archive, tmp_path / "out")
