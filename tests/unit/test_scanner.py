"""Tests for recursive, exact-extension file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from relstage.core.errors import TraversalError
from relstage.core.scanner import find_with_extension


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


class TestFindWithExtension:
    def test_exact_and_recursive(self, tmp_path: Path):
        _touch(tmp_path / "a.yaml")
        _touch(tmp_path / "b.YAML")
        _touch(tmp_path / "c" / "d.yaml")

        found = find_with_extension(tmp_path, ".yaml")
        assert found == [tmp_path / "a.yaml", tmp_path / "c" / "d.yaml"]

    def test_no_match_returns_empty(self, tmp_path: Path):
        _touch(tmp_path / "chart.tgz")
        assert find_with_extension(tmp_path, ".yaml") == []

    def test_directories_never_match(self, tmp_path: Path):
        (tmp_path / "images.tar").mkdir()
        _touch(tmp_path / "images.tar" / "controller.tar")
        assert find_with_extension(tmp_path, ".tar") == [
            tmp_path / "images.tar" / "controller.tar"
        ]

    def test_only_final_suffix_counts(self, tmp_path: Path):
        _touch(tmp_path / "server.tar.gz")
        _touch(tmp_path / "webhook.tar")
        assert find_with_extension(tmp_path, ".tar") == [tmp_path / "webhook.tar"]

    def test_directories_descended_in_lexical_position(self, tmp_path: Path):
        for rel in ["z.tar", "b/y.tar", "a.tar", "b/a.tar", "a/z.tar"]:
            _touch(tmp_path / rel)

        found = [p.relative_to(tmp_path).as_posix() for p in find_with_extension(tmp_path, ".tar")]
        assert found == ["a/z.tar", "a.tar", "b/a.tar", "b/y.tar", "z.tar"]

    def test_dotfile_matches_its_extension(self, tmp_path: Path):
        _touch(tmp_path / ".tar")
        _touch(tmp_path / "tar")
        assert find_with_extension(tmp_path, ".tar") == [tmp_path / ".tar"]

    def test_missing_root_raises(self, tmp_path: Path):
        with pytest.raises(TraversalError, match="missing"):
            find_with_extension(tmp_path / "missing", ".yaml")
