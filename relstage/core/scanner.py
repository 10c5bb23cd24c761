"""Deterministic recursive file discovery by exact extension."""

from __future__ import annotations

import os
from pathlib import Path

from relstage.core.errors import TraversalError


def file_extension(name: str) -> str:
    """Return the suffix of *name* from its last dot, or ``""`` if it has none.

    Unlike ``Path.suffix``, a dotfile such as ``.tar`` has the extension
    ``.tar``.
    """
    base = os.path.basename(name)
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def find_with_extension(root: Path | str, extension: str) -> list[Path]:
    """Recursively collect regular files under *root* whose extension is *extension*.

    Matching is an exact, case-sensitive comparison against
    :func:`file_extension`, so ``b.YAML`` does not match ``.yaml``.  Entries
    are visited in lexicographic order and each subdirectory is descended
    where it sorts, so ``a/z.tar`` comes before ``a.tar``.  Directories never
    match.

    Raises
    ------
    TraversalError
        If *root* or any directory below it cannot be read.
    """
    root = Path(root)
    found: list[Path] = []

    def _walk(directory: Path) -> None:
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as exc:
            raise TraversalError(f"failed to walk {directory}: {exc}") from exc

        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file(follow_symlinks=False)
            except OSError as exc:
                raise TraversalError(f"failed to stat {entry.path}: {exc}") from exc

            if is_dir:
                _walk(Path(entry.path))
            elif is_file and file_extension(entry.name) == extension:
                found.append(Path(entry.path))

    _walk(root)
    return found
