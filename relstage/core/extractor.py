"""Gzip tarball extraction into a single, caller-owned destination directory.

Extraction is fail-fast: the first bad entry aborts the whole archive.  A
partially populated destination must be treated as unusable by the caller.
"""

from __future__ import annotations

import logging
import tarfile
from pathlib import Path

from relstage.core.errors import ExtractionError

logger = logging.getLogger(__name__)


def _check_member(member: tarfile.TarInfo, destination: Path) -> None:
    """Reject entries that are not plain files, dirs or contained links."""
    if not (member.isfile() or member.isdir() or member.issym() or member.islnk()):
        raise ExtractionError(f"unsupported entry type for {member.name!r}")

    target = (destination / member.name).resolve()
    if not target.is_relative_to(destination):
        raise ExtractionError(f"entry {member.name!r} escapes the destination")

    if member.issym():
        link_target = (target.parent / member.linkname).resolve()
        if not link_target.is_relative_to(destination):
            raise ExtractionError(
                f"symlink {member.name!r} points outside the destination"
            )
    elif member.islnk():
        link_target = (destination / member.linkname).resolve()
        if not link_target.is_relative_to(destination):
            raise ExtractionError(
                f"hardlink {member.name!r} points outside the destination"
            )


def extract_tar_gz(archive_path: Path | str, destination: Path | str) -> list[Path]:
    """Extract every entry of a gzip tar archive into *destination*.

    Relative directory structure inside the archive is preserved.

    Returns
    -------
    list[Path]
        Paths of the extracted entries, in archive order.

    Raises
    ------
    ExtractionError
        On the first malformed entry or decompression failure, wrapped with
        the archive path.
    """
    archive_path = Path(archive_path)
    destination = Path(destination).resolve()
    destination.mkdir(parents=True, exist_ok=True)

    extracted: list[Path] = []
    try:
        with tarfile.open(archive_path, mode="r:gz") as tar:
            tar.errorlevel = 1
            for member in tar:
                _check_member(member, destination)
                tar.extract(member, destination, filter="data")
                extracted.append(destination / member.name)
    except ExtractionError as exc:
        raise ExtractionError(f"failed to extract {archive_path}: {exc}") from exc
    except (tarfile.TarError, OSError, EOFError) as exc:
        raise ExtractionError(f"failed to extract {archive_path}: {exc}") from exc

    logger.debug("Extracted %d entries from %s into %s", len(extracted), archive_path, destination)
    return extracted
