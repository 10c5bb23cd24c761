"""Error taxonomy for the unpack pipeline.

Every error is fatal to the current unpack invocation.  Nothing is retried
or swallowed; errors carry the artifact name or file path needed to diagnose
a failure without re-running.
"""

from __future__ import annotations


class UnpackError(RuntimeError):
    """Base class for all unpack pipeline failures."""


class NotFoundError(UnpackError):
    """Raised when a required artifact kind is absent from a release."""


class AmbiguousError(UnpackError):
    """Raised when several artifacts exist where exactly one is required."""


class IntegrityError(UnpackError):
    """Raised when a downloaded artifact does not hash to its declared digest."""

    def __init__(self, artifact_name: str, expected: str, actual: str) -> None:
        self.artifact_name = artifact_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"artifact {artifact_name!r} has a mismatching checksum "
            f"(expected {expected}, got {actual}) - refusing to extract"
        )


class ExtractionError(UnpackError):
    """Raised on a malformed archive entry or a decompression failure."""


class ImageInspectionError(ExtractionError):
    """Raised when an image tarball carries no usable image metadata."""


class TraversalError(UnpackError):
    """Raised when walking an extracted tree fails."""


class StorageIOError(UnpackError):
    """Raised when reading from remote or local storage fails."""


class MetadataError(UnpackError):
    """Raised when release metadata cannot be read or validated."""


class UnpackCancelledError(UnpackError):
    """Raised when an unpack run observes its cancellation signal."""
