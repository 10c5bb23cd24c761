"""relstage: fetch, verify and unpack staged software releases.

A staged release is a ``metadata.json`` document plus the gzip tarballs it
lists: one ``manifests`` archive (Helm charts and static YAML) and one
``server`` archive per OS/architecture holding container image tarballs.
``Unpacker`` turns it into an in-memory ``UnpackedRelease`` for downstream
signing and publishing.
"""

__version__ = "0.1.0"

from relstage.core.staged import StagedRelease, load_staged_release
from relstage.core.unpacker import Unpacker, unpack, unpacked
from relstage.models.bundle import UnpackedRelease

__all__ = [
    "StagedRelease",
    "Unpacker",
    "UnpackedRelease",
    "load_staged_release",
    "unpack",
    "unpacked",
    "__version__",
]
