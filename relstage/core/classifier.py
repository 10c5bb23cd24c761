"""Grouping of discovered image tarballs into per-component bundles.

A component's name is the image tarball's base filename with its extension
stripped and nothing else changed, so ``cainjector.tar`` from the amd64 and
arm64 server archives lands under the same ``cainjector`` key.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from relstage.core.errors import ImageInspectionError
from relstage.core.images import inspect_image_name
from relstage.core.scanner import file_extension
from relstage.models.bundle import ComponentImageBundle, ImageDescriptor

logger = logging.getLogger(__name__)


def component_name(path: Path | str) -> str:
    """Return the base name of *path* with its final extension stripped."""
    base = Path(path).name
    return base[: len(base) - len(file_extension(base))]


class ComponentBundleAccumulator:
    """Single-writer accumulator for the shared component image bundle map.

    All mutation goes through :meth:`add` under a lock; readers take an
    ordered copy with :meth:`snapshot`.  Per-component order is insertion
    order.

    Parameters
    ----------
    inspect:
        Callable returning the image name recorded inside a tarball.
    """

    def __init__(self, inspect: Callable[[Path], str] = inspect_image_name) -> None:
        self._inspect = inspect
        self._bundles: ComponentImageBundle = {}
        self._lock = threading.Lock()

    def add(self, component: str, descriptor: ImageDescriptor) -> None:
        with self._lock:
            self._bundles.setdefault(component, []).append(descriptor)

    def classify(
        self, image_paths: Iterable[Path], os_name: str, architecture: str
    ) -> list[ImageDescriptor]:
        """Describe each image tarball and append it under its component.

        Returns the descriptors created by this call, in input order.

        Raises
        ------
        ImageInspectionError
            If a tarball's image metadata cannot be read.
        """
        created: list[ImageDescriptor] = []
        for path in image_paths:
            path = Path(path)
            try:
                image_name = self._inspect(path)
            except ImageInspectionError as exc:
                raise ImageInspectionError(
                    f"failed to inspect image tar at path {str(path)!r}: {exc}"
                ) from exc

            component = component_name(path)
            descriptor = ImageDescriptor(
                path=path,
                os=os_name,
                architecture=architecture,
                image_name=image_name,
            )
            self.add(component, descriptor)
            created.append(descriptor)
            logger.info("Found image for component %r with name %r", component, image_name)
        return created

    def snapshot(self) -> ComponentImageBundle:
        with self._lock:
            return {name: list(images) for name, images in self._bundles.items()}

    def __len__(self) -> int:
        with self._lock:
            return len(self._bundles)
