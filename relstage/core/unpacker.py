"""Unpack orchestrator — turns a staged release into an ``UnpackedRelease``.

The run is linear and fail-fast::

    START -> manifests selected -> fetched -> extracted -> charts/yaml scanned
          -> [per server artifact: fetched -> extracted -> images scanned]
          -> classified -> assembled -> DONE

Server artifacts are fetched and extracted by a bounded worker pool.  Their
image tarballs are classified on the coordinating thread in (os,
architecture, declaration) order, so the per-component bundle order does
not depend on which download finishes first.

Every run gets its own workspace directory.  On failure the orchestrator
removes it and raises; no partial result is ever returned.  On success the
workspace belongs to the returned ``UnpackedRelease`` and the caller
releases it with ``UnpackedRelease.cleanup()`` (or uses :func:`unpacked`).
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import threading
import uuid
from collections.abc import Callable, Iterator
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from relstage.config import UnpackSettings
from relstage.core.cancellation import CancelScope
from relstage.core.classifier import ComponentBundleAccumulator
from relstage.core.errors import UnpackCancelledError
from relstage.core.extractor import extract_tar_gz
from relstage.core.fetcher import SecureFetcher
from relstage.core.images import inspect_image_name
from relstage.core.scanner import find_with_extension
from relstage.core.selector import artifacts_of_kind, manifests_artifact
from relstage.core.staged import StagedRelease
from relstage.models.artifacts import ArtifactKind, ArtifactRecord
from relstage.models.bundle import Chart, UnpackedRelease, YAMLManifest
from relstage.models.events import UnpackEvent, UnpackEventType
from relstage.routing.dispatcher import SinkDispatcher
from relstage.routing.sinks import BaseSink
from relstage.routing.sinks.logging_sink import LoggingSink

logger = logging.getLogger(__name__)

CHART_EXTENSION = ".tgz"
YAML_EXTENSION = ".yaml"
IMAGE_EXTENSION = ".tar"


class Unpacker:
    """Fetches, verifies, extracts and classifies a staged release.

    Parameters
    ----------
    settings:
        Runtime settings.  Uses defaults (and ``RELSTAGE_*`` env vars) if
        not provided.
    sink:
        Receives progress events.  Defaults to a ``LoggingSink``.  Sink
        failures are logged and never abort a run.
    inspect:
        Reads the image name recorded inside an image tarball.
    """

    def __init__(
        self,
        settings: UnpackSettings | None = None,
        sink: BaseSink | None = None,
        *,
        inspect: Callable[[Path], str] = inspect_image_name,
    ) -> None:
        self.settings = settings or UnpackSettings()
        if isinstance(sink, SinkDispatcher):
            self._dispatcher = sink
        else:
            self._dispatcher = SinkDispatcher([sink or LoggingSink()])
        self._inspect = inspect

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def unpack(
        self,
        release: StagedRelease,
        cancel_event: threading.Event | None = None,
    ) -> UnpackedRelease:
        """Unpack *release* into a fresh workspace.

        Parameters
        ----------
        release:
            The staged release to unpack.
        cancel_event:
            Optional external abort signal, observed between artifacts and
            between download chunks.

        Raises
        ------
        UnpackError
            Any failure; the run's workspace has already been removed unless
            ``keep_workspace_on_error`` is set.
        """
        ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        run_id = f"unpack-{ts}-{uuid.uuid4().hex[:6]}"

        work_dir = self.settings.work_dir
        if work_dir is not None:
            Path(work_dir).mkdir(parents=True, exist_ok=True)
        workspace = Path(tempfile.mkdtemp(prefix="relstage-", dir=work_dir))

        self._emit(
            run_id,
            UnpackEventType.UNPACK_STARTED,
            f"Unpacking staged release {release.name!r}",
            workspace=str(workspace),
        )

        scope = CancelScope(cancel_event)
        try:
            result = self._run(run_id, release, workspace, scope)
        except BaseException as exc:
            scope.set()
            self._emit(
                run_id,
                UnpackEventType.UNPACK_FAILED,
                f"Unpacking staged release {release.name!r} failed: {exc}",
                error=type(exc).__name__,
            )
            if self.settings.keep_workspace_on_error:
                logger.warning("Keeping workspace of failed run at %s", workspace)
            else:
                shutil.rmtree(workspace, ignore_errors=True)
            raise

        self._emit(
            run_id,
            UnpackEventType.UNPACK_COMPLETED,
            f"Extracted {len(result.component_image_bundles)} component bundles "
            f"from staged release {release.name!r}",
            charts=len(result.charts),
            yamls=len(result.yamls),
            components=len(result.component_image_bundles),
        )
        return result

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run(
        self,
        run_id: str,
        release: StagedRelease,
        workspace: Path,
        scope: CancelScope,
    ) -> UnpackedRelease:
        fetcher = SecureFetcher(
            release,
            workspace / "downloads",
            chunk_size=self.settings.chunk_size,
            cancel_event=scope,
        )

        manifests = manifests_artifact(release)
        self._emit(
            run_id,
            UnpackEventType.ARTIFACT_SELECTED,
            "Unpacking 'manifests' type artifact",
            artifact_name=manifests.name,
        )
        manifests_dir = self._fetch_and_extract(run_id, fetcher, manifests, workspace, scope)

        charts = [Chart(path=p) for p in find_with_extension(manifests_dir, CHART_EXTENSION)]
        self._emit(
            run_id,
            UnpackEventType.CHARTS_FOUND,
            f"Extracted {len(charts)} Helm charts from manifests archive",
            artifact_name=manifests.name,
            count=len(charts),
        )
        yamls = [YAMLManifest(path=p) for p in find_with_extension(manifests_dir, YAML_EXTENSION)]
        self._emit(
            run_id,
            UnpackEventType.YAMLS_FOUND,
            f"Extracted {len(yamls)} YAML manifests from manifests archive",
            artifact_name=manifests.name,
            count=len(yamls),
        )

        bundles = self._unpack_server_images(run_id, release, fetcher, workspace, scope)

        return UnpackedRelease(
            release_version=release.metadata.release_version,
            git_commit_ref=release.metadata.git_commit_ref,
            charts=charts,
            yamls=yamls,
            component_image_bundles=bundles.snapshot(),
            workspace=workspace,
        )

    def _unpack_server_images(
        self,
        run_id: str,
        release: StagedRelease,
        fetcher: SecureFetcher,
        workspace: Path,
        scope: CancelScope,
    ) -> ComponentBundleAccumulator:
        servers = artifacts_of_kind(release, ArtifactKind.SERVER)
        ordered = [
            record
            for _, record in sorted(
                enumerate(servers),
                key=lambda item: (item[1].os, item[1].architecture, item[0]),
            )
        ]
        self._emit(
            run_id,
            UnpackEventType.ARTIFACT_SELECTED,
            f"Unpacking {len(ordered)} 'server' type artifacts",
            artifacts=[a.name for a in ordered],
        )

        def _prepare(record: ArtifactRecord) -> list[Path]:
            directory = self._fetch_and_extract(run_id, fetcher, record, workspace, scope)
            return find_with_extension(directory, IMAGE_EXTENSION)

        accumulator = ComponentBundleAccumulator(self._inspect)
        if not ordered:
            return accumulator

        workers = min(self.settings.max_workers, len(ordered))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="relstage") as pool:
            futures: list[Future[list[Path]]] = [pool.submit(_prepare, r) for r in ordered]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            failed = [f for f in futures if f in done and f.exception() is not None]
            if failed:
                scope.set()
                for future in futures:
                    future.cancel()
                # Report the first failure in dispatch order
                raise failed[0].exception()

        for record, future in zip(ordered, futures):
            self._check_cancelled(scope, record)
            images = accumulator.classify(future.result(), record.os, record.architecture)
            self._emit(
                run_id,
                UnpackEventType.IMAGE_CLASSIFIED,
                f"Classified {len(images)} images from artifact {record.name!r}",
                artifact_name=record.name,
                images=[d.image_name for d in images],
            )
        return accumulator

    def _fetch_and_extract(
        self,
        run_id: str,
        fetcher: SecureFetcher,
        record: ArtifactRecord,
        workspace: Path,
        scope: CancelScope,
    ) -> Path:
        """Fetch and verify one artifact, then extract it into its own directory."""
        self._check_cancelled(scope, record)
        local_path = fetcher.fetch(record)
        self._emit(
            run_id,
            UnpackEventType.ARTIFACT_VERIFIED,
            f"Validated sha256sum of artifact {record.name!r}",
            artifact_name=record.name,
            sha256=record.sha256,
        )

        self._check_cancelled(scope, record)
        extract_root = workspace / "extracted"
        extract_root.mkdir(parents=True, exist_ok=True)
        destination = Path(tempfile.mkdtemp(prefix="extracted-artifact-", dir=extract_root))
        extract_tar_gz(local_path, destination)
        local_path.unlink(missing_ok=True)
        self._emit(
            run_id,
            UnpackEventType.ARTIFACT_EXTRACTED,
            f"Unpacked artifact {record.name!r} to directory: {destination}",
            artifact_name=record.name,
            directory=str(destination),
        )
        return destination

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_cancelled(scope: CancelScope, record: ArtifactRecord) -> None:
        if scope.is_set():
            raise UnpackCancelledError(f"unpack cancelled before artifact {record.name!r}")

    def _emit(
        self,
        run_id: str,
        event_type: UnpackEventType,
        message: str,
        artifact_name: str = "",
        **details: Any,
    ) -> None:
        self._dispatcher.accept(
            UnpackEvent(
                run_id=run_id,
                event_type=event_type,
                message=message,
                artifact_name=artifact_name,
                details=details,
            )
        )


def unpack(
    release: StagedRelease,
    settings: UnpackSettings | None = None,
    sink: BaseSink | None = None,
    cancel_event: threading.Event | None = None,
) -> UnpackedRelease:
    """Convenience wrapper: ``Unpacker(settings, sink).unpack(release)``."""
    return Unpacker(settings, sink).unpack(release, cancel_event)


@contextmanager
def unpacked(
    release: StagedRelease,
    settings: UnpackSettings | None = None,
    sink: BaseSink | None = None,
    cancel_event: threading.Event | None = None,
) -> Iterator[UnpackedRelease]:
    """Unpack *release* and remove its workspace when the block exits."""
    result = unpack(release, settings, sink, cancel_event)
    try:
        yield result
    finally:
        result.cleanup()
