"""Runtime configuration — env-driven via pydantic-settings.

Reads from a ``.env`` file and ``RELSTAGE_*`` environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from relstage.core.hasher import DEFAULT_CHUNK_SIZE
from relstage.core.staged import METADATA_FILE_NAME


class UnpackSettings(BaseSettings):
    """Settings for unpacking staged releases.

    Examples
    --------
    Override via environment::

        export RELSTAGE_LOG_LEVEL=DEBUG
        export RELSTAGE_MAX_WORKERS=8
        export RELSTAGE_WORK_DIR=/scratch/relstage
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RELSTAGE_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Parent directory for per-run workspaces; None means the system temp dir
    work_dir: Path | None = None

    # Server artifacts are fetched/extracted by a bounded worker pool
    max_workers: int = Field(default=4, ge=1)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)

    # Leave the workspace on disk after a failed run, for debugging
    keep_workspace_on_error: bool = False

    metadata_file_name: str = METADATA_FILE_NAME
