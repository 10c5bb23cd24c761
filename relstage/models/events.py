"""Progress events emitted by the unpack orchestrator."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UnpackEventType(str, Enum):
    """Milestones reported while a staged release is unpacked."""

    UNPACK_STARTED = "unpack_started"
    ARTIFACT_SELECTED = "artifact_selected"
    ARTIFACT_VERIFIED = "artifact_verified"
    ARTIFACT_EXTRACTED = "artifact_extracted"
    CHARTS_FOUND = "charts_found"
    YAMLS_FOUND = "yamls_found"
    IMAGE_CLASSIFIED = "image_classified"
    UNPACK_COMPLETED = "unpack_completed"
    UNPACK_FAILED = "unpack_failed"


class UnpackEvent(BaseModel):
    """A single progress milestone for one unpack run."""

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    run_id: str
    event_type: UnpackEventType
    message: str
    artifact_name: str = ""
    details: dict[str, Any] = {}
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
