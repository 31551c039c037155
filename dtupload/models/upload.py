"""Models for the build upload workflow.

Provides the init payload model, the single-use upload session, and the
result types returned by every step of the job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import Field

from dtupload.models.base import BaseModel


class UploadOutcome(Enum):
    """Classification of a step's result."""

    SUCCESS = "success"
    DRY_RUN = "dry_run"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"
    CREDENTIAL_ERROR = "credential_error"
    PROTOCOL_ERROR = "protocol_error"
    SERVER_ERROR = "server_error"
    TRANSPORT_ERROR = "transport_error"
    IO_ERROR = "io_error"

    @property
    def is_success(self) -> bool:
        return self in (UploadOutcome.SUCCESS, UploadOutcome.DRY_RUN)


class UploadPhase(Enum):
    """States of the send-build job step."""

    LOCATE = "locate"
    NEGOTIATE = "negotiate"
    UPLOAD = "upload"
    DONE = "done"


class BuildResult(Enum):
    """CI build status, ordered from best to worst."""

    SUCCESS = 0
    UNSTABLE = 1
    FAILURE = 2
    NOT_BUILT = 3
    ABORTED = 4

    def is_worse_or_equal_to(self, other: BuildResult) -> bool:
        return self.value >= other.value

    @classmethod
    def from_string(cls, value: str) -> BuildResult:
        """Create from a name such as ``"unstable"`` or ``"NOT_BUILT"``."""
        return cls[value.strip().upper().replace("-", "_")]


# =============================================================================
# Upload API payloads
# =============================================================================


class UploadInitResponse(BaseModel):
    """Body of a successful upload_init call."""

    upload_url: str = Field(..., min_length=1, description="Single-use upload URL")


@dataclass(frozen=True)
class UploadSession:
    """Server-issued upload location, valid for one transfer."""

    upload_url: str = field(repr=False)

    @classmethod
    def from_init_response(cls, payload: UploadInitResponse) -> UploadSession:
        return cls(upload_url=payload.upload_url)


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class ArtifactLocation:
    """Where the build artifact was found."""

    path: Path
    found_in_artifact_folder: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "found_in_artifact_folder": self.found_in_artifact_folder,
        }


@dataclass(frozen=True)
class OperationResult:
    """Uniform result of a network-facing step.

    ``message`` is meant for direct display and may embed the raw server
    response body, even on success.
    """

    message: str
    outcome: UploadOutcome
    session: Optional[UploadSession] = field(default=None, repr=False)

    @property
    def success(self) -> bool:
        return self.outcome.is_success

    @classmethod
    def ok(
        cls,
        message: str,
        *,
        outcome: UploadOutcome = UploadOutcome.SUCCESS,
        session: Optional[UploadSession] = None,
    ) -> OperationResult:
        return cls(message, outcome, session)

    @classmethod
    def failed(cls, outcome: UploadOutcome, message: str) -> OperationResult:
        return cls(message, outcome)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "outcome": self.outcome.value,
            "message": self.message,
        }


@dataclass
class SendBuildReport:
    """Final state of a send-build job step."""

    result: OperationResult
    phase: UploadPhase
    build_result: BuildResult
    location: Optional[ArtifactLocation] = None

    @property
    def success(self) -> bool:
        return self.result.success

    def to_dict(self) -> dict[str, Any]:
        data = self.result.to_dict()
        data["phase"] = self.phase.value
        data["build_result"] = self.build_result.name
        if self.location is not None:
            data.update(self.location.to_dict())
        return data
