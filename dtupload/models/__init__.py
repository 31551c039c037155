"""Data models for dtupload."""

from dtupload.models.base import BaseModel
from dtupload.models.upload import (
    ArtifactLocation,
    BuildResult,
    OperationResult,
    SendBuildReport,
    UploadInitResponse,
    UploadOutcome,
    UploadPhase,
    UploadSession,
)

__all__ = [
    "BaseModel",
    "ArtifactLocation",
    "BuildResult",
    "OperationResult",
    "SendBuildReport",
    "UploadInitResponse",
    "UploadOutcome",
    "UploadPhase",
    "UploadSession",
]
