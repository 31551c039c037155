"""Service layer for the send-build workflow."""

from dtupload.services.locator import ArtifactLocator, find_artifact
from dtupload.services.negotiator import UPLOAD_INIT_URL, UploadSessionNegotiator
from dtupload.services.orchestrator import (
    SendBuildRequest,
    SendBuildService,
    perform_upload,
)
from dtupload.services.uploader import ArtifactUploader

__all__ = [
    "ArtifactLocator",
    "ArtifactUploader",
    "SendBuildRequest",
    "SendBuildService",
    "UPLOAD_INIT_URL",
    "UploadSessionNegotiator",
    "find_artifact",
    "perform_upload",
]
