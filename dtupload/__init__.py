"""dtupload - send mobile app builds to Data Theorem from CI.

This package locates an .apk or .ipa produced by a CI job and uploads it to
the Data Theorem Upload API:
- Find the build in the artifact archive or the job workspace
- Exchange the upload API key for a single-use upload URL
- Transfer the build as multipart/form-data, optionally through a proxy
"""

__version__ = "1.0.0"

from dtupload.core.config import Config, ProxyConfig
from dtupload.core.exceptions import (
    ConfigurationError,
    DTUploadError,
    TransportError,
    ValidationError,
)
from dtupload.models.upload import ArtifactLocation, OperationResult, UploadOutcome, UploadSession
from dtupload.services.orchestrator import SendBuildRequest, SendBuildService, perform_upload

__all__ = [
    "__version__",
    "Config",
    "ProxyConfig",
    "DTUploadError",
    "ConfigurationError",
    "TransportError",
    "ValidationError",
    "ArtifactLocation",
    "OperationResult",
    "UploadOutcome",
    "UploadSession",
    "SendBuildRequest",
    "SendBuildService",
    "perform_upload",
]
