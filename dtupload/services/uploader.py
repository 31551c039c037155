"""Build artifact transfer to a negotiated upload URL."""

from __future__ import annotations

import logging
from pathlib import Path

from dtupload.core.exceptions import ArtifactReadError, TransportError
from dtupload.core.logging import LogContext
from dtupload.core.transport import RawResponse
from dtupload.models.upload import OperationResult, UploadOutcome, UploadSession

from .base import BaseService

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

FILE_FIELD = "file"
CONTENT_TYPE = "application/octet-stream"


class ArtifactUploader(BaseService):
    """Send a build file as multipart/form-data."""

    def upload(self, session: UploadSession, artifact_path: Path) -> OperationResult:
        """POST the artifact to the session's upload URL.

        The URL itself authorizes the request, so no Authorization header is
        sent. Callers must not reuse ``session`` afterwards.

        Args:
            session: Session returned by a successful negotiation.
            artifact_path: Local path of the build file.

        Returns:
            Result of the transfer.
        """
        artifact_path = Path(artifact_path)
        logger.info("Uploading build to Data Theorem...")

        try:
            with LogContext("upload_build", logger, file=artifact_path.name):
                resp = self._send(session, artifact_path)
        except ArtifactReadError as e:
            return OperationResult.failed(
                UploadOutcome.IO_ERROR,
                f"Data Theorem upload build returned an error: {e}",
            )
        except TransportError as e:
            return OperationResult.failed(
                UploadOutcome.TRANSPORT_ERROR,
                f"Data Theorem upload build returned an error: {type(e).__name__}: {e}",
            )

        body = resp.text
        if resp.status_code == 200:
            return OperationResult.ok(f"Successfully uploaded build to Data Theorem: {body}")

        return OperationResult.failed(
            UploadOutcome.SERVER_ERROR,
            f"Data Theorem upload build returned an error (HTTP {resp.status_code}): "
            f"{self._body_preview(body)}",
        )

    def _send(self, session: UploadSession, artifact_path: Path) -> RawResponse:
        try:
            with open(artifact_path, "rb") as f:
                files = {FILE_FIELD: (artifact_path.name, f, CONTENT_TYPE)}
                return self.transport.post(session.upload_url, files=files)
        except OSError as e:
            raise ArtifactReadError(str(artifact_path), e.strerror or str(e)) from e
