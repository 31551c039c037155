"""Upload session negotiation.

Exchanges the long-lived upload API key for a single-use upload URL by
calling the upload_init endpoint.
"""

from __future__ import annotations

import logging
from typing import Optional

import pydantic
from pydantic import SecretStr

from dtupload.core.exceptions import TransportError
from dtupload.core.logging import LogContext, mask_secret
from dtupload.models.upload import (
    OperationResult,
    UploadInitResponse,
    UploadOutcome,
    UploadSession,
)

from .base import BaseService

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

UPLOAD_INIT_URL = "https://api.securetheorem.com/uploadapi/v1/upload_init"


class UploadSessionNegotiator(BaseService):
    """Obtain an upload URL from the Upload API."""

    init_url = UPLOAD_INIT_URL

    def negotiate(self, api_key: SecretStr | str | None) -> OperationResult:
        """Call upload_init and classify the response.

        Every call issues a new request; the server may hand out a different
        URL each time.

        Args:
            api_key: Upload API key.

        Returns:
            Result whose ``session`` is set on success.
        """
        if isinstance(api_key, SecretStr):
            api_key = api_key.get_secret_value()
        if not api_key:
            return OperationResult.failed(
                UploadOutcome.CREDENTIAL_ERROR,
                "Data Theorem upload_init call error: no upload API key was provided",
            )

        logger.info("Retrieving the upload URL from Data Theorem (api key %s)", mask_secret(api_key))
        try:
            with LogContext("upload_init", logger):
                resp = self.transport.post(
                    self.init_url,
                    headers={"Authorization": api_key},
                )
        except TransportError as e:
            return OperationResult.failed(
                UploadOutcome.TRANSPORT_ERROR,
                "Data Theorem upload_init call error: "
                f"{type(e).__name__}\nPlease contact Data Theorem support: {e}",
            )

        return self._classify(resp.status_code, resp.text)

    def _classify(self, status_code: int, body: str) -> OperationResult:
        if status_code == 401:
            return OperationResult.failed(
                UploadOutcome.CREDENTIAL_ERROR,
                f"Data Theorem upload_init call Forbidden Access: {body}",
            )

        if status_code != 200:
            return OperationResult.failed(
                UploadOutcome.SERVER_ERROR,
                f"Data Theorem upload_init call error (HTTP {status_code}): "
                f"{self._body_preview(body)}",
            )

        payload = self._parse_payload(body)
        if payload is None:
            return OperationResult.failed(
                UploadOutcome.PROTOCOL_ERROR,
                f"Data Theorem upload_init returned a malformed payload: {self._body_preview(body)}",
            )

        return OperationResult.ok(
            f"Successfully retrieved the upload URL from Data Theorem: {body}",
            session=UploadSession.from_init_response(payload),
        )

    @staticmethod
    def _parse_payload(body: str) -> Optional[UploadInitResponse]:
        try:
            return UploadInitResponse.model_validate_json(body)
        except pydantic.ValidationError as e:
            logger.debug("upload_init payload rejected: %s", e)
            return None
