"""Send-build job step.

Runs the locate -> negotiate -> upload sequence. Each step runs only when the
previous one succeeded, and the run always ends with exactly one
OperationResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pydantic import SecretStr

from dtupload.core.config import DEFAULT_INIT_TIMEOUT, DEFAULT_UPLOAD_TIMEOUT, ProxyConfig
from dtupload.core.credentials import CredentialResolver
from dtupload.core.transport import Transport
from dtupload.models.upload import (
    BuildResult,
    OperationResult,
    SendBuildReport,
    UploadOutcome,
    UploadPhase,
)

from .locator import ArtifactLocator
from .negotiator import UploadSessionNegotiator
from .uploader import ArtifactUploader

logger = logging.getLogger(__name__)

# Previous results at or beyond this severity skip the step
SKIP_THRESHOLD = BuildResult.UNSTABLE


def _transfer(
    api_key: SecretStr | str | None,
    artifact_path: Path,
    negotiator: UploadSessionNegotiator,
    uploader: ArtifactUploader,
) -> tuple[OperationResult, UploadPhase]:
    """Negotiate then upload; return the result and the phase reached."""
    init = negotiator.negotiate(api_key)
    logger.info("upload_init finished: %s", init.outcome.value)
    if not init.success or init.session is None:
        return init, UploadPhase.NEGOTIATE

    result = uploader.upload(init.session, artifact_path)
    return result, UploadPhase.DONE if result.success else UploadPhase.UPLOAD


def perform_upload(
    api_key: SecretStr | str | None,
    artifact_path: Path,
    proxy: Optional[ProxyConfig] = None,
    *,
    transport: Optional[Transport] = None,
) -> OperationResult:
    """Upload a build file to Data Theorem.

    A failed negotiation is returned unchanged and the upload is not attempted.

    Args:
        api_key: Upload API key.
        artifact_path: Build file to send.
        proxy: Optional proxy for both requests.
        transport: Transport override used for both requests.

    Returns:
        Result of the last step that ran.
    """
    init_transport = transport or Transport(proxy=proxy, timeout=DEFAULT_INIT_TIMEOUT)
    upload_transport = transport or Transport(proxy=proxy, timeout=DEFAULT_UPLOAD_TIMEOUT)
    result, _ = _transfer(
        api_key,
        Path(artifact_path),
        UploadSessionNegotiator(init_transport),
        ArtifactUploader(upload_transport),
    )
    return result


# =============================================================================
# Job Step
# =============================================================================


@dataclass
class SendBuildRequest:
    """Inputs of one send-build run, as supplied by the CI host."""

    build_to_upload: str
    workspace: Path
    artifacts_dir: Optional[Path] = None
    dont_upload: bool = False
    proxy: ProxyConfig = field(default_factory=ProxyConfig)
    previous_result: Optional[BuildResult] = None
    timeout: float = DEFAULT_INIT_TIMEOUT
    upload_timeout: float = DEFAULT_UPLOAD_TIMEOUT


class SendBuildService:
    """Locate a build and send it to Data Theorem."""

    def __init__(
        self,
        credentials: CredentialResolver,
        transport: Optional[Transport] = None,
    ) -> None:
        """Initialize the job step.

        Args:
            credentials: Resolver asked once per run for the API key.
            transport: Transport override used for every request.
        """
        self.credentials = credentials
        self.transport = transport

    def run(self, request: SendBuildRequest) -> SendBuildReport:
        """Execute the job step.

        Args:
            request: Build name, workspace, and upload options.

        Returns:
            Report carrying the final result and the mapped build status.
        """
        logger.info("Data Theorem upload build starting...")

        previous = request.previous_result
        if previous is not None and previous.is_worse_or_equal_to(SKIP_THRESHOLD):
            return SendBuildReport(
                result=OperationResult.failed(
                    UploadOutcome.SKIPPED,
                    "Skipping Data Theorem upload because the previous step result is: "
                    f"{previous.name}",
                ),
                phase=UploadPhase.LOCATE,
                build_result=previous,
            )

        logger.info("Uploading the build to Data Theorem: %s", request.build_to_upload)
        locator = ArtifactLocator(request.build_to_upload, request.workspace, request.artifacts_dir)
        location = locator.find()
        if location is None:
            return SendBuildReport(
                result=OperationResult.failed(
                    UploadOutcome.NOT_FOUND,
                    f"Unable to find any build with name: {request.build_to_upload}",
                ),
                phase=UploadPhase.LOCATE,
                build_result=BuildResult.UNSTABLE,
            )

        logger.info("Found the build at path: %s", location.path)

        if request.dont_upload:
            return SendBuildReport(
                result=OperationResult.ok(
                    "Skipping upload... \"Don't Upload\" option enabled",
                    outcome=UploadOutcome.DRY_RUN,
                ),
                phase=UploadPhase.DONE,
                build_result=BuildResult.SUCCESS,
                location=location,
            )

        if request.proxy.enabled:
            logger.info("Proxy configuration is: %s:%s", request.proxy.hostname, request.proxy.port)
        else:
            logger.info("No proxy configuration")

        api_key = self.credentials.resolve()
        negotiator = UploadSessionNegotiator(
            self.transport or Transport(proxy=request.proxy, timeout=request.timeout)
        )
        uploader = ArtifactUploader(
            self.transport or Transport(proxy=request.proxy, timeout=request.upload_timeout)
        )
        result, phase = _transfer(api_key, location.path, negotiator, uploader)

        return SendBuildReport(
            result=result,
            phase=phase,
            build_result=BuildResult.SUCCESS if result.success else BuildResult.UNSTABLE,
            location=location,
        )
