"""Tests for the send-build job step."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from dtupload.core.config import ProxyConfig
from dtupload.core.credentials import LiteralCredentialResolver
from dtupload.core.exceptions import ServerUnreachableError
from dtupload.core.transport import RawResponse
from dtupload.models.upload import BuildResult, UploadOutcome, UploadPhase
from dtupload.services.negotiator import UPLOAD_INIT_URL
from dtupload.services.orchestrator import SendBuildRequest, SendBuildService, perform_upload

UPLOAD_URL = "https://uploads.example.org/one-time"
INIT_OK = RawResponse(200, json.dumps({"upload_url": UPLOAD_URL}).encode())
UPLOAD_OK = RawResponse(200, b'{"status": "received"}')


def _resolver(key: str | None = "api-key") -> MagicMock:
    resolver = MagicMock()
    resolver.resolve.return_value = SecretStr(key) if key else None
    return resolver


@pytest.fixture
def apk(workspace: Path) -> Path:
    path = workspace / "app-release.apk"
    path.write_bytes(b"apk-bytes")
    return path


class TestPerformUpload:
    """Tests for perform_upload."""

    def test_negotiates_then_uploads(self, make_transport, apk: Path):
        transport = make_transport(INIT_OK, UPLOAD_OK)

        result = perform_upload("api-key", apk, transport=transport)

        assert result.success is True
        assert [c["url"] for c in transport.calls] == [UPLOAD_INIT_URL, UPLOAD_URL]

    def test_negotiation_failure_short_circuits(self, make_transport, apk: Path):
        transport = make_transport(RawResponse(401, b"bad key"))

        result = perform_upload("wrong", apk, transport=transport)

        assert result.success is False
        assert result.outcome is UploadOutcome.CREDENTIAL_ERROR
        assert result.message == "Data Theorem upload_init call Forbidden Access: bad key"
        assert len(transport.calls) == 1


class TestSendBuildService:
    """Tests for SendBuildService.run."""

    def test_end_to_end_from_workspace(self, make_transport, workspace: Path, apk: Path):
        transport = make_transport(INIT_OK, UPLOAD_OK)
        service = SendBuildService(_resolver(), transport)

        report = service.run(SendBuildRequest("app-release.apk", workspace))

        assert report.success is True
        assert report.result.outcome is UploadOutcome.SUCCESS
        assert report.phase is UploadPhase.DONE
        assert report.build_result is BuildResult.SUCCESS
        assert report.location.path == apk
        assert report.location.found_in_artifact_folder is False
        assert transport.calls[0]["headers"] == {"Authorization": "api-key"}
        assert transport.calls[1]["url"] == UPLOAD_URL
        assert transport.calls[1]["file_bytes"] == b"apk-bytes"

    def test_missing_artifact_makes_no_calls(self, make_transport, workspace: Path):
        transport = make_transport()
        resolver = _resolver()

        report = SendBuildService(resolver, transport).run(
            SendBuildRequest("app-release.apk", workspace)
        )

        assert report.success is False
        assert report.result.outcome is UploadOutcome.NOT_FOUND
        assert "app-release.apk" in report.result.message
        assert report.phase is UploadPhase.LOCATE
        assert report.build_result is BuildResult.UNSTABLE
        assert report.location is None
        assert transport.calls == []
        resolver.resolve.assert_not_called()

    def test_dry_run_skips_network(self, make_transport, workspace: Path, apk: Path):
        transport = make_transport()
        resolver = _resolver()

        report = SendBuildService(resolver, transport).run(
            SendBuildRequest("app-release.apk", workspace, dont_upload=True)
        )

        assert report.success is True
        assert report.result.outcome is UploadOutcome.DRY_RUN
        assert report.build_result is BuildResult.SUCCESS
        assert report.location.path == apk
        assert transport.calls == []
        resolver.resolve.assert_not_called()

    def test_dry_run_still_requires_artifact(self, make_transport, workspace: Path):
        report = SendBuildService(_resolver(), make_transport()).run(
            SendBuildRequest("app-release.apk", workspace, dont_upload=True)
        )

        assert report.result.outcome is UploadOutcome.NOT_FOUND

    def test_negotiation_failure_is_propagated(self, make_transport, workspace: Path, apk: Path):
        transport = make_transport(RawResponse(200, b"{}"))

        report = SendBuildService(_resolver(), transport).run(
            SendBuildRequest("app-release.apk", workspace)
        )

        assert report.result.outcome is UploadOutcome.PROTOCOL_ERROR
        assert report.phase is UploadPhase.NEGOTIATE
        assert report.build_result is BuildResult.UNSTABLE
        assert len(transport.calls) == 1

    def test_transport_failure_during_init(self, make_transport, workspace: Path, apk: Path):
        transport = make_transport(ServerUnreachableError("https://api.securetheorem.com"))

        report = SendBuildService(_resolver(), transport).run(
            SendBuildRequest("app-release.apk", workspace)
        )

        assert report.result.outcome is UploadOutcome.TRANSPORT_ERROR
        assert report.phase is UploadPhase.NEGOTIATE

    def test_upload_failure(self, make_transport, workspace: Path, apk: Path):
        transport = make_transport(INIT_OK, RawResponse(500, b"storage down"))

        report = SendBuildService(_resolver(), transport).run(
            SendBuildRequest("app-release.apk", workspace)
        )

        assert report.success is False
        assert report.result.outcome is UploadOutcome.SERVER_ERROR
        assert "storage down" in report.result.message
        assert report.phase is UploadPhase.UPLOAD
        assert report.build_result is BuildResult.UNSTABLE

    def test_missing_credential(self, make_transport, workspace: Path, apk: Path):
        transport = make_transport()

        report = SendBuildService(LiteralCredentialResolver(None), transport).run(
            SendBuildRequest("app-release.apk", workspace)
        )

        assert report.result.outcome is UploadOutcome.CREDENTIAL_ERROR
        assert transport.calls == []

    def test_resolves_credential_once(self, make_transport, workspace: Path, apk: Path):
        resolver = _resolver()

        SendBuildService(resolver, make_transport(INIT_OK, UPLOAD_OK)).run(
            SendBuildRequest("app-release.apk", workspace)
        )

        resolver.resolve.assert_called_once_with()

    def test_artifact_folder_location_reported(
        self, make_transport, tmp_path: Path, workspace: Path
    ):
        archive = tmp_path / "archive"
        archive.mkdir()
        (archive / "App.ipa").write_bytes(b"ipa")

        report = SendBuildService(_resolver(), make_transport(INIT_OK, UPLOAD_OK)).run(
            SendBuildRequest("App.ipa", workspace, artifacts_dir=archive)
        )

        assert report.success is True
        assert report.location.found_in_artifact_folder is True

    @pytest.mark.parametrize(
        "previous",
        [BuildResult.UNSTABLE, BuildResult.FAILURE, BuildResult.NOT_BUILT, BuildResult.ABORTED],
    )
    def test_previous_result_gate(
        self, make_transport, workspace: Path, apk: Path, previous: BuildResult
    ):
        transport = make_transport()

        report = SendBuildService(_resolver(), transport).run(
            SendBuildRequest("app-release.apk", workspace, previous_result=previous)
        )

        assert report.success is False
        assert report.result.outcome is UploadOutcome.SKIPPED
        assert previous.name in report.result.message
        assert report.build_result is previous
        assert report.location is None
        assert transport.calls == []

    def test_previous_success_proceeds(self, make_transport, workspace: Path, apk: Path):
        report = SendBuildService(_resolver(), make_transport(INIT_OK, UPLOAD_OK)).run(
            SendBuildRequest("app-release.apk", workspace, previous_result=BuildResult.SUCCESS)
        )

        assert report.success is True

    def test_builds_proxy_transports_when_not_injected(
        self, monkeypatch: pytest.MonkeyPatch, workspace: Path, apk: Path
    ):
        created: list[dict] = []

        class RecordingTransport:
            def __init__(self, proxy=None, timeout=None):
                created.append({"proxy": proxy, "timeout": timeout})
                self.responses = [INIT_OK] if len(created) == 1 else [UPLOAD_OK]

            def post(self, url, *, headers=None, files=None):
                return self.responses.pop(0)

        monkeypatch.setattr("dtupload.services.orchestrator.Transport", RecordingTransport)
        proxy = ProxyConfig(hostname="proxy", port=3128)

        report = SendBuildService(_resolver()).run(
            SendBuildRequest(
                "app-release.apk", workspace, proxy=proxy, timeout=10, upload_timeout=600
            )
        )

        assert report.success is True
        assert [c["timeout"] for c in created] == [10, 600]
        assert all(c["proxy"] is proxy for c in created)

    def test_report_to_dict(self, make_transport, workspace: Path, apk: Path):
        report = SendBuildService(_resolver(), make_transport(INIT_OK, UPLOAD_OK)).run(
            SendBuildRequest("app-release.apk", workspace)
        )

        data = report.to_dict()
        assert data["success"] is True
        assert data["outcome"] == "success"
        assert data["phase"] == "done"
        assert data["build_result"] == "SUCCESS"
        assert data["path"] == str(apk)
