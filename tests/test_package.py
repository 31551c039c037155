"""Tests for dtupload package imports and exports."""

from __future__ import annotations


class TestPackageImports:
    """Tests for package imports."""

    def test_import_dtupload(self):
        import dtupload

        assert hasattr(dtupload, "__version__")
        assert dtupload.SendBuildService is not None

    def test_import_core_modules(self):
        from dtupload.core import (
            config,
            credentials,
            exceptions,
            logging,
            output,
            transport,
            validation,
        )

        assert config is not None
        assert credentials is not None
        assert exceptions is not None
        assert logging is not None
        assert output is not None
        assert transport is not None
        assert validation is not None

    def test_import_services(self):
        from dtupload.services import base, locator, negotiator, orchestrator, uploader

        assert base is not None
        assert locator is not None
        assert negotiator is not None
        assert uploader is not None
        assert orchestrator is not None

    def test_import_cli(self):
        from dtupload.cli import common, config_cmd, main

        assert main is not None
        assert common is not None
        assert config_cmd is not None

    def test_user_agent_carries_version(self):
        from dtupload import __version__
        from dtupload.core.transport import USER_AGENT

        assert USER_AGENT.endswith(f" {__version__}")


class TestExceptionHierarchy:
    """Tests for exception hierarchy."""

    def test_base_error(self):
        from dtupload.core.exceptions import DTUploadError

        exc = DTUploadError("test error")
        assert "test error" in str(exc)
        assert isinstance(exc, Exception)

    def test_details_rendered(self):
        from dtupload.core.exceptions import DTUploadError

        exc = DTUploadError("boom", {"file": "app.apk"})
        assert str(exc) == "boom (file=app.apk)"

    def test_transport_errors(self):
        from dtupload.core.exceptions import (
            RequestTimeoutError,
            ServerUnreachableError,
            TransportError,
        )

        unreachable = ServerUnreachableError("https://api.example.org", "name resolution failed")
        assert isinstance(unreachable, TransportError)
        assert "name resolution failed" in str(unreachable)

        timeout = RequestTimeoutError("https://api.example.org", 30)
        assert isinstance(timeout, TransportError)
        assert "30s" in str(timeout)

    def test_validation_errors(self):
        from dtupload.core.exceptions import (
            InvalidArtifactNameError,
            InvalidPortError,
            ValidationError,
        )

        name_exc = InvalidArtifactNameError("app.zip", "wrong extension")
        assert isinstance(name_exc, ValidationError)
        assert "app.zip" in str(name_exc)

        port_exc = InvalidPortError(99999)
        assert "99999" in str(port_exc)

    def test_artifact_read_error(self):
        from dtupload.core.exceptions import ArtifactReadError

        exc = ArtifactReadError("/tmp/app.apk", "Permission denied")
        assert "Permission denied" in str(exc)
        assert exc.details["file"] == "/tmp/app.apk"
