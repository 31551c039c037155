"""Exception hierarchy for dtupload.

Provides typed exceptions for different failure modes with clear error messages.
"""

from __future__ import annotations

from typing import Any


class DTUploadError(Exception):
    """Base exception for all dtupload errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DTUploadError):
    """Error in configuration (missing, invalid, or malformed)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DTUploadError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidArtifactNameError(ValidationError):
    """Artifact file name is empty, too short, or has the wrong extension."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Invalid build name: {name!r} - {reason}", field="build_to_upload")
        self.name = name
        self.reason = reason


class InvalidPortError(ValidationError):
    """Invalid port number."""

    def __init__(self, port: Any):
        super().__init__(
            f"Invalid port: {port} (must be 1-65535)",
            field="port",
            value=port,
        )
        self.port = port


class InvalidProxyError(ValidationError):
    """Proxy hostname uses a scheme that cannot be proxied through."""

    def __init__(self, hostname: str):
        super().__init__(
            f"Invalid proxy hostname: {hostname} (scheme must be http or https)",
            field="proxy.hostname",
            value=hostname,
        )
        self.hostname = hostname


# =============================================================================
# Transport Errors
# =============================================================================


class TransportError(DTUploadError):
    """Network-level error (DNS, TCP, TLS, proxy)."""

    def __init__(self, url: str, cause: str | None = None):
        msg = f"Network error connecting to {url}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg, {"url": url})
        self.url = url
        self.cause = cause


class ServerUnreachableError(TransportError):
    """Host could not be resolved or refused the connection."""

    def __init__(self, url: str, cause: str | None = None):
        super().__init__(url, cause or "server unreachable")


class RequestTimeoutError(TransportError):
    """Request timed out."""

    def __init__(self, url: str, timeout: float):
        super().__init__(url, f"timed out after {timeout:g}s")
        self.timeout = timeout


# =============================================================================
# Artifact Errors
# =============================================================================


class ArtifactReadError(DTUploadError):
    """Local artifact could not be read while building the upload body."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(f"Unable to read {file_path}: {reason}", {"file": file_path})
        self.file_path = file_path
        self.reason = reason
