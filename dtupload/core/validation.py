"""Input validation for dtupload configuration values."""

from __future__ import annotations

from typing import Any

from dtupload.core.exceptions import (
    InvalidArtifactNameError,
    InvalidPortError,
    InvalidProxyError,
)

# =============================================================================
# Constants
# =============================================================================

ARTIFACT_EXTENSIONS = (".apk", ".ipa")
MIN_ARTIFACT_NAME_LENGTH = 5
PROXY_SCHEMES = ("http", "https")


# =============================================================================
# Validators
# =============================================================================


def validate_artifact_name(value: str | None) -> str:
    """Validate the name of the build artifact to upload.

    Args:
        value: File name such as ``app-release.apk``.

    Returns:
        The stripped file name.

    Raises:
        InvalidArtifactNameError: If the name is empty, has an unsupported
            extension, or is too short.
    """
    name = (value or "").strip()
    if not name:
        raise InvalidArtifactNameError(name, "the build name is empty")
    if not name.lower().endswith(ARTIFACT_EXTENSIONS):
        raise InvalidArtifactNameError(name, "the build name should end with .apk or .ipa")
    if len(name) < MIN_ARTIFACT_NAME_LENGTH:
        raise InvalidArtifactNameError(name, "the build name is too short")
    return name


def validate_port(value: Any) -> int:
    """Validate a TCP port number.

    Raises:
        InvalidPortError: If not an integer in 1-65535.
    """
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise InvalidPortError(value)
    if not 1 <= port <= 65535:
        raise InvalidPortError(value)
    return port


def validate_proxy_hostname(value: str) -> str:
    """Validate a proxy hostname, with or without a scheme.

    A bare host such as ``proxy.local`` is accepted and later used over http.

    Raises:
        InvalidProxyError: If the hostname carries a scheme other than http or https.
    """
    hostname = value.strip()
    if "://" in hostname:
        scheme = hostname.split("://", 1)[0].lower()
        if scheme not in PROXY_SCHEMES:
            raise InvalidProxyError(hostname)
    return hostname
