"""Core modules for dtupload."""

from dtupload.core.config import CONFIG_DIR, CONFIG_FILE, Config, ProxyConfig
from dtupload.core.credentials import (
    CredentialResolver,
    EnvironmentCredentialResolver,
    LiteralCredentialResolver,
)
from dtupload.core.exceptions import (
    ArtifactReadError,
    ConfigurationError,
    DTUploadError,
    InvalidArtifactNameError,
    InvalidPortError,
    InvalidProxyError,
    RequestTimeoutError,
    ServerUnreachableError,
    TransportError,
    ValidationError,
)
from dtupload.core.logging import LogContext, get_logger, mask_secret, setup_logging
from dtupload.core.transport import USER_AGENT, RawResponse, Transport
from dtupload.core.validation import (
    validate_artifact_name,
    validate_port,
    validate_proxy_hostname,
)

__all__ = [
    # Exceptions
    "DTUploadError",
    "ConfigurationError",
    "ValidationError",
    "InvalidArtifactNameError",
    "InvalidPortError",
    "InvalidProxyError",
    "TransportError",
    "ServerUnreachableError",
    "RequestTimeoutError",
    "ArtifactReadError",
    # Validation
    "validate_artifact_name",
    "validate_port",
    "validate_proxy_hostname",
    # Config
    "Config",
    "ProxyConfig",
    "CONFIG_DIR",
    "CONFIG_FILE",
    # Credentials
    "CredentialResolver",
    "EnvironmentCredentialResolver",
    "LiteralCredentialResolver",
    # Transport
    "Transport",
    "RawResponse",
    "USER_AGENT",
    # Logging
    "get_logger",
    "setup_logging",
    "mask_secret",
    "LogContext",
]
