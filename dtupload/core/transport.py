"""Proxy-aware HTTP transport for the Data Theorem Upload API.

One httpx client is built per request. Network failures are raised as
TransportError subclasses; HTTP status codes are returned untouched for the
caller to classify.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import httpx

from dtupload import __version__
from dtupload.core.config import DEFAULT_INIT_TIMEOUT, ProxyConfig
from dtupload.core.exceptions import (
    RequestTimeoutError,
    ServerUnreachableError,
    TransportError,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

CLIENT_ID = "Data Theorem Upload Build CLI"
USER_AGENT = f"{CLIENT_ID} {__version__}"


def redact_url(url: str) -> str:
    """Strip path and query so single-use URLs never reach logs."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return "<invalid url>"
    return f"{parts.scheme}://{parts.hostname}"


# =============================================================================
# Response
# =============================================================================


@dataclass(frozen=True)
class RawResponse:
    """Status code and body of an HTTP response."""

    status_code: int
    body: bytes = b""

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")


# =============================================================================
# Transport
# =============================================================================


@dataclass
class Transport:
    """Issue single HTTP requests, optionally through a proxy."""

    proxy: ProxyConfig | None = None
    timeout: float = DEFAULT_INIT_TIMEOUT
    user_agent: str = USER_AGENT
    transport: httpx.BaseTransport | None = field(default=None, repr=False)

    def _client_options(self) -> dict[str, Any]:
        """Keyword arguments for httpx.Client."""
        options: dict[str, Any] = {
            "timeout": self.timeout,
            "follow_redirects": False,
            "headers": {"User-Agent": self.user_agent},
        }

        if self.proxy is not None and self.proxy.enabled:
            auth = None
            if self.proxy.username:
                password = self.proxy.password.get_secret_value() if self.proxy.password else ""
                auth = (self.proxy.username, password)
            options["proxy"] = httpx.Proxy(self.proxy.url, auth=auth)
            if self.proxy.unsecured_connection:
                options["verify"] = False

        if self.transport is not None:
            options["transport"] = self.transport
        return options

    def _build_client(self) -> httpx.Client:
        return httpx.Client(**self._client_options())

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        files: Any | None = None,
    ) -> RawResponse:
        """Execute one HTTP request.

        Args:
            method: HTTP method.
            url: Absolute URL.
            headers: Extra request headers.
            files: Multipart files mapping, as accepted by httpx.

        Returns:
            Status code and raw body.

        Raises:
            ServerUnreachableError: DNS failure or refused connection.
            RequestTimeoutError: The request timed out.
            TransportError: Any other network, proxy, or TLS failure.
        """
        display_url = redact_url(url)
        try:
            client = self._build_client()
        except ValueError as e:
            raise TransportError(display_url, f"invalid client configuration: {e}") from e

        try:
            with client:
                resp = client.request(method, url, headers=headers, files=files)
                body = resp.content
        except httpx.ConnectError as e:
            raise ServerUnreachableError(display_url, str(e)) from e
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(display_url, self.timeout) from e
        except httpx.TransportError as e:
            raise TransportError(display_url, f"{type(e).__name__}: {e}") from e
        except httpx.InvalidURL as e:
            raise TransportError(display_url, f"invalid URL: {e}") from e

        logger.info("%s %s -> HTTP %d", method, display_url, resp.status_code)
        return RawResponse(resp.status_code, body)

    def post(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        files: Any | None = None,
    ) -> RawResponse:
        """POST request."""
        return self.send("POST", url, headers=headers, files=files)
