"""Base service with common methods for Upload API services."""

from __future__ import annotations

from typing import Optional

from dtupload.core.transport import Transport


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, transport: Optional[Transport] = None) -> None:
        """Initialize service with an HTTP transport.

        Args:
            transport: Transport to send requests with. A direct connection
                is used when omitted.
        """
        self.transport = transport or Transport()

    @staticmethod
    def _body_preview(text: str) -> str:
        """Return the response body for display, or a marker when empty."""
        return text if text.strip() else "Empty body response"
