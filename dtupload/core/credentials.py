"""Upload API key resolution.

The job step asks a resolver for the key once per run. Which resolver is used
depends on how the step was invoked: a classic post-build step reads the key
from the job environment, a pipeline step passes it as a literal parameter.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Optional, Protocol

from pydantic import SecretStr

from dtupload.core.config import ENV_API_KEY

logger = logging.getLogger(__name__)


class CredentialResolver(Protocol):
    """Anything that can produce the upload API key."""

    def resolve(self) -> Optional[SecretStr]: ...


class EnvironmentCredentialResolver:
    """Read the key from the job environment."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        variable: str = ENV_API_KEY,
    ) -> None:
        self.environ = environ if environ is not None else os.environ
        self.variable = variable

    def resolve(self) -> Optional[SecretStr]:
        logger.info("Reading the upload API key from the %s environment variable", self.variable)
        value = self.environ.get(self.variable)
        return SecretStr(value) if value else None


class LiteralCredentialResolver:
    """Use a key passed explicitly by the caller."""

    def __init__(self, api_key: SecretStr | str | None) -> None:
        if isinstance(api_key, str):
            api_key = SecretStr(api_key) if api_key else None
        self.api_key = api_key

    def resolve(self) -> Optional[SecretStr]:
        logger.info("Using the upload API key passed as a parameter")
        if self.api_key is None:
            logger.warning(
                "You should set the upload API key with the %s environment variable value",
                ENV_API_KEY,
            )
        return self.api_key
