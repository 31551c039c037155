"""Pytest configuration and fixtures for dtupload tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from dtupload.core import config as config_module
from dtupload.core.transport import RawResponse

DT_ENV_VARS = (
    config_module.ENV_API_KEY,
    config_module.ENV_CONFIG,
    config_module.ENV_BUILD,
    config_module.ENV_DONT_UPLOAD,
    config_module.ENV_ARTIFACTS_DIR,
    config_module.ENV_TIMEOUT,
    config_module.ENV_PROXY_HOSTNAME,
    config_module.ENV_PROXY_PORT,
    config_module.ENV_PROXY_USERNAME,
    config_module.ENV_PROXY_PASSWORD,
    config_module.ENV_PROXY_UNSECURED,
    "WORKSPACE",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep the user's config file and CI variables out of every test."""
    for name in DT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config_path = tmp_path / "no-config.yaml"
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)
    return config_path


class FakeTransport:
    """Transport stub that replays canned responses and records requests."""

    def __init__(self, *responses: RawResponse | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def post(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        files: Any | None = None,
    ) -> RawResponse:
        call: dict[str, Any] = {"url": url, "headers": headers or {}}
        if files:
            name, handle, content_type = files["file"]
            call["file_name"] = name
            call["file_bytes"] = handle.read()
            call["content_type"] = content_type
            call["field"] = next(iter(files))
        self.calls.append(call)

        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def make_transport() -> type[FakeTransport]:
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty job workspace."""
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws


@pytest.fixture
def sample_config_yaml() -> str:
    """Sample config YAML content."""
    return """
build_to_upload: app-release.apk
dont_upload: false
artifacts_dir: /var/lib/ci/archive
timeout: 45

proxy:
  hostname: proxy.example.org
  port: 3128
  username: ci-bot
  unsecured_connection: true
"""
