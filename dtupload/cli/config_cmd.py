"""Config commands for dtupload."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from dtupload.core.config import CONFIG_FILE, Config, ProxyConfig
from dtupload.core.exceptions import DTUploadError
from dtupload.core.logging import mask_secret
from dtupload.core.output import (
    OutputFormat,
    print_error,
    print_key_value,
    print_output,
    print_success,
)
from dtupload.core.validation import validate_artifact_name, validate_port


@click.group()
def config() -> None:
    """Manage dtupload configuration."""
    pass


@config.command("init")
@click.option("--build", "build_to_upload", default=None, help="Build file name (.apk or .ipa)")
@click.option("--artifacts-dir", default=None, help="Artifact archive directory")
@click.option("--proxy-hostname", default="", help="Proxy host")
@click.option("--proxy-port", type=int, default=0, help="Proxy port")
@click.option("--proxy-username", default=None, help="Proxy username")
@click.option("--proxy-unsecured-connection", is_flag=True, help="Skip proxy TLS verification")
@click.option(
    "--path",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the config file",
)
@click.option("--force", is_flag=True, help="Overwrite existing config")
def config_init(
    build_to_upload: Optional[str],
    artifacts_dir: Optional[str],
    proxy_hostname: str,
    proxy_port: int,
    proxy_username: Optional[str],
    proxy_unsecured_connection: bool,
    config_path: Optional[Path],
    force: bool,
) -> None:
    """Create the configuration file.

    The proxy password and upload API key are never written; set
    DT_PROXY_PASSWORD and DATA_THEOREM_UPLOAD_API_KEY in the job instead.

    Example:
        dtupload config init --build app-release.apk
    """
    path = config_path or CONFIG_FILE
    if path.exists() and not force:
        print_error(f"Config already exists at {path}. Use --force to overwrite.")
        raise SystemExit(1)

    try:
        if build_to_upload:
            build_to_upload = validate_artifact_name(build_to_upload)
        if proxy_hostname:
            proxy_port = validate_port(proxy_port)
    except DTUploadError as e:
        print_error(str(e))
        raise SystemExit(1)

    cfg = Config(
        build_to_upload=build_to_upload,
        artifacts_dir=artifacts_dir,
        proxy=ProxyConfig(
            hostname=proxy_hostname,
            port=proxy_port,
            username=proxy_username,
            unsecured_connection=proxy_unsecured_connection,
        ),
    )
    cfg.save(path)

    print_success(f"Configuration saved to {path}")
    print_key_value(
        {
            "build_to_upload": build_to_upload or "-",
            "proxy": cfg.proxy.url if cfg.proxy.enabled else "-",
        }
    )


@config.command("show")
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="table")
@click.option(
    "--path",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to read",
)
def config_show(output: str, config_path: Optional[Path]) -> None:
    """Show the effective configuration (file plus environment)."""
    try:
        cfg = Config.load(config_path)
    except DTUploadError as e:
        print_error(str(e))
        raise SystemExit(1)

    data = cfg.to_dict()
    data["proxy_password"] = mask_secret(cfg.proxy.password)
    print_output(data, format=OutputFormat.from_string(output))
