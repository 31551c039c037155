"""Main CLI entry point for dtupload."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import SecretStr

from dtupload import __version__
from dtupload.cli.common import (
    Context,
    ExitCode,
    build_name_callback,
    exit_code_for,
    global_options,
    handle_errors,
)
from dtupload.cli.config_cmd import config
from dtupload.core.config import ProxyConfig
from dtupload.core.credentials import (
    CredentialResolver,
    EnvironmentCredentialResolver,
    LiteralCredentialResolver,
)
from dtupload.core.exceptions import ConfigurationError
from dtupload.core.output import (
    OutputFormat,
    create_spinner,
    print_error,
    print_output,
    print_success,
)
from dtupload.core.validation import validate_port, validate_proxy_hostname
from dtupload.models.upload import BuildResult
from dtupload.services.locator import find_artifact
from dtupload.services.orchestrator import SendBuildRequest, SendBuildService

RESULT_CHOICES = [r.name for r in BuildResult]


# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="dtupload")
def cli() -> None:
    """dtupload - send mobile app builds to Data Theorem from CI.

    Get started:

      export DATA_THEOREM_UPLOAD_API_KEY=...

      dtupload send app-release.apk --workspace "$WORKSPACE"

    Use --help on any command for more information.
    """
    pass


cli.add_command(config)


# =============================================================================
# Helpers
# =============================================================================


def _resolve_build_name(ctx: Context, build_name: Optional[str]) -> str:
    name = build_name or ctx.get_config().build_to_upload
    if not name:
        raise ConfigurationError(
            "No build name given. Pass BUILD_NAME or set build_to_upload in the config file."
        )
    return name


def _merge_proxy(
    base: ProxyConfig,
    hostname: Optional[str],
    port: Optional[int],
    username: Optional[str],
    password: Optional[str],
    unsecured: bool,
) -> ProxyConfig:
    proxy = ProxyConfig(
        hostname=hostname or base.hostname,
        port=port or base.port,
        username=username or base.username,
        password=SecretStr(password) if password else base.password,
        unsecured_connection=unsecured or base.unsecured_connection,
    )
    if proxy.enabled:
        proxy.hostname = validate_proxy_hostname(proxy.hostname)
        proxy.port = validate_port(proxy.port)
    return proxy


# =============================================================================
# Commands
# =============================================================================


@cli.command("send")
@click.argument("build_name", required=False, callback=build_name_callback)
@click.option(
    "--workspace",
    "-w",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    envvar="WORKSPACE",
    help="Job workspace to search",
)
@click.option(
    "--artifacts-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Artifact archive searched before the workspace",
)
@click.option("--dont-upload", is_flag=True, help="Only check that the build can be found")
@click.option("--api-key", help="Upload API key (defaults to $DATA_THEOREM_UPLOAD_API_KEY)")
@click.option("--proxy-hostname", help="Proxy host")
@click.option("--proxy-port", type=int, help="Proxy port")
@click.option("--proxy-username", help="Proxy username")
@click.option("--proxy-password", help="Proxy password")
@click.option(
    "--proxy-unsecured-connection",
    is_flag=True,
    help="Do not verify TLS certificates when going through the proxy",
)
@click.option(
    "--previous-result",
    type=click.Choice(RESULT_CHOICES, case_sensitive=False),
    help="Result of the build so far; UNSTABLE or worse skips the upload",
)
@global_options
@handle_errors
def send(
    ctx: Context,
    build_name: Optional[str],
    workspace: Path,
    artifacts_dir: Optional[Path],
    dont_upload: bool,
    api_key: Optional[str],
    proxy_hostname: Optional[str],
    proxy_port: Optional[int],
    proxy_username: Optional[str],
    proxy_password: Optional[str],
    proxy_unsecured_connection: bool,
    previous_result: Optional[str],
) -> None:
    """Upload a build (.apk or .ipa) to Data Theorem.

    Example:
        dtupload send app-release.apk --workspace build/
        dtupload send App.ipa --dont-upload
    """
    cfg = ctx.get_config()
    name = _resolve_build_name(ctx, build_name)
    cfg_artifacts = Path(cfg.artifacts_dir) if cfg.artifacts_dir else None

    request = SendBuildRequest(
        build_to_upload=name,
        workspace=workspace,
        artifacts_dir=artifacts_dir or cfg_artifacts,
        dont_upload=dont_upload or cfg.dont_upload,
        proxy=_merge_proxy(
            cfg.proxy,
            proxy_hostname,
            proxy_port,
            proxy_username,
            proxy_password,
            proxy_unsecured_connection,
        ),
        previous_result=BuildResult.from_string(previous_result) if previous_result else None,
        timeout=cfg.timeout,
        upload_timeout=cfg.upload_timeout,
    )

    credentials: CredentialResolver
    if api_key is not None:
        credentials = LiteralCredentialResolver(api_key)
    else:
        credentials = EnvironmentCredentialResolver()

    service = SendBuildService(credentials)
    if ctx.output_format == OutputFormat.TABLE and not ctx.quiet:
        with create_spinner() as progress:
            progress.add_task(f"Sending {name} to Data Theorem...", total=None)
            report = service.run(request)
    else:
        report = service.run(request)

    if ctx.output_format == OutputFormat.JSON:
        print_output(report.to_dict(), format=OutputFormat.JSON)
    elif report.success:
        if ctx.quiet:
            click.echo(report.result.message)
        else:
            print_success(report.result.message)
    else:
        print_error(report.result.message)

    sys.exit(exit_code_for(report.result.outcome))


@cli.command("locate")
@click.argument("build_name", required=False, callback=build_name_callback)
@click.option(
    "--workspace",
    "-w",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    envvar="WORKSPACE",
    help="Job workspace to search",
)
@click.option(
    "--artifacts-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Artifact archive searched before the workspace",
)
@global_options
@handle_errors
def locate(
    ctx: Context,
    build_name: Optional[str],
    workspace: Path,
    artifacts_dir: Optional[Path],
) -> None:
    """Find a build without uploading it.

    Example:
        dtupload locate app-release.apk --workspace build/
    """
    cfg = ctx.get_config()
    name = _resolve_build_name(ctx, build_name)
    if artifacts_dir is None and cfg.artifacts_dir:
        artifacts_dir = Path(cfg.artifacts_dir)

    location = find_artifact(name, workspace, artifacts_dir)
    if location is None:
        print_error(f"Unable to find any build with name: {name}")
        sys.exit(ExitCode.NOT_FOUND)

    if ctx.quiet:
        click.echo(str(location.path))
        return

    print_output(
        {"build": name, **location.to_dict()},
        format=ctx.output_format,
        key_labels={"found_in_artifact_folder": "Artifact Folder"},
    )
