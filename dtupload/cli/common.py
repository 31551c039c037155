"""Common CLI utilities, decorators, and helpers."""

from __future__ import annotations

import sys
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import click

from dtupload.core.config import Config
from dtupload.core.exceptions import DTUploadError
from dtupload.core.logging import setup_logging
from dtupload.core.output import OutputFormat, print_error
from dtupload.core.validation import validate_artifact_name
from dtupload.models.upload import UploadOutcome

F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Context Object
# =============================================================================


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[Config] = None
        self.config_path: Optional[Path] = None
        self.output_format: OutputFormat = OutputFormat.TABLE
        self.quiet: bool = False
        self.verbose: bool = False

    def get_config(self) -> Config:
        """Get or load the configuration."""
        if self.config is None:
            self.config = Config.load(self.config_path)
        return self.config


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Global Options
# =============================================================================


def global_options(f: F) -> F:
    """Add global options to a command."""

    @click.option(
        "--config",
        "config_path",
        type=click.Path(dir_okay=False, path_type=Path),
        envvar="DT_CONFIG",
        help="Config file to use",
    )
    @click.option(
        "--output",
        "-o",
        "output_format",
        type=click.Choice(["json", "table"]),
        default="table",
        help="Output format",
    )
    @click.option(
        "--quiet",
        "-q",
        is_flag=True,
        help="Minimal output",
    )
    @click.option(
        "--verbose",
        "-v",
        is_flag=True,
        help="Enable verbose output",
    )
    @pass_context
    @wraps(f)
    def wrapper(
        ctx: Context,
        config_path: Optional[Path],
        output_format: str,
        quiet: bool,
        verbose: bool,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Populate context from global options and invoke the command."""
        ctx.config_path = config_path
        ctx.output_format = OutputFormat.from_string(output_format)
        ctx.quiet = quiet
        ctx.verbose = verbose

        setup_logging(quiet=quiet, verbose=verbose)

        return f(ctx, *args, **kwargs)

    return wrapper  # type: ignore


# =============================================================================
# Parameter Callbacks
# =============================================================================


def build_name_callback(
    ctx: click.Context, param: click.Parameter, value: Optional[str]
) -> Optional[str]:
    """Validate a build name argument."""
    if value is None:
        return None
    try:
        return validate_artifact_name(value)
    except DTUploadError as e:
        raise click.BadParameter(str(e))


# =============================================================================
# Error Handling
# =============================================================================


def handle_errors(f: F) -> F:
    """Handle common errors and convert to CLI exits."""

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Capture errors and exit with consistent messaging."""
        try:
            return f(*args, **kwargs)
        except DTUploadError as e:
            print_error(str(e))
            sys.exit(ExitCode.GENERAL_ERROR)
        except click.ClickException:
            raise
        except KeyboardInterrupt:
            print_error("Upload cancelled")
            sys.exit(ExitCode.USER_CANCELLED)

    return wrapper  # type: ignore


# =============================================================================
# Exit Codes
# =============================================================================


class ExitCode:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 2
    NETWORK_ERROR = 3
    NOT_FOUND = 4
    USER_CANCELLED = 5
    SKIPPED = 6


_OUTCOME_EXIT_CODES = {
    UploadOutcome.SUCCESS: ExitCode.SUCCESS,
    UploadOutcome.DRY_RUN: ExitCode.SUCCESS,
    UploadOutcome.SKIPPED: ExitCode.SKIPPED,
    UploadOutcome.NOT_FOUND: ExitCode.NOT_FOUND,
    UploadOutcome.CREDENTIAL_ERROR: ExitCode.AUTH_ERROR,
    UploadOutcome.TRANSPORT_ERROR: ExitCode.NETWORK_ERROR,
    UploadOutcome.PROTOCOL_ERROR: ExitCode.GENERAL_ERROR,
    UploadOutcome.SERVER_ERROR: ExitCode.GENERAL_ERROR,
    UploadOutcome.IO_ERROR: ExitCode.GENERAL_ERROR,
}


def exit_code_for(outcome: UploadOutcome) -> int:
    """Map an upload outcome to a process exit code."""
    return _OUTCOME_EXIT_CODES[outcome]
