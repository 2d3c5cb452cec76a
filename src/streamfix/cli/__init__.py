"""CLI module for streamfix."""

import dataclasses
import logging
from pathlib import Path

import click

from streamfix.cli.exit_codes import ExitCode
from streamfix.cli.output import error_exit
from streamfix.config import LoggingConfig, get_config
from streamfix.logging import configure_logging

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _logging_config(
    base: LoggingConfig,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> LoggingConfig:
    """Apply --log-level/--log-file/--log-json on top of the loaded config.

    Options that were not given keep the config file/environment value.
    ``--log-json`` can only switch JSON on; the text format is selected by
    leaving it off.

    Raises:
        ValueError: If the merged values are invalid.
    """
    overrides: dict = {}
    if log_level is not None:
        overrides["level"] = log_level
    if log_file is not None:
        overrides["file"] = log_file
    if log_json:
        overrides["format"] = "json"
    # replace() re-runs LoggingConfig validation
    return dataclasses.replace(base, **overrides)


def _configure_logging(
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging once per process from config plus CLI options."""
    global _logging_configured
    if _logging_configured:
        return

    configure_logging(
        _logging_config(get_config().logging, log_level, log_file, log_json)
    )
    _logging_configured = True


@click.group()
@click.version_option(package_name="streamfix")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """streamfix - Make video files direct-play in web browsers."""
    ctx.ensure_object(dict)
    try:
        _configure_logging(log_level, log_file, log_json)
    except ValueError as e:
        error_exit(f"Invalid configuration: {e}", ExitCode.CONFIG_ERROR)
    logger.debug("streamfix starting: subcommand=%s", ctx.invoked_subcommand)


# Defer import to avoid circular dependency
def _register_commands():
    from streamfix.cli.fix import fix_command
    from streamfix.cli.inspect import inspect_command

    main.add_command(fix_command)
    main.add_command(inspect_command)


_register_commands()
