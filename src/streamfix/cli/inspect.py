"""CLI inspect command: show streams and the planned remediation."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

import click

from streamfix.cli.common import build_introspector, resolve_policy
from streamfix.cli.exit_codes import ExitCode
from streamfix.cli.output import error_exit
from streamfix.config import get_config
from streamfix.exceptions import ParseError
from streamfix.executor import (
    build_audio_command,
    build_subtitle_command,
    original_path_for,
    remediation_output_path,
    subtitle_output_paths,
)
from streamfix.introspector import (
    MediaIntrospectionError,
    format_human,
    stream_to_dict,
)
from streamfix.policy import (
    Classification,
    ClassificationResult,
    EarlyExit,
    RejectedCodec,
    RemediationPolicy,
    classify,
)

logger = logging.getLogger(__name__)


def _planned_commands(
    path: Path, classification: Classification, policy: RemediationPolicy
) -> list[list[str]]:
    """Build the ffmpeg commands `fix` would run, in execution order."""
    commands = []
    captions = subtitle_output_paths(
        path, classification.subtitle_extractions, policy.caption_extension
    )
    for extraction, caption in zip(classification.subtitle_extractions, captions):
        invocation = build_subtitle_command(
            extraction, path, caption, policy.caption_codec
        )
        commands.append(invocation.to_args())

    if classification.audio_action is not None:
        invocation = build_audio_command(
            classification.audio_action,
            classification.total_audio_streams,
            original_path_for(path),
            remediation_output_path(path, policy.output_extension),
        )
        commands.append(invocation.to_args())
    return commands


def _describe(result: ClassificationResult) -> str:
    if isinstance(result, EarlyExit):
        return "conforming (default stereo AAC present)"
    if isinstance(result, RejectedCodec):
        return f"rejected ({result.codec_name} video is not supported)"
    parts = []
    if result.audio_action is not None:
        action = result.audio_action
        parts.append(f"{action.name} on a:{action.target_index}")
    if result.subtitle_extractions:
        parts.append(f"{len(result.subtitle_extractions)} subtitle extraction(s)")
    return ", ".join(parts) or "nothing to do"


def _classification_to_dict(result: ClassificationResult) -> dict[str, Any]:
    if isinstance(result, EarlyExit):
        return {"result": result.name}
    if isinstance(result, RejectedCodec):
        return {"result": result.name, "codec": result.codec_name}

    action = result.audio_action
    return {
        "result": "remediate",
        "audio_action": (
            {"name": action.name, **asdict(action)} if action is not None else None
        ),
        "subtitles": [asdict(e) for e in result.subtitle_extractions],
        "total_audio_streams": result.total_audio_streams,
    }


@click.command("inspect")
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--policy",
    "-p",
    "policy_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to YAML policy file (default: from config or built-in).",
)
@click.option(
    "--json",
    "-j",
    "json_output",
    is_flag=True,
    default=False,
    help="Output in JSON format.",
)
def inspect_command(file: Path, policy_path: Path | None, json_output: bool) -> None:
    """Show a file's streams and what `fix` would do to it.

    Nothing is modified.
    """
    if not file.exists():
        error_exit(f"File not found: {file}", ExitCode.TARGET_NOT_FOUND, json_output)

    config = get_config()
    policy = resolve_policy(policy_path, config, json_output)
    introspector = build_introspector(config, json_output)

    try:
        probe = introspector.probe(file)
    except ParseError as e:
        error_exit(f"Could not parse {file}: {e}", ExitCode.PARSE_ERROR, json_output)
    except MediaIntrospectionError as e:
        error_exit(str(e), ExitCode.OPERATION_FAILED, json_output)

    try:
        result = classify(probe.streams, policy)
    except ParseError as e:
        error_exit(str(e), ExitCode.PARSE_ERROR, json_output)

    commands = (
        _planned_commands(file, result, policy)
        if isinstance(result, Classification)
        else []
    )

    if json_output:
        output = {
            "file": str(file),
            "streams": [stream_to_dict(s) for s in probe.streams],
            "classification": _classification_to_dict(result),
            "commands": commands,
        }
        click.echo(json.dumps(output, indent=2, default=str))
    else:
        click.echo(format_human(probe))
        click.echo("")
        click.echo(f"Classification: {_describe(result)}")
        if commands:
            click.echo("")
            click.echo("Commands:")
            for cmd in commands:
                click.echo(f"  {' '.join(cmd)}")

    sys.exit(ExitCode.SUCCESS)
