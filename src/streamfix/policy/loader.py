"""Remediation policy loading from YAML files."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from streamfix.exceptions import StreamfixError
from streamfix.policy.models import RemediationPolicy
from streamfix.policy.pydantic_models import RemediationPolicyModel

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMA_VERSION = 1


class PolicyValidationError(StreamfixError):
    """Raised when a policy file fails validation."""

    pass


def _format_validation_error(error: ValidationError) -> str:
    """Transform Pydantic errors into a single user-friendly message."""
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        messages.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "Policy validation failed: " + "; ".join(messages)


def load_policy_from_dict(data: dict[str, Any]) -> RemediationPolicy:
    """Load and validate a policy from a dictionary.

    Args:
        data: Dictionary containing policy configuration.

    Returns:
        Validated RemediationPolicy.

    Raises:
        PolicyValidationError: If the policy data is invalid.
    """
    schema_version = data.get("schema_version", SUPPORTED_SCHEMA_VERSION)
    if schema_version != SUPPORTED_SCHEMA_VERSION:
        raise PolicyValidationError(
            f"Only schema_version {SUPPORTED_SCHEMA_VERSION} is supported, "
            f"got {schema_version}"
        )

    try:
        model = RemediationPolicyModel.model_validate(data)
    except ValidationError as e:
        raise PolicyValidationError(_format_validation_error(e)) from e

    try:
        return RemediationPolicy(
            allowed_video_codecs=frozenset(model.video.allowed_codecs),
            subtitle_languages=frozenset(model.subtitles.languages),
            caption_codec=model.subtitles.codec,
            caption_extension=model.subtitles.extension,
            output_extension=model.output.extension,
            tag_forced_subtitles=model.subtitles.tag_forced,
            tag_hearing_impaired_subtitles=model.subtitles.tag_hearing_impaired,
        )
    except ValueError as e:
        raise PolicyValidationError(str(e)) from e


def load_policy(policy_path: Path) -> RemediationPolicy:
    """Load and validate a policy from a YAML file.

    Args:
        policy_path: Path to the YAML policy file.

    Returns:
        Validated RemediationPolicy.

    Raises:
        PolicyValidationError: If the policy file is invalid.
        FileNotFoundError: If the policy file does not exist.
    """
    if not policy_path.exists():
        raise FileNotFoundError(f"Policy file not found: {policy_path}")

    try:
        with open(policy_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PolicyValidationError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise PolicyValidationError("Policy file is empty")

    if not isinstance(data, dict):
        raise PolicyValidationError("Policy file must be a YAML mapping")

    policy = load_policy_from_dict(data)
    logger.debug("Loaded policy from %s: %s", policy_path, policy)
    return policy
