"""Remediation policy: model, loading and classification."""

from streamfix.policy.classifier import classify, parse_bit_rate
from streamfix.policy.loader import (
    PolicyValidationError,
    load_policy,
    load_policy_from_dict,
)
from streamfix.policy.models import DEFAULT_POLICY, RemediationPolicy
from streamfix.policy.types import (
    AudioAction,
    Classification,
    ClassificationResult,
    DownmixToStereo,
    EarlyExit,
    FixDisposition,
    RejectedCodec,
    SubtitleExtraction,
    TranscodeToAac,
)

__all__ = [
    "AudioAction",
    "Classification",
    "ClassificationResult",
    "DEFAULT_POLICY",
    "DownmixToStereo",
    "EarlyExit",
    "FixDisposition",
    "PolicyValidationError",
    "RejectedCodec",
    "RemediationPolicy",
    "SubtitleExtraction",
    "TranscodeToAac",
    "classify",
    "load_policy",
    "load_policy_from_dict",
    "parse_bit_rate",
]
