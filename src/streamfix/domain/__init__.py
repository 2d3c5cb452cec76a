"""Domain models and enums for streamfix.

Usage:
    from streamfix.domain import CodecType, ProbeResult, StreamInfo
"""

from .enums import CodecType
from .models import ProbeResult, StreamInfo

__all__ = [
    "CodecType",
    "ProbeResult",
    "StreamInfo",
]
