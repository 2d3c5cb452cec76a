"""Introspector module for streamfix.

- MediaIntrospector: Protocol defining the introspection interface
- FFprobeIntrospector: Production implementation using ffprobe
- parse_ffprobe_output: Pure parser for ffprobe JSON
- format_human / stream_to_dict: Renderings for the inspect command
- MediaIntrospectionError: Exception for introspection failures
"""

from streamfix.introspector.ffprobe import FFprobeIntrospector
from streamfix.introspector.formatters import (
    format_human,
    format_stream_line,
    stream_to_dict,
)
from streamfix.introspector.interface import (
    MediaIntrospectionError,
    MediaIntrospector,
)
from streamfix.introspector.parsers import parse_ffprobe_output

__all__ = [
    "MediaIntrospector",
    "MediaIntrospectionError",
    "FFprobeIntrospector",
    "format_human",
    "format_stream_line",
    "parse_ffprobe_output",
    "stream_to_dict",
]
