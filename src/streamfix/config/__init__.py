"""Configuration management for streamfix.

Precedence: CLI flags > STREAMFIX_* environment variables >
~/.streamfix/config.toml > defaults.
"""

from streamfix.config.env import EnvReader
from streamfix.config.loader import (
    build_config,
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from streamfix.config.models import (
    LoggingConfig,
    ProcessingConfig,
    StreamfixConfig,
    ToolPathsConfig,
)

__all__ = [
    "EnvReader",
    "LoggingConfig",
    "ProcessingConfig",
    "StreamfixConfig",
    "ToolPathsConfig",
    "build_config",
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config_file",
]
