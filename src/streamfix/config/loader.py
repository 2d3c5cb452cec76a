"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to functions)
2. Environment variables (STREAMFIX_*)
3. Config file (~/.streamfix/config.toml)
4. Default values

Environment variables:
- STREAMFIX_CONFIG_PATH: Path to config file
- STREAMFIX_FFMPEG_PATH / STREAMFIX_FFPROBE_PATH: Tool paths
- STREAMFIX_LOG_LEVEL / STREAMFIX_LOG_FILE / STREAMFIX_LOG_FORMAT: Logging
- STREAMFIX_LOG_INCLUDE_STDERR: Also log to stderr when a log file is set
- STREAMFIX_WORKERS: Parallel files in directory mode
- STREAMFIX_TIMEOUT: Seconds before an ffmpeg run is killed (0 = never)
- STREAMFIX_LAUNCH_RETRIES: Extra attempts when ffmpeg cannot be launched
- STREAMFIX_RETRY_DELAY: Base delay in seconds between launch attempts
- STREAMFIX_POLICY: Default policy YAML file
"""

from __future__ import annotations

import logging
import threading
import tomllib
from pathlib import Path
from typing import Any

from streamfix.config.env import EnvReader
from streamfix.config.models import (
    LoggingConfig,
    ProcessingConfig,
    StreamfixConfig,
    ToolPathsConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".streamfix"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

_config_cache: StreamfixConfig | None = None
_config_lock = threading.Lock()


def get_default_config_path() -> Path:
    """Get the config file path, honouring STREAMFIX_CONFIG_PATH."""
    return EnvReader().get_path("CONFIG_PATH", DEFAULT_CONFIG_FILE)


def load_config_file(config_path: Path | None = None) -> dict[str, Any]:
    """Load and parse the TOML config file.

    Args:
        config_path: Path to config file. None uses the default location.

    Returns:
        Parsed dictionary. Empty if the file does not exist or is invalid.
    """
    path = config_path or get_default_config_path()
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return data


def _optional_path(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def build_config(
    file_config: dict[str, Any],
    env: EnvReader | None = None,
) -> StreamfixConfig:
    """Merge file values and environment variables into a StreamfixConfig.

    Args:
        file_config: Parsed config file contents.
        env: Environment reader (defaults to os.environ).

    Returns:
        StreamfixConfig with environment taking precedence over the file.

    Raises:
        ValueError: If a merged value fails model validation.
    """
    env = env or EnvReader()

    tools_file = file_config.get("tools", {})
    tools = ToolPathsConfig(
        ffmpeg=(
            env.get_path("FFMPEG_PATH", must_exist=True)
            or _optional_path(tools_file.get("ffmpeg"))
        ),
        ffprobe=(
            env.get_path("FFPROBE_PATH", must_exist=True)
            or _optional_path(tools_file.get("ffprobe"))
        ),
    )

    logging_file = file_config.get("logging", {})
    defaults = LoggingConfig()
    logging_config = LoggingConfig(
        level=env.get_str("LOG_LEVEL", logging_file.get("level"))
        or defaults.level,
        file=env.get_path("LOG_FILE")
        or _optional_path(logging_file.get("file")),
        format=env.get_str("LOG_FORMAT", logging_file.get("format"))
        or defaults.format,
        include_stderr=env.get_bool(
            "LOG_INCLUDE_STDERR",
            logging_file.get("include_stderr", defaults.include_stderr),
        ),
        max_bytes=logging_file.get("max_bytes", defaults.max_bytes),
        backup_count=logging_file.get("backup_count", defaults.backup_count),
    )

    processing_file = file_config.get("processing", {})
    proc_defaults = ProcessingConfig()
    processing = ProcessingConfig(
        workers=env.get_int(
            "WORKERS",
            processing_file.get("workers", proc_defaults.workers),
        ),
        timeout_seconds=env.get_int(
            "TIMEOUT",
            processing_file.get("timeout_seconds", proc_defaults.timeout_seconds),
        ),
        launch_retries=env.get_int(
            "LAUNCH_RETRIES",
            processing_file.get("launch_retries", proc_defaults.launch_retries),
        ),
        retry_delay_seconds=env.get_float(
            "RETRY_DELAY",
            processing_file.get(
                "retry_delay_seconds", proc_defaults.retry_delay_seconds
            ),
        ),
        probe_timeout_seconds=processing_file.get(
            "probe_timeout_seconds", proc_defaults.probe_timeout_seconds
        ),
    )

    policy_file = env.get_path("POLICY") or (
        _optional_path(file_config.get("policy", {}).get("file"))
    )

    return StreamfixConfig(
        tools=tools,
        logging=logging_config,
        processing=processing,
        policy_file=policy_file,
    )


def get_config(config_path: Path | None = None) -> StreamfixConfig:
    """Get the effective configuration.

    The default configuration is cached for the life of the process; an
    explicit config_path always re-reads the file.

    Args:
        config_path: Path to config file (overrides STREAMFIX_CONFIG_PATH).

    Returns:
        StreamfixConfig with merged configuration.
    """
    global _config_cache

    if config_path is not None:
        return build_config(load_config_file(config_path))

    with _config_lock:
        if _config_cache is None:
            _config_cache = build_config(load_config_file())
        return _config_cache


def clear_config_cache() -> None:
    """Drop the cached configuration (used by tests)."""
    global _config_cache
    with _config_lock:
        _config_cache = None
