"""Typed access to STREAMFIX_* environment overrides.

Names are given without the prefix: ``env.get_int("WORKERS")`` reads
``STREAMFIX_WORKERS``. Tests hand EnvReader a plain mapping instead of
patching os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeVar

logger = logging.getLogger(__name__)

ENV_PREFIX = "STREAMFIX_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})

T = TypeVar("T")


class EnvReader:
    """Reads STREAMFIX_* overrides and converts them to config field types.

    A value that does not convert is logged and ignored, so a typo in the
    environment falls back to the config file instead of aborting the run.
    Variables that are exported but empty count as unset.
    """

    def __init__(
        self, env: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX
    ) -> None:
        self._env: Mapping[str, str] = os.environ if env is None else env
        self.prefix = prefix

    def raw(self, name: str) -> str | None:
        """Return the stripped value of ``<prefix><name>``, or None if unset."""
        value = self._env.get(self.prefix + name, "").strip()
        return value or None

    def _convert(
        self, name: str, convert: Callable[[str], T], default: T | None, kind: str
    ) -> T | None:
        value = self.raw(name)
        if value is None:
            return default
        try:
            return convert(value)
        except ValueError:
            logger.warning(
                "Ignoring %s%s=%r: not a valid %s", self.prefix, name, value, kind
            )
            return default

    def get_str(self, name: str, default: str | None = None) -> str | None:
        value = self.raw(name)
        return default if value is None else value

    def get_int(self, name: str, default: int | None = None) -> int | None:
        return self._convert(name, int, default, "integer")

    def get_float(self, name: str, default: float | None = None) -> float | None:
        return self._convert(name, float, default, "number")

    def get_bool(self, name: str, default: bool | None = None) -> bool | None:
        """Read a flag; 1/true/yes/on (any case) are true, anything else false."""
        value = self.raw(name)
        if value is None:
            return default
        return value.casefold() in _TRUE_VALUES

    def get_path(
        self, name: str, default: Path | None = None, must_exist: bool = False
    ) -> Path | None:
        """Read a path, expanding ``~``.

        Args:
            name: Variable name without the prefix.
            default: Returned when unset, or when must_exist fails.
            must_exist: Ignore (with a warning) paths that do not exist.
                Used for tool executables, not for files streamfix creates.
        """
        value = self.raw(name)
        if value is None:
            return default
        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning("Ignoring %s%s: %s does not exist", self.prefix, name, path)
            return default
        return path
