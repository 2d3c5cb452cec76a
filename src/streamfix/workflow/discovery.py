"""Video file discovery."""

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ("mkv", "mp4", "avi", "webm", "m4v", "mov")


def _normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    return frozenset(f".{ext.lstrip('.').casefold()}" for ext in extensions)


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts[:-1])


def discover_files(
    path: Path,
    recursive: bool = False,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> list[Path]:
    """Discover video files under a path.

    A file is returned as-is when its extension matches. Directories are
    listed flat, or walked when ``recursive`` is set; files inside hidden
    directories are skipped. ``.original`` leftovers never match because
    their suffix is not a video extension.

    Args:
        path: File or directory.
        recursive: Walk subdirectories.
        extensions: Video extensions, with or without leading dot.

    Returns:
        Sorted, de-duplicated list of resolved file paths.

    Raises:
        FileNotFoundError: If the path does not exist.
        NotADirectoryError: If the path is neither a file nor a directory.
    """
    path = path.expanduser().resolve()
    wanted = _normalize_extensions(extensions)

    if not path.exists():
        raise FileNotFoundError(f"Path not found: {path}")

    if path.is_file():
        if path.suffix.casefold() in wanted:
            return [path]
        logger.debug("Ignoring %s: not a video extension", path)
        return []

    if not path.is_dir():
        raise NotADirectoryError(f"Not a file or directory: {path}")

    candidates = path.rglob("*") if recursive else path.glob("*")
    files = {
        candidate
        for candidate in candidates
        if candidate.is_file()
        and candidate.suffix.casefold() in wanted
        and not _is_hidden(candidate, path)
    }
    logger.debug("Discovered %d file(s) under %s", len(files), path)
    return sorted(files)
