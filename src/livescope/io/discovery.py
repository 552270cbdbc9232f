"""Playlist discovery."""

import logging
import os
from pathlib import Path
from typing import Iterable, Tuple, Union

from livescope.errors import SetupError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".mp3", ".wav")


def discover(
    root: Union[str, Path],
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> Tuple[Path, ...]:
    """
    Recursively collect playable files under ``root``.

    Args:
        root: Directory to scan.
        extensions: Accepted suffixes, matched case-insensitively.

    Returns:
        Sorted tuple of file paths.

    Raises:
        SetupError: If ``root`` is not a directory or traversal fails.
    """
    root = Path(root)
    if not root.is_dir():
        raise SetupError(f"Music directory not found: {root}")

    wanted = {e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions}

    def _fail(exc: OSError) -> None:
        raise SetupError(f"Error scanning {root}: {exc}") from exc

    found = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_fail):
        for name in filenames:
            if Path(name).suffix.lower() in wanted:
                found.append(Path(dirpath) / name)

    found.sort()
    logger.info("Discovered %d playable file(s) under %s", len(found), root)
    return tuple(found)
