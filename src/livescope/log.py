"""Logging setup.

The live display owns stdout, so log records go to stderr or a file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Write records here instead of stderr.
    """
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("livescope")
    root.setLevel(getattr(logging, level.upper()))
    root.handlers = [handler]
    root.propagate = False

    # PortAudio bindings are chatty at DEBUG
    logging.getLogger("sounddevice").setLevel(logging.WARNING)
