"""Exception hierarchy.

Setup errors abort the run; track errors are reported and the playlist moves
on. The transform itself has no error type: well-formed input cannot fail.
"""

from pathlib import Path
from typing import Optional, Union


class LivescopeError(Exception):
    """Base class for all livescope errors."""


class ConfigError(LivescopeError):
    """Invalid configuration value or unknown preset."""


class SetupError(LivescopeError):
    """Fatal startup failure: output device or music directory scan."""


class TrackError(LivescopeError):
    """A single track could not be opened or decoded."""

    def __init__(
        self,
        path: Union[str, Path],
        message: str,
        cause: Optional[BaseException] = None,
    ):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path}: {message}")
