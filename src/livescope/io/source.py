"""
Decoded sample sources.

A source hands out interleaved float32 frames block by block through
``pull(buffer) -> (frames_written, has_more)``. Every source yields 2-D data
of shape ``(frames, channels)`` regardless of the file's channel layout.

Decoding errors that happen mid-stream end the stream and are kept for
:meth:`last_error`; failures to open a file raise :class:`TrackError`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Tuple, Union, runtime_checkable

import librosa
import numpy as np
import soundfile as sf

from livescope.errors import TrackError

logger = logging.getLogger(__name__)


@runtime_checkable
class SampleSource(Protocol):
    """Upstream interface shared by decoders and the streaming analyzer."""

    sample_rate: int
    channels: int

    def pull(self, buffer: np.ndarray) -> Tuple[int, bool]:
        """Fill ``buffer[:n]`` with up to ``len(buffer)`` frames."""
        ...

    def last_error(self) -> Optional[BaseException]:
        ...

    def close(self) -> None:
        ...


class SoundFileSource:
    """Streams frames from disk through libsndfile."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        try:
            self._file = sf.SoundFile(str(self.path), mode="r")
        except (sf.LibsndfileError, RuntimeError, OSError) as exc:
            raise TrackError(self.path, f"cannot decode: {exc}", cause=exc) from exc

        self.sample_rate = int(self._file.samplerate)
        self.channels = int(self._file.channels)
        self._error: Optional[BaseException] = None
        self._exhausted = False

    @property
    def duration(self) -> float:
        return self._file.frames / self.sample_rate if self._file.frames else 0.0

    def pull(self, buffer: np.ndarray) -> Tuple[int, bool]:
        if self._exhausted:
            return 0, False
        try:
            data = self._file.read(len(buffer), dtype="float32", always_2d=True)
        except (sf.LibsndfileError, RuntimeError) as exc:
            logger.error("Decode error in %s: %s", self.path.name, exc)
            self._error = exc
            self._exhausted = True
            return 0, False

        n = len(data)
        if n == 0:
            self._exhausted = True
            return 0, False
        buffer[:n] = data
        return n, True

    def last_error(self) -> Optional[BaseException]:
        return self._error

    def close(self) -> None:
        self._file.close()


class BufferedSource:
    """Serves frames from an in-memory array."""

    def __init__(self, samples: np.ndarray, sample_rate: int):
        data = np.asarray(samples, dtype=np.float32)
        if data.ndim == 1:
            data = data[:, np.newaxis]
        self._data = data
        self._pos = 0
        self.sample_rate = int(sample_rate)
        self.channels = int(data.shape[1])

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "BufferedSource":
        """
        Decode a whole file with librosa.

        Used for containers libsndfile cannot stream. librosa returns
        ``(channels, frames)`` for multichannel audio.

        Raises:
            TrackError: If the file cannot be decoded.
        """
        path = Path(path)
        try:
            y, sr = librosa.load(str(path), sr=None, mono=False)
        except Exception as exc:
            raise TrackError(path, f"cannot decode: {exc}", cause=exc) from exc
        if y.ndim == 2:
            y = y.T
        return cls(y, sr)

    @property
    def duration(self) -> float:
        return len(self._data) / self.sample_rate

    def pull(self, buffer: np.ndarray) -> Tuple[int, bool]:
        remaining = len(self._data) - self._pos
        if remaining <= 0:
            return 0, False
        n = min(len(buffer), remaining)
        buffer[:n] = self._data[self._pos:self._pos + n]
        self._pos += n
        return n, True

    def last_error(self) -> Optional[BaseException]:
        return None

    def close(self) -> None:
        pass


def _streamable_extensions() -> frozenset:
    return frozenset(f".{fmt.lower()}" for fmt in sf.available_formats())


def open_source(path: Union[str, Path]) -> Union[SoundFileSource, BufferedSource]:
    """
    Open a decoded source for ``path``.

    Formats libsndfile knows are streamed; anything else is decoded up front
    through librosa.

    Raises:
        TrackError: If the file is missing or cannot be decoded.
    """
    path = Path(path)
    if not path.is_file():
        raise TrackError(path, "file not found")

    if path.suffix.lower() in _streamable_extensions():
        return SoundFileSource(path)

    logger.debug("%s not streamable by libsndfile; decoding in memory", path.name)
    return BufferedSource.from_file(path)
