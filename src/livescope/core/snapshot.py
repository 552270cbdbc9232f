"""
Latest-result holder shared between the audio thread and the display loop.

The audio callback publishes a new immutable :class:`FeatureSnapshot` per
block; the display loop reads whichever snapshot is current. Publishing is a
reference swap under a lock, so a reader always sees one block's complete
result and never waits on a recompute.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class FeatureSnapshot:
    """
    Immutable analysis result for one block.

    The all-zero value from :meth:`empty` means "nothing analysed yet" and is
    a valid state for readers.
    """

    rms: float = 0.0
    frequency: float = 0.0
    bands: Tuple[float, ...] = ()
    frames: int = 0
    block_index: int = 0
    track: Optional[str] = None

    @classmethod
    def empty(cls, band_count: int, track: Optional[str] = None) -> "FeatureSnapshot":
        return cls(bands=(0.0,) * band_count, track=track)

    @property
    def is_empty(self) -> bool:
        return self.block_index == 0


class SnapshotPublisher:
    """Single-writer, many-reader slot holding the current snapshot."""

    def __init__(self, band_count: int = 32):
        self.band_count = band_count
        self._lock = threading.Lock()
        self._snapshot = FeatureSnapshot.empty(band_count)
        self._version = 0

    def publish(self, snapshot: FeatureSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot
            self._version += 1

    def read(self) -> FeatureSnapshot:
        with self._lock:
            return self._snapshot

    def read_versioned(self) -> Tuple[int, FeatureSnapshot]:
        """Return ``(version, snapshot)`` read together."""
        with self._lock:
            return self._version, self._snapshot

    def reset(self, track: Optional[str] = None) -> None:
        """Publish an empty snapshot labelled with the upcoming track."""
        self.publish(FeatureSnapshot.empty(self.band_count, track=track))

    @property
    def version(self) -> int:
        with self._lock:
            return self._version


@dataclass(frozen=True)
class PresentationFrame:
    """What the display receives each tick: a snapshot plus playback context."""

    snapshot: FeatureSnapshot
    track: str
    index: int = 0          # zero-based playlist position
    total: int = 1
    elapsed: float = 0.0    # seconds of audio analysed so far
    finished: bool = False

    @property
    def rms(self) -> float:
        return self.snapshot.rms

    @property
    def frequency(self) -> float:
        return self.snapshot.frequency

    @property
    def bands(self) -> Tuple[float, ...]:
        return self.snapshot.bands
