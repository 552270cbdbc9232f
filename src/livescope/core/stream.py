"""
Real-time analysis tap between the decoder and the output device.

Architecture Overview
---------------------
::

    Decoder (SampleSource)
        │
        ▼  pull(buffer) -> (n, has_more)
    StreamingAnalyzer.pull(buffer)
        │
        ├─► forwards (n, has_more) unchanged to the output device
        │
        └─► BlockTransform(buffer[:n, 0])
                 └─► FeatureSnapshot ─► SnapshotPublisher
                                              │
                          display loop ◄──────┘ read() every tick

Design Goals
------------
* **Transparent**: the analyzer has the same interface as its upstream and
  never alters the samples or the frame count it passes on.
* **Bounded latency**: one FFT per block; at 512 frames that is well under a
  millisecond, far below the ~11.6 ms block period at 44 100 Hz.
* **Thread-safe**: :meth:`StreamingAnalyzer.pull` runs on the audio
  callback thread; readers only touch the publisher.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np

from livescope.core.snapshot import FeatureSnapshot, SnapshotPublisher
from livescope.core.transform import BlockTransform
from livescope.io.source import SampleSource

logger = logging.getLogger(__name__)


class StreamingAnalyzer:
    """
    Decorates a :class:`SampleSource`, analysing each block it hands out.

    Parameters
    ----------
    source:
        Upstream decoded source.
    publisher:
        Receives one snapshot per analysed block.
    transform:
        Feature extractor; its smoothing state is reset on construction.
    track:
        Display label stamped on published snapshots.
    """

    def __init__(
        self,
        source: SampleSource,
        publisher: SnapshotPublisher,
        transform: Optional[BlockTransform] = None,
        track: Optional[str] = None,
    ):
        self.source = source
        self.publisher = publisher
        self.transform = transform or BlockTransform()
        self.transform.reset()
        self.track = track

        self.blocks_analyzed: int = 0
        self.frames_seen: int = 0

    @property
    def sample_rate(self) -> int:
        return self.source.sample_rate

    @property
    def channels(self) -> int:
        return self.source.channels

    @property
    def elapsed(self) -> float:
        """Seconds of audio that have passed through the analyzer."""
        return self.frames_seen / self.sample_rate if self.sample_rate else 0.0

    def pull(self, buffer: np.ndarray) -> Tuple[int, bool]:
        """
        Pull a block from upstream, analyse it, and pass it on unchanged.

        Parameters
        ----------
        buffer:
            ``(capacity, channels)`` float array filled by the upstream.

        Returns
        -------
        tuple[int, bool]
            Exactly what the upstream returned.
        """
        n, has_more = self.source.pull(buffer)
        if not has_more or n <= 0:
            return n, has_more

        # Private copy of the analysis channel; the buffer belongs to playback.
        mono = np.array(buffer[:n, 0], dtype=np.float64, copy=True)
        features = self.transform.apply(mono, self.sample_rate)

        self.blocks_analyzed += 1
        self.frames_seen += n
        self.publisher.publish(
            FeatureSnapshot(
                rms=features.rms,
                frequency=features.frequency,
                bands=tuple(float(b) for b in features.bands),
                frames=features.frames,
                block_index=self.blocks_analyzed,
                track=self.track,
            )
        )
        return n, has_more

    def last_error(self) -> Optional[BaseException]:
        return self.source.last_error()

    def close(self) -> None:
        logger.debug(
            "Analyzer for %s closed after %d blocks (%d frames)",
            self.track,
            self.blocks_analyzed,
            self.frames_seen,
        )
        self.source.close()
