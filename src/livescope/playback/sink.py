"""
Output device wrapper.

The PortAudio callback drives the whole audio path: each callback pulls the
next block from the (analysing) source and hands it to the device. When the
source runs dry the callback raises ``CallbackStop``; PortAudio drains the
remaining buffers and then fires ``finished_callback``, which sets
:attr:`SoundDeviceSink.done` exactly once.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import numpy as np
import sounddevice as sd

from livescope.errors import SetupError, TrackError
from livescope.io.source import SampleSource

logger = logging.getLogger(__name__)


class SoundDeviceSink:
    """Plays a :class:`SampleSource` on the default output device."""

    def __init__(
        self,
        source: SampleSource,
        block_size: int = 512,
        latency: float = 0.1,
        device: Optional[int] = None,
    ):
        """
        Open the output stream (not started yet).

        Args:
            source: Frames to play; usually a StreamingAnalyzer.
            block_size: Frames per callback.
            latency: Suggested output latency in seconds.
            device: PortAudio device index; None for the default.

        Raises:
            SetupError: If there is no usable output device.
            TrackError: If the device rejects this source's sample rate or
                channel count.
        """
        self.source = source
        self.block_size = block_size
        self.done = threading.Event()
        self.error: Optional[BaseException] = None

        try:
            sd.query_devices(device, kind="output")
        except (sd.PortAudioError, ValueError) as exc:
            raise SetupError(f"Cannot open audio output: {exc}") from exc

        # A format the device refuses only affects this track.
        try:
            sd.check_output_settings(
                device=device,
                channels=source.channels,
                dtype="float32",
                samplerate=source.sample_rate,
            )
        except (sd.PortAudioError, ValueError) as exc:
            raise TrackError(
                getattr(source, "track", None) or "<stream>",
                f"output device does not support {source.sample_rate} Hz, "
                f"{source.channels} ch: {exc}",
                cause=exc,
            ) from exc

        self._scratch = np.zeros((block_size, source.channels), dtype=np.float32)
        try:
            self._stream = sd.OutputStream(
                samplerate=source.sample_rate,
                blocksize=block_size,
                channels=source.channels,
                dtype="float32",
                latency=latency,
                device=device,
                callback=self._callback,
                finished_callback=self._finished,
            )
        except (sd.PortAudioError, ValueError) as exc:
            raise SetupError(f"Cannot open audio output: {exc}") from exc

    def _callback(self, outdata: np.ndarray, frames: int, time_info, status) -> None:
        if status:
            logger.debug("Output status: %s", status)

        if frames > len(self._scratch):
            self._scratch = np.zeros((frames, outdata.shape[1]), dtype=np.float32)

        filled = 0
        ended = False
        try:
            while filled < frames:
                n, has_more = self.source.pull(self._scratch[filled:frames])
                filled += n
                if not has_more:
                    ended = True
                    break
        except Exception as exc:
            logger.exception("Audio source failed during playback")
            self.error = exc
            outdata.fill(0)
            raise sd.CallbackAbort from exc

        outdata[:filled] = self._scratch[:filled]
        outdata[filled:] = 0.0
        if ended:
            raise sd.CallbackStop

    def _finished(self) -> None:
        self.done.set()

    def start(self) -> None:
        try:
            self._stream.start()
        except sd.PortAudioError as exc:
            raise SetupError(f"Cannot start audio output: {exc}") from exc

    def stop(self) -> None:
        """Stop playback immediately; :attr:`done` is set afterwards."""
        if self._stream.active:
            self._stream.abort()
        self.done.set()

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "SoundDeviceSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
