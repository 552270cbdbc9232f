"""Shared fixtures: synthetic signals and fake playback collaborators."""

import threading
import time

import numpy as np
import pytest

from livescope.io.source import BufferedSource

TEST_SR = 44100
BLOCK = 512


def sine(freq: float, n: int, sr: int = TEST_SR, amplitude: float = 1.0) -> np.ndarray:
    t = np.arange(n) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float64)


@pytest.fixture
def pure_sine():
    """Two seconds of a 1 kHz sine."""
    return sine(1000.0, 2 * TEST_SR).astype(np.float32), TEST_SR


@pytest.fixture
def stereo_signal():
    """Stereo: 440 Hz on the left, 3 kHz on the right, 0.5 s."""
    n = TEST_SR // 2
    left = sine(440.0, n, amplitude=0.8)
    right = sine(3000.0, n, amplitude=0.3)
    return np.stack([left, right], axis=1).astype(np.float32), TEST_SR


@pytest.fixture
def silence():
    return np.zeros(BLOCK, dtype=np.float64)


class FakeSink:
    """
    Stands in for the output device: pulls blocks on a background thread
    and sets ``done`` when the source runs dry or ``stop()`` is called.
    """

    def __init__(self, source, config=None, block_size: int = 256, delay: float = 0.0):
        self.source = source
        self.delay = delay
        self.done = threading.Event()
        self.error = None
        self.blocks = []
        self._halt = threading.Event()
        self._buffer = np.zeros((block_size, source.channels), dtype=np.float32)
        self._thread = None

    def _run(self):
        while not self._halt.is_set():
            n, has_more = self.source.pull(self._buffer)
            if not has_more:
                break
            self.blocks.append(self._buffer[:n].copy())
            if self.delay:
                time.sleep(self.delay)
        self.done.set()

    def start(self):
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self):
        self._halt.set()
        self.done.set()

    def close(self):
        self._halt.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)


class EndlessSource:
    """Never runs out of (silent) frames."""

    sample_rate = TEST_SR
    channels = 1

    def pull(self, buffer):
        buffer[:] = 0.0
        return len(buffer), True

    def last_error(self):
        return None

    def close(self):
        pass


class BrokenStreamSource(BufferedSource):
    """Plays a few frames, then reports a decode error."""

    def __init__(self, frames: int = 1000):
        super().__init__(np.zeros(frames, dtype=np.float32), TEST_SR)
        self._error = None

    def pull(self, buffer):
        n, has_more = super().pull(buffer)
        if not has_more:
            self._error = RuntimeError("corrupt frame")
        return n, has_more

    def last_error(self):
        return self._error


@pytest.fixture
def fake_sink_factory():
    """Collects every FakeSink the driver creates."""
    created = []

    def factory(source, config):
        sink = FakeSink(source, config)
        created.append(sink)
        return sink

    factory.created = created
    return factory
