"""
Playlist sequencing and the display tick loop.

Each track moves through ``OPENING → STREAMING → DONE`` (or ``FAILED``).
While a track streams, the driver blocks on the sink's completion event with
the tick interval as timeout, so it wakes on whichever comes first: a display
tick or the end of the track. No assumption is made about how many blocks
were analysed between two ticks.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from livescope.config import AnalysisConfig
from livescope.core.snapshot import PresentationFrame, SnapshotPublisher
from livescope.core.stream import StreamingAnalyzer
from livescope.core.transform import BlockTransform
from livescope.errors import TrackError
from livescope.io.source import SampleSource, open_source

logger = logging.getLogger(__name__)


class TrackState(Enum):
    OPENING = "opening"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PlaybackSession:
    """State of the track currently being played."""

    path: Path
    index: int
    total: int
    source: Optional[SampleSource] = None
    state: TrackState = TrackState.OPENING

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def sample_rate(self) -> int:
        return self.source.sample_rate if self.source else 0

    @property
    def channels(self) -> int:
        return self.source.channels if self.source else 0


@dataclass
class PlaylistReport:
    """Outcome of a playlist run."""

    played: List[Path] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)
    interrupted: bool = False


def _default_sink_factory(source: SampleSource, config: AnalysisConfig):
    from livescope.playback.sink import SoundDeviceSink

    return SoundDeviceSink(source, block_size=config.block_size, latency=config.latency)


class PlaybackDriver:
    """
    Plays tracks one after another and feeds the display at a fixed rate.

    Collaborators are injectable so the driver can run without an audio
    device: ``opener(path) -> SampleSource`` and
    ``sink_factory(source, config) -> sink`` where a sink has ``start()``,
    ``stop()``, ``close()``, a ``done`` ``threading.Event`` and an ``error``
    attribute.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        renderer=None,
        sink_factory: Optional[Callable] = None,
        opener: Callable[[Path], SampleSource] = open_source,
        publisher: Optional[SnapshotPublisher] = None,
    ):
        self.config = config or AnalysisConfig()
        self.renderer = renderer
        self.sink_factory = sink_factory or _default_sink_factory
        self.opener = opener
        self.publisher = publisher or SnapshotPublisher(self.config.band_count)
        self.transform = BlockTransform(self.config)

        self.session: Optional[PlaybackSession] = None
        self._last_failure: Optional[str] = None
        self._stop = threading.Event()
        self._sink = None

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Request the run to end; safe to call from any thread."""
        self._stop.set()
        sink = self._sink
        if sink is not None:
            sink.stop()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def play_playlist(self, paths: Sequence[Path]) -> PlaylistReport:
        """
        Play every path in order.

        Tracks that fail to open or decode are logged and skipped. A stop
        request or Ctrl-C ends the run without touching the remaining tracks.
        """
        report = PlaylistReport()
        total = len(paths)

        try:
            for index, path in enumerate(paths):
                if self.stopped:
                    report.interrupted = True
                    break

                state = self.play_track(Path(path), index, total)
                if state is TrackState.DONE:
                    report.played.append(Path(path))
                elif state is TrackState.FAILED:
                    report.failed.append((Path(path), self._last_failure or "unknown error"))

                if self.stopped:
                    report.interrupted = True
                    break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            self.stop()
            report.interrupted = True

        logger.info(
            "Playlist finished: %d played, %d failed%s",
            len(report.played),
            len(report.failed),
            " (interrupted)" if report.interrupted else "",
        )
        return report

    def play_track(self, path: Path, index: int = 0, total: int = 1) -> TrackState:
        """
        Play one track to completion while ticking the display.

        Returns:
            Final state of the track: DONE, FAILED, or STREAMING if the run
            was stopped part-way through.

        Raises:
            SetupError: If the output device cannot be opened. A sample
                rate or channel count the device rejects fails only this
                track.
        """
        session = PlaybackSession(path=path, index=index, total=total)
        self.session = session
        self._last_failure = None

        try:
            session.source = self.opener(path)
        except TrackError as exc:
            return self._fail(session, str(exc))

        logger.info(
            "Playing %s [%d/%d] %d Hz, %d ch",
            session.name,
            index + 1,
            total,
            session.sample_rate,
            session.channels,
        )

        # Label and empty snapshot switch together before the first block.
        self.publisher.reset(track=session.name)
        analyzer = StreamingAnalyzer(
            session.source, self.publisher, self.transform, track=session.name
        )

        try:
            sink = self.sink_factory(analyzer, self.config)
        except TrackError as exc:
            analyzer.close()
            return self._fail(session, str(exc))
        except BaseException:
            analyzer.close()
            raise
        self._sink = sink
        try:
            sink.start()
            session.state = TrackState.STREAMING
            self._run_ticks(session, analyzer, sink)
        finally:
            self._sink = None
            sink.close()
            analyzer.close()

        if self.stopped:
            return session.state

        error = getattr(sink, "error", None) or analyzer.last_error()
        if error is not None:
            return self._fail(session, f"decode error: {error}")

        session.state = TrackState.DONE
        logger.info("Finished %s (%d blocks)", session.name, analyzer.blocks_analyzed)
        return session.state

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_ticks(self, session: PlaybackSession, analyzer: StreamingAnalyzer, sink) -> None:
        interval = self.config.tick_interval
        while True:
            finished = sink.done.wait(timeout=interval)
            if self.stopped:
                return
            self._present(session, analyzer, finished)
            if finished:
                return

    def _present(self, session: PlaybackSession, analyzer: StreamingAnalyzer, finished: bool) -> None:
        if self.renderer is None:
            return
        self.renderer.render(
            PresentationFrame(
                snapshot=self.publisher.read(),
                track=session.name,
                index=session.index,
                total=session.total,
                elapsed=analyzer.elapsed,
                finished=finished,
            )
        )

    def _fail(self, session: PlaybackSession, reason: str) -> TrackState:
        session.state = TrackState.FAILED
        self._last_failure = reason
        logger.error("Error playing %s: %s", session.path, reason)
        return session.state
