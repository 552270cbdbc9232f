"""
Terminal presentation of live features.

This is the only module that turns analysis values into text. Renderers
receive a :class:`PresentationFrame` once per display tick.
"""

from __future__ import annotations

import sys
from typing import List, Optional, Sequence, TextIO

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from livescope.core.snapshot import PresentationFrame

# Bands are scaled against the loudest band, but never against less than this.
BAND_DISPLAY_FLOOR = 0.01

BAR_CHAR = "█"
CLEAR_SCREEN = "\033[H\033[2J"


def format_time(seconds: float) -> str:
    minutes, secs = divmod(max(0.0, seconds), 60.0)
    return f"{int(minutes):02d}:{secs:04.1f}"


def amplitude_bar(rms: float, width: int = 50) -> str:
    """``[=====     ]`` with ``int(rms * width)`` filled cells, clamped."""
    filled = max(0, min(width, int(rms * width)))
    return "[" + "=" * filled + " " * (width - filled) + "]"


def band_heights(bands: Sequence[float], height: int) -> List[int]:
    """Map band values to bar heights in ``[0, height]``."""
    if not bands:
        return []
    ceiling = max(max(bands), BAND_DISPLAY_FLOOR)
    return [max(0, min(height, int(round(b / ceiling * height)))) for b in bands]


def spectrum_rows(bands: Sequence[float], height: int) -> List[str]:
    """Vertical bar chart, top row first."""
    heights = band_heights(bands, height)
    rows = []
    for level in range(height, 0, -1):
        rows.append("".join(BAR_CHAR if h >= level else " " for h in heights))
    return rows


def format_frame(frame: PresentationFrame, bar_width: int = 50, bar_height: int = 12) -> str:
    """Render a frame as plain text."""
    status = "done" if frame.finished else format_time(frame.elapsed)
    lines = [
        f"Playing: {frame.track}  [{frame.index + 1}/{frame.total}]  {status}",
        f"RMS Amplitude: {frame.rms:.4f}",
        f"Dominant Frequency: {frame.frequency:.2f} Hz",
        f"Amplitude: {amplitude_bar(frame.rms, bar_width)}",
    ]
    if frame.bands and bar_height > 0:
        lines.append("")
        lines.extend(spectrum_rows(frame.bands, bar_height))
        lines.append("─" * len(frame.bands))
    return "\n".join(lines)


class TerminalRenderer:
    """Live-updating panel drawn with rich."""

    def __init__(
        self,
        bar_width: int = 50,
        bar_height: int = 12,
        console: Optional[Console] = None,
    ):
        self.bar_width = bar_width
        self.bar_height = bar_height
        self.console = console or Console()
        self._live: Optional[Live] = None

    def start(self) -> None:
        if self._live is None:
            self._live = Live(console=self.console, auto_refresh=False, transient=False)
            self._live.start()

    def render(self, frame: PresentationFrame) -> None:
        self.start()
        body = Text(format_frame(frame, self.bar_width, self.bar_height))
        self._live.update(
            Panel(body, title="livescope", border_style="cyan"),
            refresh=True,
        )

    def close(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def __enter__(self) -> "TerminalRenderer":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class PlainRenderer:
    """Clear-and-print output for terminals without rich support."""

    def __init__(
        self,
        bar_width: int = 50,
        bar_height: int = 12,
        stream: Optional[TextIO] = None,
        clear: bool = True,
    ):
        self.bar_width = bar_width
        self.bar_height = bar_height
        self.stream = stream or sys.stdout
        self.clear = clear

    def render(self, frame: PresentationFrame) -> None:
        if self.clear:
            self.stream.write(CLEAR_SCREEN)
        self.stream.write(format_frame(frame, self.bar_width, self.bar_height) + "\n")
        self.stream.flush()

    def close(self) -> None:
        pass

    def __enter__(self) -> "PlainRenderer":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class NullRenderer:
    """Keeps every frame it is given; draws nothing."""

    def __init__(self):
        self.frames: List[PresentationFrame] = []

    def render(self, frame: PresentationFrame) -> None:
        self.frames.append(frame)

    def close(self) -> None:
        pass

    def __enter__(self) -> "NullRenderer":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
