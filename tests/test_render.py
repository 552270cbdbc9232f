"""Tests for terminal presentation."""

import io

from rich.console import Console

from livescope.core.snapshot import FeatureSnapshot, PresentationFrame
from livescope.render.terminal import (
    CLEAR_SCREEN,
    NullRenderer,
    PlainRenderer,
    TerminalRenderer,
    amplitude_bar,
    band_heights,
    format_frame,
    format_time,
    spectrum_rows,
)


def _frame(**overrides):
    snap = FeatureSnapshot(
        rms=overrides.pop("rms", 0.5),
        frequency=overrides.pop("frequency", 1000.0),
        bands=overrides.pop("bands", (0.0, 0.01, 0.02)),
        block_index=1,
        track="song.mp3",
    )
    base = dict(snapshot=snap, track="song.mp3", index=0, total=3, elapsed=12.34)
    base.update(overrides)
    return PresentationFrame(**base)


class TestAmplitudeBar:
    def test_half(self):
        bar = amplitude_bar(0.5, 50)
        assert bar == "[" + "=" * 25 + " " * 25 + "]"

    def test_clamped(self):
        assert amplitude_bar(3.0, 10) == "[" + "=" * 10 + "]"
        assert amplitude_bar(0.0, 10) == "[" + " " * 10 + "]"


class TestSpectrum:
    def test_heights_scale_to_loudest(self):
        assert band_heights([0.0, 0.01, 0.02], 10) == [0, 5, 10]

    def test_quiet_bands_not_blown_up(self):
        # Below the display floor nothing reaches full height
        assert max(band_heights([0.001, 0.002], 10)) == 2

    def test_silence_rows_blank(self):
        rows = spectrum_rows([0.0] * 8, 4)
        assert rows == [" " * 8] * 4

    def test_rows_top_first(self):
        rows = spectrum_rows([0.0, 0.02], 2)
        assert rows == [" █", " █"]


class TestFormatFrame:
    def test_readouts(self):
        text = format_frame(_frame())
        assert "Playing: song.mp3  [1/3]  00:12.3" in text
        assert "RMS Amplitude: 0.5000" in text
        assert "Dominant Frequency: 1000.00 Hz" in text
        assert "Amplitude: [" + "=" * 25 in text

    def test_spectrum_height(self):
        lines = format_frame(_frame(), bar_height=6).splitlines()
        # header, rms, freq, amplitude, blank, 6 rows, baseline
        assert len(lines) == 4 + 1 + 6 + 1

    def test_finished(self):
        assert "done" in format_frame(_frame(finished=True)).splitlines()[0]

    def test_no_bands(self):
        assert len(format_frame(_frame(bands=())).splitlines()) == 4

    def test_format_time(self):
        assert format_time(0) == "00:00.0"
        assert format_time(75.25) == "01:15.2"


class TestRenderers:
    def test_plain_renderer(self):
        out = io.StringIO()
        renderer = PlainRenderer(stream=out)
        renderer.render(_frame())
        assert out.getvalue().startswith(CLEAR_SCREEN)
        assert "RMS Amplitude: 0.5000" in out.getvalue()

    def test_terminal_renderer(self):
        out = io.StringIO()
        console = Console(file=out, force_terminal=False, width=100)
        with TerminalRenderer(console=console) as renderer:
            renderer.render(_frame())
        assert "RMS Amplitude: 0.5000" in out.getvalue()

    def test_null_renderer_collects(self):
        renderer = NullRenderer()
        frame = _frame()
        renderer.render(frame)
        assert renderer.frames == [frame]
