"""
Window presentation of live features.

Draws the band spectrum and amplitude meter in a pygame window. The window is
redrawn on every display tick; closing it or pressing ESC / Q calls
``on_quit`` so the driver can stop playback.

Keyboard controls:
    ESC / Q      — quit
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple

import pygame

from livescope.core.snapshot import PresentationFrame
from livescope.render.terminal import band_heights, format_time

Color = Tuple[int, int, int]


class WindowRenderer:
    """Spectrum bars in a pygame window."""

    BACKGROUND: Color = (12, 12, 18)
    BAR_COLOR: Color = (80, 200, 255)
    METER_COLOR: Color = (255, 170, 60)
    TEXT_COLOR: Color = (200, 200, 200)

    def __init__(
        self,
        width: int = 800,
        height: int = 400,
        on_quit: Optional[Callable[[], None]] = None,
        title: str = "livescope",
    ):
        self.width = width
        self.height = height
        self.on_quit = on_quit
        self.title = title
        self._screen = None
        self._font = None

    def start(self) -> None:
        if self._screen is not None:
            return
        pygame.init()
        self._screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption(self.title)
        self._font = pygame.font.SysFont(None, 24)

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            quit_key = event.type == pygame.KEYDOWN and event.key in (pygame.K_ESCAPE, pygame.K_q)
            if (event.type == pygame.QUIT or quit_key) and self.on_quit is not None:
                self.on_quit()

    def render(self, frame: PresentationFrame) -> None:
        self.start()
        self._handle_events()

        screen = self._screen
        screen.fill(self.BACKGROUND)

        top = 60
        meter_h = 16
        spectrum_h = self.height - top - meter_h - 20

        # Amplitude meter along the bottom
        meter_w = int(max(0.0, min(1.0, frame.rms)) * (self.width - 20))
        pygame.draw.rect(
            screen, self.METER_COLOR, (10, self.height - meter_h - 10, meter_w, meter_h)
        )

        bands = frame.bands
        if bands:
            heights = band_heights(bands, spectrum_h)
            slot = (self.width - 20) / len(bands)
            for i, h in enumerate(heights):
                x = 10 + int(i * slot)
                y = top + spectrum_h - h
                pygame.draw.rect(screen, self.BAR_COLOR, (x, y, max(1, int(slot) - 2), h))

        status = "done" if frame.finished else format_time(frame.elapsed)
        header = f"{frame.track}  [{frame.index + 1}/{frame.total}]  {status}"
        readout = f"RMS {frame.rms:.4f}   {frame.frequency:.2f} Hz"
        screen.blit(self._font.render(header, True, self.TEXT_COLOR), (10, 8))
        screen.blit(self._font.render(readout, True, self.TEXT_COLOR), (10, 32))

        pygame.display.flip()

    def close(self) -> None:
        if self._screen is not None:
            pygame.quit()
            self._screen = None

    def __enter__(self) -> "WindowRenderer":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
