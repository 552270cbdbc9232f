"""Presentation backends."""

from livescope.render.terminal import NullRenderer, PlainRenderer, TerminalRenderer, format_frame

__all__ = ["NullRenderer", "PlainRenderer", "TerminalRenderer", "format_frame"]
