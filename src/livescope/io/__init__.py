"""Playlist discovery and decoded sample sources."""

from livescope.io.discovery import discover
from livescope.io.source import BufferedSource, SampleSource, SoundFileSource, open_source

__all__ = ["discover", "BufferedSource", "SampleSource", "SoundFileSource", "open_source"]
