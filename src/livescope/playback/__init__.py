"""Playback sequencing and audio output."""

from livescope.playback.driver import PlaybackDriver, PlaylistReport, TrackState

__all__ = ["PlaybackDriver", "PlaylistReport", "TrackState"]
