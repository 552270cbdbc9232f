"""Live audio analysis for playback visualization."""

from livescope.config import AnalysisConfig
from livescope.core.snapshot import FeatureSnapshot, PresentationFrame, SnapshotPublisher
from livescope.core.stream import StreamingAnalyzer
from livescope.core.transform import BlockTransform
from livescope.playback.driver import PlaybackDriver

__version__ = "0.1.0"
__all__ = [
    "AnalysisConfig",
    "BlockTransform",
    "FeatureSnapshot",
    "PresentationFrame",
    "SnapshotPublisher",
    "StreamingAnalyzer",
    "PlaybackDriver",
]
