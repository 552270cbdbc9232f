"""Core analysis modules."""

from livescope.core.snapshot import FeatureSnapshot, PresentationFrame, SnapshotPublisher
from livescope.core.stream import StreamingAnalyzer
from livescope.core.transform import BlockFeatures, BlockTransform

__all__ = [
    "BlockFeatures",
    "BlockTransform",
    "FeatureSnapshot",
    "PresentationFrame",
    "SnapshotPublisher",
    "StreamingAnalyzer",
]
