"""In-memory image assembled from decoded input files."""

from .segments import Range, Segment
from .store import SegmentStore

__all__ = [
    "Range",
    "Segment",
    "SegmentStore",
]
