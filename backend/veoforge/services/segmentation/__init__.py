"""Script segmentation into clip-sized dialogue segments."""

from .segmenter import DEFAULT_LIMITS, SegmentationLimits, segment_script
from .text_utils import count_words, split_sentences

__all__ = [
    "DEFAULT_LIMITS",
    "SegmentationLimits",
    "segment_script",
    "count_words",
    "split_sentences",
]
