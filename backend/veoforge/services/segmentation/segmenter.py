"""
Script Segmenter - split a narration script into clip-sized dialogue segments.

Each segment targets one 8-second clip of the downstream video model. The
split is done in two passes:

1. Greedy accumulation: sentences are appended to the current segment until
   it reaches the word floor. Below the floor the next sentence is taken even
   if that crosses the ceiling, but never past the merge cap. A single
   sentence longer than the cap stands alone.
2. Repair: a segment still below the floor (other than the last) first tries
   to borrow the first sentence of the following segment, then to absorb the
   whole following segment under the merge cap. Anything that cannot be
   repaired is kept and flagged `is_short`.

The function is pure and deterministic for a given script and limits.
"""

from dataclasses import dataclass
from typing import List, Optional

from veoforge.config.constants import (
    MERGE_WORD_CAP,
    MAX_WORDS_PER_SEGMENT,
    MIN_CLIP_SECONDS,
    MIN_WORDS_PER_SEGMENT,
    TARGET_WORDS_PER_SEGMENT,
    WORDS_PER_SECOND,
)
from veoforge.core import EmptyScriptError, get_logger
from veoforge.models import Segment

from .text_utils import count_words, join_sentences, split_sentences, total_words

logger = get_logger(__name__, component="segmenter")


@dataclass(frozen=True)
class SegmentationLimits:
    """Word-count thresholds used by the segmenter."""

    min_words: int = MIN_WORDS_PER_SEGMENT
    target_words: int = TARGET_WORDS_PER_SEGMENT
    max_words: int = MAX_WORDS_PER_SEGMENT
    merge_cap: int = MERGE_WORD_CAP
    words_per_second: float = WORDS_PER_SECOND

    def duration_for(self, word_count: int) -> float:
        return word_count / self.words_per_second


DEFAULT_LIMITS = SegmentationLimits()


def segment_script(script: str, limits: Optional[SegmentationLimits] = None) -> List[Segment]:
    """
    Partition a script into ordered dialogue segments.

    Args:
        script: Free narration text
        limits: Thresholds to apply (defaults to the 15/22/30 word limits)

    Returns:
        Segments numbered from 1, in script order

    Raises:
        EmptyScriptError: If the script is empty or whitespace-only
    """
    limits = limits or DEFAULT_LIMITS
    if script is None or not script.strip():
        raise EmptyScriptError()

    sentences = split_sentences(script)
    raw_segments = _accumulate(sentences, limits)

    for i, parts in enumerate(raw_segments):
        words = total_words(parts)
        logger.debug(
            f"Raw segment {i + 1}: {words} words, ~{limits.duration_for(words):.1f}s speaking time"
        )

    repaired = _repair(raw_segments, limits)
    segments = [_build_segment(i + 1, parts, limits) for i, parts in enumerate(repaired)]

    logger.info(
        f"Script split into {len(segments)} segments",
        extra={
            "sentence_count": len(sentences),
            "word_counts": [s.word_count for s in segments],
        },
    )
    for segment in segments:
        if segment.estimated_duration_seconds < MIN_CLIP_SECONDS:
            logger.warning(
                f"Segment {segment.index} is under {MIN_CLIP_SECONDS} seconds "
                f"({segment.word_count} words, ~{segment.estimated_duration_seconds:.1f}s)"
            )

    return segments


def _accumulate(sentences: List[str], limits: SegmentationLimits) -> List[List[str]]:
    raw: List[List[str]] = []
    i = 0
    while i < len(sentences):
        current = [sentences[i]]
        words = count_words(sentences[i])
        i += 1

        while words < limits.min_words and i < len(sentences):
            next_words = count_words(sentences[i])
            if words + next_words > limits.merge_cap:
                break
            current.append(sentences[i])
            words += next_words
            i += 1

        raw.append(current)
    return raw


def _repair(raw_segments: List[List[str]], limits: SegmentationLimits) -> List[List[str]]:
    pending = [list(parts) for parts in raw_segments]
    final: List[List[str]] = []

    i = 0
    while i < len(pending):
        current = pending[i]
        words = total_words(current)

        if words >= limits.min_words or i == len(pending) - 1:
            final.append(current)
            i += 1
            continue

        following = pending[i + 1]
        following_words = total_words(following)

        borrowed_words: Optional[int] = None
        if following_words > limits.min_words and len(following) > 1:
            candidate = words + count_words(following[0])
            if candidate <= limits.max_words:
                borrowed_words = candidate

        if borrowed_words is not None and borrowed_words >= limits.min_words:
            final.append(current + following[:1])
            pending[i + 1] = following[1:]
            i += 1
            continue

        if words + following_words <= limits.merge_cap:
            final.append(current + following)
            i += 2
            continue

        if borrowed_words is not None:
            # Still short, but closer to the floor than before.
            final.append(current + following[:1])
            pending[i + 1] = following[1:]
            i += 1
            continue

        final.append(current)
        i += 1

    return final


def _build_segment(index: int, parts: List[str], limits: SegmentationLimits) -> Segment:
    text = join_sentences(parts)
    words = count_words(text)
    return Segment(
        index=index,
        text=text,
        word_count=words,
        estimated_duration_seconds=limits.duration_for(words),
        is_short=words < limits.min_words,
    )
