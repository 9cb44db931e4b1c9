"""
JobSpec Builder - turn a segment into a submission payload.

Pure transformation: no network calls. The estimate computed here seeds the
simulated progress timeline and the estimated completion time reported to
callers.
"""

from dataclasses import dataclass
from typing import Optional

from veoforge.config.constants import (
    BASE_GENERATION_SECONDS,
    LONG_DIALOGUE_CHARS,
    LONG_DIALOGUE_MULTIPLIER,
    QUALITY_MULTIPLIERS,
)
from veoforge.models import (
    ActionTimeline,
    DispatchOptions,
    Quality,
    Segment,
    SegmentDescription,
)

from .prompt import build_video_prompt


@dataclass(frozen=True)
class JobSpec:
    """Everything needed to submit one segment to the video service."""

    segment_index: int
    prompt: str
    quality: Quality
    sequential: bool
    sequence_position: int
    total_in_sequence: int
    estimated_seconds: float
    dialogue_length: int


def estimate_generation_time(dialogue: str, quality: Quality) -> float:
    """Estimated seconds the upstream service needs for one clip."""
    quality_multiplier = QUALITY_MULTIPLIERS[quality.value]
    complexity_multiplier = LONG_DIALOGUE_MULTIPLIER if len(dialogue or "") > LONG_DIALOGUE_CHARS else 1.0
    return float(round(BASE_GENERATION_SECONDS * quality_multiplier * complexity_multiplier))


def build_job_spec(
    segment: Segment,
    options: DispatchOptions,
    sequence_position: int,
    total_segments: int,
    description: Optional[SegmentDescription] = None,
) -> JobSpec:
    """
    Build the submission payload for one segment.

    Args:
        segment: Segment produced by the segmenter
        options: Quality, dispatch mode and language for the batch
        sequence_position: 1-based position of the segment in the batch
        total_segments: Number of segments in the batch
        description: Structured description from the text-generation step;
            when missing, the segment text is used as the dialogue

    Returns:
        JobSpec ready for submission
    """
    if description is None:
        description = SegmentDescription(action_timeline=ActionTimeline(dialogue=segment.text))
    elif not description.dialogue:
        description = description.model_copy(
            update={"action_timeline": description.action_timeline.model_copy(update={"dialogue": segment.text})}
        )

    dialogue = description.dialogue
    return JobSpec(
        segment_index=segment.index,
        prompt=build_video_prompt(description, options.language),
        quality=options.quality,
        sequential=options.sequential,
        sequence_position=sequence_position,
        total_in_sequence=total_segments,
        estimated_seconds=estimate_generation_time(dialogue, options.quality),
        dialogue_length=len(dialogue),
    )
