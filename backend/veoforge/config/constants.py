"""
Constants configuration

Segmentation thresholds, generation-time estimate factors and the
simulated progress timelines.
"""

from typing import Tuple

# Speaking rate: 150 words per minute
WORDS_PER_SECOND = 150 / 60

# Word-count thresholds for one 8-second clip
MIN_WORDS_PER_SEGMENT = 15      # ~6 seconds of speech
TARGET_WORDS_PER_SEGMENT = 20   # ~8 seconds of speech
MAX_WORDS_PER_SEGMENT = 22      # leaves room for pauses
MERGE_WORD_CAP = 30             # absolute cap when two segments are merged

TARGET_CLIP_SECONDS = 8
MIN_CLIP_SECONDS = 6

# Generation-time estimate
BASE_GENERATION_SECONDS = 120
QUALITY_MULTIPLIERS = {
    "standard": 1.0,
    "high": 1.5,
}
LONG_DIALOGUE_CHARS = 100
LONG_DIALOGUE_MULTIPLIER = 1.2

# Dialogue limits for the video prompt
MAX_DIALOGUE_CHARS = 200

# Simulated progress: (percent, label, seconds after submission)
PARALLEL_PROGRESS_STEPS: Tuple[Tuple[int, str, float], ...] = (
    (10, "Initializing video generation...", 5.0),
    (25, "Processing character details...", 10.0),
    (50, "Generating scene elements...", 15.0),
    (75, "Rendering video frames...", 20.0),
    (90, "Finalizing video...", 25.0),
    (100, "completed", 30.0),
)

# Labels are formatted with the sequence position and total.
SEQUENTIAL_PROGRESS_STEPS: Tuple[Tuple[int, str, float], ...] = (
    (10, "Initializing video {position}/{total}...", 2.0),
    (25, "Processing character continuity for video {position}...", 4.0),
    (50, "Generating scene elements for video {position}...", 6.0),
    (75, "Rendering video frames {position}...", 8.0),
    (90, "Finalizing video {position}...", 10.0),
    (100, "completed", 12.0),
)

# Polled progress never reports 100 until the upstream operation says done
POLLED_PROGRESS_CAP = 95

QUOTA_ERROR_MARKERS = ("429", "RESOURCE_EXHAUSTED")
QUOTA_ERROR_MESSAGE = "API quota exceeded. Please check your Google AI Studio usage limits."

CONNECTION_TEST_PROMPT = "A simple test video of a person smiling and waving at the camera for 3 seconds"

__all__ = [
    "WORDS_PER_SECOND",
    "MIN_WORDS_PER_SEGMENT",
    "TARGET_WORDS_PER_SEGMENT",
    "MAX_WORDS_PER_SEGMENT",
    "MERGE_WORD_CAP",
    "TARGET_CLIP_SECONDS",
    "MIN_CLIP_SECONDS",
    "BASE_GENERATION_SECONDS",
    "QUALITY_MULTIPLIERS",
    "LONG_DIALOGUE_CHARS",
    "LONG_DIALOGUE_MULTIPLIER",
    "MAX_DIALOGUE_CHARS",
    "PARALLEL_PROGRESS_STEPS",
    "SEQUENTIAL_PROGRESS_STEPS",
    "POLLED_PROGRESS_CAP",
    "QUOTA_ERROR_MARKERS",
    "QUOTA_ERROR_MESSAGE",
    "CONNECTION_TEST_PROMPT",
]
