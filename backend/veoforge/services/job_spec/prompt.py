"""
Video prompt assembly from a segment description.
"""

import re
from typing import Optional

from veoforge.config.constants import MAX_DIALOGUE_CHARS, TARGET_CLIP_SECONDS
from veoforge.models import SegmentDescription

POLICY_FILTERED_TERMS = (
    "violence",
    "weapon",
    "dangerous",
    "harmful",
    "inappropriate",
    "explicit",
    "adult",
    "mature",
    "controversial",
)
POSITIVE_TONE_MARKERS = ("positive", "friendly", "professional")
POSITIVE_TONE_SUFFIX = "The content should be positive and appropriate."

LANGUAGE_INSTRUCTIONS = {
    "es": (
        "IMPORTANT: This video must be generated entirely in Spanish language. "
        "All dialogue, narration, and text must be in Spanish. The character must speak "
        "in Spanish with natural Spanish pronunciation and accent. Any on-screen text "
        "must be in Spanish."
    ),
}

_POLICY_RE = re.compile(
    r"\b(" + "|".join(re.escape(term) for term in POLICY_FILTERED_TERMS) + r")\b",
    re.IGNORECASE,
)


def sanitize_dialogue(dialogue: Optional[str]) -> str:
    """Collapse repeated punctuation and cap the length for one clip."""
    if not dialogue:
        return ""

    clean = re.sub(r"!{2,}", "!", dialogue)
    clean = re.sub(r"\?{2,}", "?", clean)
    clean = re.sub(r"\.{3,}", "...", clean)
    clean = clean.strip()

    if len(clean) > MAX_DIALOGUE_CHARS:
        clean = clean[:MAX_DIALOGUE_CHARS] + "..."
    return clean


def ensure_policy_compliance(prompt: str) -> str:
    compliant = _POLICY_RE.sub("", prompt)
    compliant = re.sub(r"[ \t]{2,}", " ", compliant).strip()

    if not any(marker in compliant for marker in POSITIVE_TONE_MARKERS):
        compliant = f"{compliant} {POSITIVE_TONE_SUFFIX}"
    return compliant


def build_video_prompt(
    description: SegmentDescription,
    language: str = "en",
) -> str:
    """Render the text prompt submitted to the video model for one segment."""
    character = description.character_description
    scene = description.scene_continuity
    timeline = description.action_timeline

    parts = [
        f"Create an {TARGET_CLIP_SECONDS}-second video featuring a "
        f"{character.age or 'adult'} {character.gender or 'person'}"
    ]
    if character.physical:
        parts[0] += f" with {character.physical.lower()}"
    parts[0] += "."

    if character.clothing:
        parts.append(f"Wearing {character.clothing.lower()}.")
    if scene.environment:
        parts.append(f"In a {scene.environment.lower()}.")

    dialogue = sanitize_dialogue(timeline.dialogue)
    if dialogue:
        parts.append(f'The person says: "{dialogue}".')

    instruction = LANGUAGE_INSTRUCTIONS.get((language or "").lower())
    if instruction:
        parts.append(instruction)

    if timeline.camera_movements:
        parts.append(f"Camera: {timeline.camera_movements.lower()}.")
    if scene.lighting_state:
        parts.append(f"Lighting: {scene.lighting_state.lower()}.")
    if scene.lighting and scene.lighting.lower() != "natural daylight":
        parts.append(f"Time: {scene.lighting.lower()}.")

    return ensure_policy_compliance(" ".join(parts))
