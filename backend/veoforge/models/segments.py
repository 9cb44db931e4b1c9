"""
Segment models.

`Segment` is what the segmenter produces. `SegmentDescription` is the shape
of the structured description the external text-generation step returns for
a segment; only the fields the video prompt needs are modelled and anything
else is carried through untouched.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Segment:
    """A time-bounded slice of narration destined for one generation job."""

    index: int  # 1-based segment number
    text: str
    word_count: int
    estimated_duration_seconds: float
    is_short: bool = False

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "text": self.text,
            "word_count": self.word_count,
            "estimated_duration_seconds": self.estimated_duration_seconds,
            "is_short": self.is_short,
        }


class CharacterDescription(BaseModel):
    model_config = ConfigDict(extra="allow")

    age: Optional[str] = None
    gender: Optional[str] = None
    physical: Optional[str] = None
    clothing: Optional[str] = None
    current_state: Optional[str] = None


class SceneContinuity(BaseModel):
    model_config = ConfigDict(extra="allow")

    environment: Optional[str] = None
    lighting_state: Optional[str] = None
    lighting: Optional[str] = None
    camera_position: Optional[str] = None


class ActionTimeline(BaseModel):
    model_config = ConfigDict(extra="allow")

    dialogue: str = ""
    camera_movements: Optional[str] = None


class SegmentDescription(BaseModel):
    """Structured description of one segment from the text-generation step."""

    model_config = ConfigDict(extra="allow")

    character_description: CharacterDescription = Field(default_factory=CharacterDescription)
    scene_continuity: SceneContinuity = Field(default_factory=SceneContinuity)
    action_timeline: ActionTimeline = Field(default_factory=ActionTimeline)

    @property
    def dialogue(self) -> str:
        return self.action_timeline.dialogue or ""
