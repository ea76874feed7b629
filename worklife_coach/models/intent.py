"""Intent and entity models produced by the intent recognizer."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class IntentType(str, Enum):
    PROFILE_BUILDING = "profile_building"
    CAREER_CLARITY = "career_clarity"
    SKILL_GUIDANCE = "skill_guidance"
    ACTION_PLANNING = "action_planning"
    MINDSET_SUPPORT = "mindset_support"
    GROWTH_PLANNING = "growth_planning"
    TRANSITION_GUIDANCE = "transition_guidance"
    PROGRESS_CHECK = "progress_check"


class TimeReference(str, Enum):
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    LONG_TERM = "long_term"


class EmotionalContent(BaseModel):
    """Emotional signal found in a message.

    Attributes:
        has_emotional_content: True when any emotion pattern matched
        indicators: Matched emotion labels, e.g. ["stress", "confusion"]
        severity: min(sum of weighted hits / 2, 1)
    """

    model_config = ConfigDict(frozen=True)

    has_emotional_content: bool = False
    indicators: list[str] = Field(default_factory=list)
    severity: float = Field(default=0.0, ge=0.0, le=1.0)


class IntentEntities(BaseModel):
    """Typed entity bag; only keys that matched are set.

    Unknown keys are accepted so callers can attach extra entities.
    """

    model_config = ConfigDict(extra="allow")

    skills: Optional[list[str]] = None
    career_fields: Optional[list[str]] = None
    timeframe: Optional[TimeReference] = None
    duration: Optional[int] = None
    duration_unit: Optional[str] = None
    years_of_experience: Optional[int] = None
    emotional: Optional[EmotionalContent] = None


class Intent(BaseModel):
    type: IntentType
    confidence: float = Field(ge=0.0, le=1.0)
    entities: IntentEntities = Field(default_factory=IntentEntities)
