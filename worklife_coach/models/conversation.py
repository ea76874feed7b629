"""Conversation models: messages, sessions and the request/response envelope."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from worklife_coach.models.intent import Intent, IntentType
from worklife_coach.models.profile import utc_now
from worklife_coach.models.recommendations import (
    ActionStep,
    CareerPath,
    GrowthPlan,
    InRoleGrowthAnalysis,
    SkillRecommendation,
    TransitionPlan,
    UtcDatetime,
)


class MessageRole(str, Enum):
    USER = "user"
    SYSTEM = "system"


class Message(BaseModel):
    id: str
    role: MessageRole
    content: str
    timestamp: UtcDatetime = Field(default_factory=utc_now)
    metadata: dict[str, Any] = Field(default_factory=dict)


class SessionContext(BaseModel):
    conversation_history: list[Message] = Field(default_factory=list)
    current_intent: Optional[IntentType] = None
    active_topics: list[str] = Field(default_factory=list)
    pending_actions: list[ActionStep] = Field(default_factory=list)
    growth_plan: Optional[GrowthPlan] = None


class Session(BaseModel):
    id: str
    user_id: str
    start_time: UtcDatetime = Field(default_factory=utc_now)
    last_activity: UtcDatetime = Field(default_factory=utc_now)
    context: SessionContext = Field(default_factory=SessionContext)


class Recommendations(BaseModel):
    """Whatever the engines produced for one turn; failed engines leave None."""

    career_paths: Optional[list[CareerPath]] = None
    skills: Optional[list[SkillRecommendation]] = None
    actions: Optional[list[ActionStep]] = None
    growth_plan: Optional[GrowthPlan] = None
    transition_plan: Optional[TransitionPlan] = None
    in_role_growth: Optional[InRoleGrowthAnalysis] = None

    def is_empty(self) -> bool:
        return all(value is None for value in self.__dict__.values())


class CoachingRequest(BaseModel):
    user_id: str = Field(min_length=1)
    message: str
    session_id: Optional[str] = None


class CoachingResponse(BaseModel):
    content: str = Field(min_length=1)
    session_id: str
    timestamp: UtcDatetime = Field(default_factory=utc_now)
    intent: Intent
    recommendations: Optional[Recommendations] = None


class ProgressRecord(BaseModel):
    """One completed action as kept by the data store."""

    user_id: str
    action_id: str
    completed_at: UtcDatetime = Field(default_factory=utc_now)
