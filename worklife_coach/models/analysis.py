"""Profile analysis result models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from worklife_coach.models.profile import Challenge
from worklife_coach.models.recommendations import UtcDatetime


class CareerStage(str, Enum):
    EARLY = "early"
    MID = "mid"
    SENIOR = "senior"


class GapPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TimeRange(BaseModel):
    start: UtcDatetime
    end: UtcDatetime

    @model_validator(mode="after")
    def validate_order(self) -> "TimeRange":
        if self.end < self.start:
            raise ValueError("time range end must not precede start")
        return self

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


class ProfileAnalysis(BaseModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    career_stage: CareerStage
    in_transition: bool = False
    confidence_level: float
    primary_challenges: list[Challenge] = Field(default_factory=list)


class ProfileCompleteness(BaseModel):
    is_complete: bool
    missing_fields: list[str] = Field(default_factory=list)


class SkillGap(BaseModel):
    skill: str
    current_level: float
    target_level: float
    priority: GapPriority
    estimated_learning_time: str


class ReadinessFactors(BaseModel):
    skill_alignment: float
    experience_level: float
    motivation_level: float


class ReadinessScore(BaseModel):
    score: float = Field(ge=0.0, le=1.0)
    factors: ReadinessFactors
    blockers: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class ProgressReport(BaseModel):
    user_id: str
    timeframe: TimeRange
    completed_actions: int = 0
    completed_milestones: int = 0
    skills_acquired: list[str] = Field(default_factory=list)
    goals_achieved: int = 0
    overall_progress: float = Field(default=0.0, ge=0.0, le=1.0)
