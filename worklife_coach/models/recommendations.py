"""Recommendation value objects produced by the coaching engines.

Career paths, skill recommendations, action steps, growth plans, transition
plans and in-role growth analyses. All of them are frozen once built; the
growth plan is the only one that is re-derived from a prior version (see
``GrowthPlanBuilder.adapt_growth_plan``) and that always happens through
``model_copy``.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from worklife_coach.utils.dates import as_utc

# Naive values are read as UTC so stored dates compare with utc_now()
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class Timeframe(str, Enum):
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"


class ActionCategory(str, Enum):
    LEARNING = "learning"
    NETWORKING = "networking"
    APPLICATION = "application"
    REFLECTION = "reflection"


class DifficultyLevel(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


TERMINAL_PUNCTUATION = (".", "!", "?")


class CareerPath(BaseModel):
    """A candidate career direction scored against a profile.

    Attributes:
        id: Stable identifier (template key or generated id)
        title: Display title, e.g. "Data Science" or "Senior Junior Developer"
        description: One-line summary of the path
        reasoning: Why the path fits; always a sentence with terminal punctuation
        fit_score: Normalized 0-1 match against the profile
        required_skills: Ordered core skills for the path
        time_to_transition: Range string such as "6-12 months"
        growth_potential: 0-1 growth outlook of the field
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    reasoning: str
    fit_score: float = Field(ge=0.0, le=1.0)
    required_skills: list[str] = Field(default_factory=list)
    time_to_transition: str = "6-12 months"
    growth_potential: float = Field(default=0.5, ge=0.0, le=1.0)

    @field_validator("reasoning")
    @classmethod
    def validate_reasoning(cls, v: str) -> str:
        """Reasoning must be a non-empty sentence."""
        v = v.strip()
        if not v:
            raise ValueError("reasoning must not be empty")
        if not v.endswith(TERMINAL_PUNCTUATION):
            v = f"{v}."
        return v


class SkillRecommendation(BaseModel):
    """A skill to learn, with its priority and prerequisites."""

    model_config = ConfigDict(frozen=True)

    skill: str
    priority: float = Field(ge=0.0, le=1.0)
    reasoning: str = Field(min_length=1)
    learning_resources: list[str] = Field(min_length=1)
    estimated_time: str
    dependencies: list[str] = Field(default_factory=list)


class ActionStep(BaseModel):
    """A concrete, time-bound action."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    timeframe: Timeframe
    category: ActionCategory
    completed: bool = False
    due_date: Optional[UtcDatetime] = None


class Milestone(BaseModel):
    """A checkpoint on the way to a goal or through a growth plan."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    target_date: UtcDatetime
    completed: bool = False
    completed_date: Optional[UtcDatetime] = None


class Phase(BaseModel):
    """One time-bounded segment of a growth plan."""

    model_config = ConfigDict(frozen=True)

    name: str
    duration: str
    objectives: list[str] = Field(min_length=1)
    skills: list[str] = Field(default_factory=list)
    actions: list[ActionStep] = Field(default_factory=list)


class GrowthPlan(BaseModel):
    """Long-term plan toward a career path, split into phases and milestones."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    career_path: CareerPath
    timeline: str
    phases: list[Phase]
    milestones: list[Milestone] = Field(default_factory=list)
    created_at: UtcDatetime
    last_updated: UtcDatetime


class TransferableSkill(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill: str
    current_level: float
    transferability: float = Field(ge=0.0, le=1.0)
    relevance_to_target: float = Field(ge=0.0, le=1.0)


class TransitionPhase(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    duration: str
    focus: str
    actions: list[ActionStep]
    success_criteria: list[str]


class TransitionPlan(BaseModel):
    """Plan for moving from one field to another."""

    model_config = ConfigDict(frozen=True)

    source_field: str
    target_field: str
    transferable_skills: list[TransferableSkill] = Field(default_factory=list)
    skills_to_acquire: list[SkillRecommendation] = Field(default_factory=list)
    phases: list[TransitionPhase] = Field(min_length=1)
    estimated_duration: str
    difficulty_level: DifficultyLevel
    risks: list[str] = Field(default_factory=list)
    success_factors: list[str] = Field(default_factory=list)


class GrowthOpportunityType(str, Enum):
    RESPONSIBILITY = "responsibility"
    SKILL_DEVELOPMENT = "skill_development"
    VISIBILITY = "visibility"
    LEADERSHIP = "leadership"


class GrowthOpportunity(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: GrowthOpportunityType
    title: str
    description: str
    action_steps: list[str] = Field(default_factory=list)
    expected_impact: str
    timeframe: str


class StagnationSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StagnationAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_stagnant: bool
    severity: StagnationSeverity
    reasons: list[str] = Field(default_factory=list)
    growth_limitations: list[str] = Field(default_factory=list)
    honest_assessment: str


class InRoleGrowthAnalysis(BaseModel):
    """Advancement guidance scoped to the user's current role."""

    model_config = ConfigDict(frozen=True)

    scope: str = "current_role_only"
    current_role: Optional[str] = None
    opportunities: list[GrowthOpportunity] = Field(min_length=1)
    employer_relevant_skills: list[SkillRecommendation] = Field(default_factory=list)
    stagnation_assessment: Optional[StagnationAssessment] = None
    alternative_paths: list[CareerPath] = Field(default_factory=list)
