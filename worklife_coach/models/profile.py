"""User profile model: the shared schema every engine reads.

Example Usage:
    from worklife_coach.models.profile import Skill, UserProfile

    profile = UserProfile(user_id="user-1")
    profile.personal_info.current_role = "Junior Developer"
    profile.skills.current.append(Skill(name="JavaScript", level=6))
    profile.touch()
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from worklife_coach.models.recommendations import CareerPath, Milestone, UtcDatetime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GoalType(str, Enum):
    SHORT_TERM = "short_term"
    LONG_TERM = "long_term"


class ChallengeType(str, Enum):
    DIRECTION = "direction"
    SKILLS = "skills"
    CONFIDENCE = "confidence"
    OVERWHELM = "overwhelm"
    TRANSITION = "transition"
    STAGNATION = "stagnation"


class Skill(BaseModel):
    """A named skill with a 0-10 proficiency level.

    Out-of-range levels are clamped instead of rejected so that loosely
    collected data never blocks a profile update.
    """

    name: str = Field(min_length=1)
    level: float = 0.0
    category: str = "general"

    @field_validator("level", mode="before")
    @classmethod
    def clamp_level(cls, v) -> float:
        if v is None:
            return 0.0
        return max(0.0, min(10.0, float(v)))


class Goal(BaseModel):
    id: str
    description: str
    type: GoalType = GoalType.SHORT_TERM
    priority: int = Field(default=5, ge=1, le=10)
    target_date: Optional[UtcDatetime] = None


class Challenge(BaseModel):
    """A struggle the user reported. Severity: higher is more severe (0-10)."""

    type: ChallengeType
    description: str
    severity: float = Field(default=5.0, ge=0.0, le=10.0)


class PersonalInfo(BaseModel):
    age: Optional[int] = Field(default=None, ge=0, le=120)
    current_role: Optional[str] = None
    years_of_experience: float = Field(default=0.0, ge=0.0, le=60.0)
    education: str = ""
    industry: Optional[str] = None


def _unique_by(items: list, key) -> list:
    seen = set()
    result = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        result.append(item)
    return result


class CareerInfo(BaseModel):
    goals: list[Goal] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    struggles: list[Challenge] = Field(default_factory=list)
    current_path: Optional[CareerPath] = None

    @field_validator("goals")
    @classmethod
    def dedupe_goals(cls, v: list[Goal]) -> list[Goal]:
        """Goals form an ordered set keyed by id."""
        return _unique_by(v, lambda g: g.id)

    @field_validator("interests")
    @classmethod
    def dedupe_interests(cls, v: list[str]) -> list[str]:
        return _unique_by([i.strip() for i in v if i.strip()], lambda i: i.lower())


class Skills(BaseModel):
    current: list[Skill] = Field(default_factory=list)
    learning: list[Skill] = Field(default_factory=list)
    target: list[Skill] = Field(default_factory=list)

    @field_validator("current", "learning", "target")
    @classmethod
    def dedupe_skills(cls, v: list[Skill]) -> list[Skill]:
        return _unique_by(v, lambda s: s.name.lower())


class Mindset(BaseModel):
    confidence_level: float = Field(default=0.5, ge=0.0, le=1.0)
    motivation_level: float = Field(default=0.5, ge=0.0, le=1.0)
    primary_concerns: list[str] = Field(default_factory=list)


class Progress(BaseModel):
    completed_actions: list[str] = Field(default_factory=list)
    milestones: list[Milestone] = Field(default_factory=list)
    last_updated: UtcDatetime = Field(default_factory=utc_now)

    @field_validator("completed_actions")
    @classmethod
    def dedupe_actions(cls, v: list[str]) -> list[str]:
        return _unique_by(v, lambda a: a)


class UserProfile(BaseModel):
    """Everything the coach knows about a user.

    Attributes:
        user_id: Owner of the profile
        personal_info: Role, experience, education, industry
        career_info: Goals, interests, struggles and the current career path
        skills: Current, learning and target skill sets
        mindset: Confidence and motivation (0-1) plus concerns
        progress: Completed action ids, milestones, last update timestamp
    """

    user_id: str
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    career_info: CareerInfo = Field(default_factory=CareerInfo)
    skills: Skills = Field(default_factory=Skills)
    mindset: Mindset = Field(default_factory=Mindset)
    progress: Progress = Field(default_factory=Progress)

    def touch(self, now: Optional[datetime] = None) -> None:
        """Advance ``progress.last_updated``; it never moves backwards."""
        now = now or utc_now()
        if now > self.progress.last_updated:
            self.progress.last_updated = now

    def mark_action_completed(self, action_id: str, now: Optional[datetime] = None) -> None:
        if action_id not in self.progress.completed_actions:
            self.progress.completed_actions.append(action_id)
        self.touch(now)

    def all_skill_names(self) -> list[str]:
        """Lowercased names of current and learning skills."""
        return [s.name.lower() for s in self.skills.current + self.skills.learning]
