"""
Shared fixtures: a fixed clock, deterministic ids and sample profiles.
"""

from datetime import datetime, timedelta, timezone

import pytest

from worklife_coach.models.profile import (
    Challenge,
    ChallengeType,
    Goal,
    GoalType,
    Mindset,
    PersonalInfo,
    Progress,
    Skill,
    UserProfile,
)
from worklife_coach.models.recommendations import CareerPath
from worklife_coach.utils.ids import SequentialIdFactory

# Wednesday; the week ends Sunday 2026-03-08
FIXED_NOW = datetime(2026, 3, 4, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def id_factory() -> SequentialIdFactory:
    return SequentialIdFactory()


@pytest.fixture
def junior_developer_profile() -> UserProfile:
    """Two years in, JavaScript at 6, one long-term goal."""
    return UserProfile(
        user_id="user-junior",
        personal_info=PersonalInfo(
            current_role="Junior Developer",
            years_of_experience=2,
            industry="technology",
        ),
        career_info={
            "goals": [
                Goal(
                    id="goal-senior",
                    description="become senior engineer",
                    type=GoalType.LONG_TERM,
                    priority=8,
                )
            ],
            "interests": ["software development"],
            "struggles": [
                Challenge(
                    type=ChallengeType.SKILLS,
                    description="Not sure which skills to learn next",
                    severity=5,
                )
            ],
        },
        skills={"current": [Skill(name="JavaScript", level=6)]},
        progress=Progress(last_updated=FIXED_NOW - timedelta(days=30)),
    )


@pytest.fixture
def career_changer_profile() -> UserProfile:
    """Marketer with some analytics background moving toward data science."""
    return UserProfile(
        user_id="user-changer",
        personal_info=PersonalInfo(
            current_role="Marketing Specialist",
            years_of_experience=6,
            industry="marketing",
        ),
        career_info={
            "goals": [
                Goal(id="goal-ds", description="land a data science role", priority=9),
                Goal(
                    id="goal-learn",
                    description="learn python and statistics",
                    type=GoalType.SHORT_TERM,
                    priority=7,
                ),
            ],
            "interests": ["data", "analytics"],
            "struggles": [
                Challenge(
                    type=ChallengeType.TRANSITION,
                    description="Want to switch to a different field",
                    severity=6,
                )
            ],
        },
        skills={
            "current": [
                Skill(name="Communication", level=8),
                Skill(name="SQL", level=4),
                Skill(name="Writing", level=7),
            ]
        },
        mindset=Mindset(confidence_level=0.6, motivation_level=0.8),
        progress=Progress(last_updated=FIXED_NOW - timedelta(days=30)),
    )


@pytest.fixture
def stagnant_profile() -> UserProfile:
    """Six years in the same role, feels stuck, little recent progress."""
    return UserProfile(
        user_id="user-stuck",
        personal_info=PersonalInfo(
            current_role="Software Engineer",
            years_of_experience=6,
            industry="technology",
        ),
        career_info={
            "goals": [Goal(id="goal-grow", description="get promoted", priority=6)],
            "interests": ["machine learning"],
            "struggles": [
                Challenge(
                    type=ChallengeType.STAGNATION,
                    description="I feel stuck in the same place",
                    severity=8,
                )
            ],
        },
        skills={
            "current": [
                Skill(name="Python", level=7),
                Skill(name="Programming", level=8),
                Skill(name="SQL", level=5),
            ]
        },
        progress=Progress(last_updated=FIXED_NOW - timedelta(days=60)),
    )


@pytest.fixture
def software_path() -> CareerPath:
    return CareerPath(
        id="software-engineering",
        title="Software Engineering",
        description="Build software applications and systems",
        reasoning="This path aligns with your interests in software development.",
        fit_score=0.7,
        required_skills=["programming", "algorithms", "system design", "testing"],
        time_to_transition="6-12 months",
        growth_potential=0.9,
    )
