"""
Unit tests for the profile analyzer.
"""

from datetime import timedelta

import pytest

from worklife_coach.engines.profile_analyzer import ProfileAnalyzer
from worklife_coach.models.analysis import CareerStage, GapPriority, TimeRange
from worklife_coach.models.conversation import ProgressRecord
from worklife_coach.models.intent import Intent, IntentEntities, IntentType
from worklife_coach.models.profile import ChallengeType, Goal, GoalType, Skill, UserProfile
from worklife_coach.models.recommendations import Milestone


@pytest.fixture
def analyzer():
    return ProfileAnalyzer()


class TestCategorizeChallenge:
    @pytest.mark.parametrize(
        "description, expected",
        [
            ("I feel lost about my direction", ChallengeType.DIRECTION),
            ("I need to learn technical skills", ChallengeType.SKILLS),
            ("I have imposter syndrome", ChallengeType.CONFIDENCE),
            ("I am burned out", ChallengeType.OVERWHELM),
            ("I want to switch to a different field", ChallengeType.TRANSITION),
            ("My career hit a plateau", ChallengeType.STAGNATION),
            ("Something else entirely", ChallengeType.DIRECTION),
        ],
    )
    def test_categories(self, analyzer, description, expected):
        assert analyzer.categorize_challenge(description) == expected


class TestCompletenessAndStage:
    def test_complete_profile(self, analyzer, junior_developer_profile):
        result = analyzer.check_profile_completeness(junior_developer_profile)

        assert result.is_complete
        assert result.missing_fields == []

    def test_empty_profile_lists_missing_fields(self, analyzer):
        result = analyzer.check_profile_completeness(UserProfile(user_id="user-new"))

        assert not result.is_complete
        assert result.missing_fields == ["current_role", "goals", "interests", "struggles"]

    @pytest.mark.parametrize(
        "years, expected",
        [(0, CareerStage.EARLY), (2.9, CareerStage.EARLY), (3, CareerStage.MID), (7, CareerStage.MID), (8, CareerStage.SENIOR)],
    )
    def test_career_stage(self, analyzer, years, expected):
        profile = UserProfile(user_id="u", personal_info={"years_of_experience": years})

        assert analyzer.determine_career_stage(profile) == expected


class TestAnalyzeProfile:
    def test_strengths_and_weaknesses(self, analyzer, career_changer_profile):
        # Act
        analysis = analyzer.analyze_profile(career_changer_profile)

        # Assert
        assert analysis.strengths == ["Communication", "Writing", "Significant work experience"]
        assert "Want to switch to a different field" in analysis.weaknesses
        assert analysis.in_transition
        assert analysis.career_stage == CareerStage.MID
        assert analysis.confidence_level == 0.6

    def test_challenges_ordered_by_severity(self, analyzer, junior_developer_profile):
        profile = junior_developer_profile.model_copy(deep=True)
        profile.career_info.struggles.append(
            profile.career_info.struggles[0].model_copy(update={"severity": 9, "description": "worse"})
        )

        analysis = analyzer.analyze_profile(profile)

        assert [c.severity for c in analysis.primary_challenges] == [9, 5]


class TestGapsAndReadiness:
    def test_identify_gaps(self, analyzer, stagnant_profile, software_path):
        gaps = {g.skill: g for g in analyzer.identify_gaps(stagnant_profile, software_path)}

        # programming at 8 is above target, the others are missing
        assert "programming" not in gaps
        assert set(gaps) == {"algorithms", "system design", "testing"}
        assert all(g.priority == GapPriority.HIGH for g in gaps.values())
        assert gaps["testing"].estimated_learning_time == "3-6 months"

    def test_partial_gap_priority(self, analyzer, software_path):
        profile = UserProfile(user_id="u", skills={"current": [Skill(name="Testing", level=5)]})

        gaps = {g.skill: g for g in analyzer.identify_gaps(profile, software_path)}

        assert gaps["testing"].priority == GapPriority.MEDIUM
        assert gaps["testing"].estimated_learning_time == "1-2 months"

    def test_assess_readiness(self, analyzer, career_changer_profile):
        goal = career_changer_profile.career_info.goals[0]

        readiness = analyzer.assess_readiness(career_changer_profile, goal)

        # no target skills -> alignment 1.0; 6 years -> 0.6; motivation 0.8
        assert readiness.score == pytest.approx(0.4 + 0.18 + 0.24)
        assert readiness.blockers == []

    def test_readiness_blockers(self, analyzer):
        profile = UserProfile(
            user_id="u",
            skills={"target": [Skill(name="SQL", level=7), Skill(name="Python", level=7), Skill(name="Stats", level=7)]},
            mindset={"motivation_level": 0.3},
        )
        goal = Goal(id="g", description="switch fields", type=GoalType.LONG_TERM)

        readiness = analyzer.assess_readiness(profile, goal)

        assert "Significant skill gaps exist" in readiness.blockers
        assert "Low motivation level" in readiness.blockers
        assert "Consider breaking this long-term goal into smaller milestones" in readiness.recommendations
        assert 0.0 <= readiness.score <= 1.0


class TestTrackProgress:
    def test_windowed_by_progress_records(self, analyzer, junior_developer_profile, fixed_now):
        # Arrange
        profile = junior_developer_profile.model_copy(deep=True)
        profile.progress.completed_actions = ["a1", "a2"]
        profile.progress.milestones = [
            Milestone(id="m1", title="Done", target_date=fixed_now, completed=True, completed_date=fixed_now),
            Milestone(id="m2", title="Open", target_date=fixed_now + timedelta(days=90)),
        ]
        window = TimeRange(start=fixed_now - timedelta(days=7), end=fixed_now + timedelta(days=1))
        records = [
            ProgressRecord(user_id=profile.user_id, action_id="a1", completed_at=fixed_now),
            ProgressRecord(user_id=profile.user_id, action_id="a2", completed_at=fixed_now - timedelta(days=30)),
        ]

        # Act
        report = analyzer.track_progress(profile, window, records)

        # Assert
        assert report.completed_actions == 1
        assert report.completed_milestones == 1
        assert report.overall_progress == 0.5

    def test_without_records_counts_all_completed_actions(self, analyzer, junior_developer_profile, fixed_now):
        profile = junior_developer_profile.model_copy(deep=True)
        profile.progress.completed_actions = ["a1", "a2", "a3"]
        window = TimeRange(start=fixed_now - timedelta(days=7), end=fixed_now)

        report = analyzer.track_progress(profile, window)

        assert report.completed_actions == 3
        assert report.overall_progress == 0.0

    def test_naive_stored_dates_compare_as_utc(self, analyzer, fixed_now):
        naive_now = fixed_now.replace(tzinfo=None)
        profile = UserProfile.model_validate(
            {
                "user_id": "user-1",
                "career_info": {
                    "goals": [{"id": "g1", "description": "Ship a project", "target_date": naive_now}]
                },
            }
        )
        window = TimeRange(start=fixed_now - timedelta(days=7), end=fixed_now + timedelta(days=1))
        records = [ProgressRecord(user_id="user-1", action_id="a1", completed_at=naive_now)]

        report = analyzer.track_progress(profile, window, records)

        assert report.completed_actions == 1
        assert report.goals_achieved == 1


class TestCollectProfileData:
    def test_creates_profile_from_intent(self, analyzer, fixed_now):
        # Arrange
        intent = Intent(
            type=IntentType.PROFILE_BUILDING,
            confidence=0.7,
            entities=IntentEntities(
                skills=["python", "sql"], career_fields=["data science"], years_of_experience=3
            ),
        )

        # Act
        profile = analyzer.collect_profile_data("user-new", intent, now=fixed_now)

        # Assert
        assert profile.user_id == "user-new"
        assert profile.personal_info.years_of_experience == 3
        assert [(s.name, s.level) for s in profile.skills.current] == [("python", 3), ("sql", 3)]
        assert profile.career_info.interests == ["data science"]

    def test_updates_copy_without_duplicates(self, analyzer, junior_developer_profile, fixed_now):
        intent = Intent(
            type=IntentType.PROFILE_BUILDING,
            confidence=0.7,
            entities=IntentEntities(skills=["javascript", "react"]),
        )

        updated = analyzer.collect_profile_data(
            "user-junior", intent, junior_developer_profile, fixed_now
        )

        assert [s.name for s in updated.skills.current] == ["JavaScript", "react"]
        assert len(junior_developer_profile.skills.current) == 1
        assert updated.progress.last_updated == fixed_now
