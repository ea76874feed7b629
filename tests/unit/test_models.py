"""
Unit tests for profile, knowledge base and analysis models.
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from worklife_coach.models.analysis import TimeRange
from worklife_coach.models.conversation import CoachingRequest, CoachingResponse, Recommendations
from worklife_coach.models.intent import Intent, IntentType
from worklife_coach.models.knowledge import KnowledgeBase, default_knowledge_base
from worklife_coach.models.profile import Goal, Skill, UserProfile
from worklife_coach.models.recommendations import CareerPath, SkillRecommendation


class TestUserProfile:
    """Test cases for UserProfile and its parts."""

    def test_skill_level_is_clamped(self):
        assert Skill(name="Python", level=14).level == 10.0
        assert Skill(name="Python", level=-2).level == 0.0
        assert Skill(name="Python", level=None).level == 0.0

    def test_goals_are_unique_by_id(self):
        profile = UserProfile(
            user_id="user-1",
            career_info={
                "goals": [
                    Goal(id="g1", description="first"),
                    Goal(id="g1", description="duplicate"),
                ]
            },
        )

        assert [g.description for g in profile.career_info.goals] == ["first"]

    def test_interests_deduplicated_case_insensitively(self):
        profile = UserProfile(
            user_id="user-1", career_info={"interests": ["Data", "data", "  ", "design"]}
        )

        assert profile.career_info.interests == ["Data", "design"]

    def test_touch_never_moves_backwards(self, fixed_now):
        profile = UserProfile(user_id="user-1", progress={"last_updated": fixed_now})

        profile.touch(fixed_now - timedelta(days=1))
        assert profile.progress.last_updated == fixed_now

        profile.touch(fixed_now + timedelta(days=1))
        assert profile.progress.last_updated == fixed_now + timedelta(days=1)

    def test_mark_action_completed_is_idempotent(self, fixed_now):
        profile = UserProfile(user_id="user-1")

        profile.mark_action_completed("action-1", fixed_now)
        profile.mark_action_completed("action-1", fixed_now)

        assert profile.progress.completed_actions == ["action-1"]

    def test_all_skill_names(self):
        profile = UserProfile(
            user_id="user-1",
            skills={"current": [Skill(name="Python")], "learning": [Skill(name="SQL")]},
        )

        assert profile.all_skill_names() == ["python", "sql"]


class TestRecommendationModels:
    """Test cases for recommendation model constraints."""

    def test_fit_score_bounds(self):
        with pytest.raises(ValidationError):
            CareerPath(id="x", title="X", description="", reasoning="r.", fit_score=1.2)

    def test_skill_recommendation_requires_resources(self):
        with pytest.raises(ValidationError):
            SkillRecommendation(
                skill="SQL",
                priority=0.5,
                reasoning="Useful.",
                learning_resources=[],
                estimated_time="2 months",
            )

    def test_career_path_is_immutable(self, software_path):
        with pytest.raises(ValidationError):
            software_path.title = "Other"

    def test_recommendations_is_empty(self, software_path):
        assert Recommendations().is_empty()
        assert not Recommendations(career_paths=[software_path]).is_empty()

    def test_request_requires_user_id(self):
        with pytest.raises(ValidationError):
            CoachingRequest(user_id="", message="hi")

    def test_response_requires_content(self):
        with pytest.raises(ValidationError):
            CoachingResponse(
                content="",
                session_id="session-1",
                intent=Intent(type=IntentType.CAREER_CLARITY, confidence=0.5),
            )


class TestKnowledgeBase:
    """Test cases for the packaged knowledge base."""

    def test_default_knowledge_base_is_cached(self):
        assert default_knowledge_base() is default_knowledge_base()

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            KnowledgeBase.load(tmp_path / "missing.json")

    def test_find_skill_exact_then_partial(self):
        kb = default_knowledge_base()

        assert kb.find_skill("Python") is kb.skills["python"]
        assert kb.find_skill("advanced sql queries") is kb.skills["sql"]
        assert kb.find_skill("underwater basket weaving") is None

    def test_skill_metadata_falls_back_to_default(self):
        kb = default_knowledge_base()

        assert kb.skill_metadata("underwater basket weaving") == kb.default_skill

    def test_field_metadata_generic_fallback_keeps_name(self):
        kb = default_knowledge_base()

        field = kb.field_metadata("Forestry")

        assert field.name == "Forestry"
        assert field.core_skills == kb.generic_field.core_skills

    def test_is_universal(self):
        kb = default_knowledge_base()

        assert kb.is_universal("Communication")
        assert not kb.is_universal("Kubernetes")


class TestTimeRange:
    def test_end_before_start_rejected(self, fixed_now):
        with pytest.raises(ValidationError):
            TimeRange(start=fixed_now, end=fixed_now - timedelta(days=1))

    def test_contains_is_inclusive(self, fixed_now):
        window = TimeRange(start=fixed_now, end=fixed_now + timedelta(days=7))

        assert window.contains(fixed_now)
        assert window.contains(fixed_now + timedelta(days=7))
        assert not window.contains(fixed_now + timedelta(days=8))
