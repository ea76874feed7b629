"""
Unit tests for the coaching engine.
"""

from unittest.mock import AsyncMock, patch

import pytest

from worklife_coach.coaching_engine import CoachingEngine
from worklife_coach.conversation.coach_behavior import CONFIDENCE_RESPONSE
from worklife_coach.models.conversation import CoachingRequest, Session
from worklife_coach.models.intent import Intent, IntentEntities, IntentType
from worklife_coach.utils.data_store import InMemoryDataStore, JsonlDataStore
from worklife_coach.utils.errors import TECHNICAL_DIFFICULTY_FALLBACK, SessionNotFoundError


@pytest.fixture
def data_store():
    return InMemoryDataStore()


@pytest.fixture
def engine(data_store, id_factory):
    return CoachingEngine(data_store=data_store, id_factory=id_factory)


def request(user_id, message, session_id=None):
    return CoachingRequest(user_id=user_id, message=message, session_id=session_id)


class TestRouting:
    """Each intent reaches the right engine."""

    @pytest.mark.asyncio
    async def test_career_clarity_returns_paths_and_sets_current_path(
        self, engine, data_store, career_changer_profile, fixed_now
    ):
        # Arrange
        await data_store.save_user_profile(career_changer_profile)

        # Act
        response = await engine.process_request(
            request("user-changer", "What career path suits me?"), now=fixed_now
        )

        # Assert
        assert response.intent.type == IntentType.CAREER_CLARITY
        assert response.recommendations.career_paths[0].title == "Data Science"
        assert "Data Science" in response.content
        stored = await data_store.get_user_profile("user-changer")
        assert stored.career_info.current_path.id == "data-science"

    @pytest.mark.asyncio
    async def test_skill_guidance_orders_prerequisites_first(
        self, engine, data_store, junior_developer_profile, fixed_now
    ):
        await data_store.save_user_profile(junior_developer_profile)

        response = await engine.process_request(
            request("user-junior", "What skill should I learn to improve?"), now=fixed_now
        )

        skills = response.recommendations.skills
        assert skills
        names = [s.skill.lower() for s in skills]
        for index, skill in enumerate(skills):
            for dependency in skill.dependencies:
                if dependency.lower() in names:
                    assert names.index(dependency.lower()) < index

    @pytest.mark.asyncio
    async def test_transition_uses_industry_as_source(
        self, engine, data_store, career_changer_profile, fixed_now
    ):
        await data_store.save_user_profile(career_changer_profile)

        response = await engine.process_request(
            request("user-changer", "I want to switch careers and transition to data science"),
            now=fixed_now,
        )

        plan = response.recommendations.transition_plan
        assert plan.source_field == "marketing"
        assert plan.target_field == "data science"
        assert response.content.startswith("Let's map out your transition")

    @pytest.mark.asyncio
    async def test_transition_between_two_named_fields(
        self, engine, data_store, career_changer_profile, fixed_now
    ):
        await data_store.save_user_profile(career_changer_profile)

        response = await engine.process_request(
            request("user-changer", "I want to transition from finance to data science"),
            now=fixed_now,
        )

        plan = response.recommendations.transition_plan
        assert (plan.source_field, plan.target_field) == ("finance", "data science")

    @pytest.mark.asyncio
    async def test_growth_plan_is_adapted_on_second_request(
        self, engine, data_store, junior_developer_profile, fixed_now
    ):
        # Arrange
        await data_store.save_user_profile(junior_developer_profile)
        message = "Help me build a long-term plan with milestones"

        # Act
        first = await engine.process_request(request("user-junior", message), now=fixed_now)
        second = await engine.process_request(
            request("user-junior", message, first.session_id), now=fixed_now
        )

        # Assert
        assert first.recommendations.growth_plan.id == "plan-1"
        assert second.recommendations.growth_plan.id == "plan-1"
        assert second.session_id == first.session_id

    @pytest.mark.asyncio
    async def test_mindset_support_leads_with_mindset(self, engine, fixed_now):
        response = await engine.process_request(
            request("user-new", "I lack confidence and feel anxious"), now=fixed_now
        )

        assert response.intent.type == IntentType.MINDSET_SUPPORT
        assert response.content.startswith(CONFIDENCE_RESPONSE)
        assert [a.id for a in response.recommendations.actions] == ["mindset-1", "mindset-2"]

    @pytest.mark.asyncio
    async def test_profile_building_creates_profile(self, engine, data_store, fixed_now):
        response = await engine.process_request(request("user-new", "Hello there"), now=fixed_now)

        assert response.intent.type == IntentType.PROFILE_BUILDING
        assert [a.id for a in response.recommendations.actions] == ["profile-1", "profile-2", "profile-3"]
        assert "Describe your current role" in response.content
        assert await data_store.get_user_profile("user-new") is not None

    @pytest.mark.asyncio
    async def test_no_profile_means_no_recommendations(self, engine, fixed_now):
        response = await engine.process_request(
            request("user-new", "What career path suits me?"), now=fixed_now
        )

        assert response.recommendations is None
        assert response.content

    @pytest.mark.asyncio
    async def test_transition_without_fields_is_omitted(self, engine, junior_developer_profile, fixed_now):
        intent = Intent(type=IntentType.TRANSITION_GUIDANCE, confidence=0.6, entities=IntentEntities())
        session = Session(id="s", user_id="user-junior")

        recommendations = await engine.route_request(
            intent, "I want a change", junior_developer_profile, session, fixed_now
        )

        assert recommendations.is_empty()

    @pytest.mark.asyncio
    async def test_in_role_marker_adds_in_role_growth(self, engine, stagnant_profile, fixed_now):
        intent = Intent(type=IntentType.CAREER_CLARITY, confidence=0.6)
        session = Session(id="s", user_id="user-stuck")

        recommendations = await engine.route_request(
            intent, "How do I grow in my current role?", stagnant_profile, session, fixed_now
        )

        assert recommendations.career_paths
        assert recommendations.in_role_growth.stagnation_assessment is not None


class TestFailureHandling:
    """Test cases for degraded turns."""

    @pytest.mark.asyncio
    async def test_engine_failure_omits_its_recommendations(
        self, engine, data_store, career_changer_profile, fixed_now
    ):
        await data_store.save_user_profile(career_changer_profile)

        with patch.object(
            engine.career_path_engine, "generate_career_paths", side_effect=RuntimeError("tables missing")
        ):
            response = await engine.process_request(
                request("user-changer", "What career path suits me?"), now=fixed_now
            )

        assert response.recommendations is None
        assert response.content
        assert response.content != TECHNICAL_DIFFICULTY_FALLBACK

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_fallback(self, engine, fixed_now):
        with patch.object(
            engine.conversation_manager,
            "continue_session",
            AsyncMock(side_effect=RuntimeError("boom")),
        ):
            response = await engine.process_request(request("user-1", "Hello there"), now=fixed_now)

        assert response.content == TECHNICAL_DIFFICULTY_FALLBACK
        assert response.intent.type == IntentType.PROFILE_BUILDING
        assert response.intent.confidence == 0.5
        assert response.session_id == "session-1"

    @pytest.mark.asyncio
    async def test_unknown_session_raises(self, engine):
        with pytest.raises(SessionNotFoundError):
            await engine.process_request(request("user-1", "Hello", "session-missing"))

    @pytest.mark.asyncio
    async def test_session_of_another_user_raises(self, engine, fixed_now):
        response = await engine.process_request(request("user-a", "Hello there"), now=fixed_now)

        with pytest.raises(SessionNotFoundError):
            await engine.process_request(request("user-b", "Hello", response.session_id))


class TestActionCompletion:
    """Test cases for recording completed actions."""

    @pytest.mark.asyncio
    async def test_pending_action_is_acknowledged_by_name(
        self, engine, data_store, junior_developer_profile, fixed_now
    ):
        # Arrange
        await data_store.save_user_profile(junior_developer_profile)
        response = await engine.process_request(
            request("user-junior", "I lack confidence and feel anxious"), now=fixed_now
        )

        # Act
        message = await engine.record_action_completion(
            "user-junior", "mindset-1", session_id=response.session_id, now=fixed_now
        )

        # Assert
        assert message.startswith('Great work completing "Write down three things')
        assert message.endswith("Your reflection work is helping you gain clarity on your path.")
        pending = engine.conversation_manager.get_session_context(response.session_id).pending_actions
        assert [a.completed for a in pending] == [True, False]
        stored = await data_store.get_user_profile("user-junior")
        assert stored.progress.completed_actions == ["mindset-1"]

    @pytest.mark.asyncio
    async def test_progress_check_acknowledges_completed_steps(
        self, engine, data_store, junior_developer_profile, fixed_now
    ):
        await data_store.save_user_profile(junior_developer_profile)
        first = await engine.process_request(
            request("user-junior", "I lack confidence and feel anxious"), now=fixed_now
        )
        await engine.record_action_completion("user-junior", "mindset-1", first.session_id, fixed_now)

        response = await engine.process_request(
            request("user-junior", "I completed the course and made progress", first.session_id),
            now=fixed_now,
        )

        assert response.intent.type == IntentType.PROGRESS_CHECK
        assert response.content.startswith('Great work completing "Write down three things')
        assert response.recommendations.actions

    @pytest.mark.asyncio
    async def test_without_session_uses_count(self, engine, fixed_now):
        message = await engine.record_action_completion("user-new", "a1", now=fixed_now)

        assert message == "Great work completing your last action!"


class TestFromEnv:
    def test_data_dir_selects_jsonl_store(self, tmp_path, monkeypatch):
        # Arrange
        for name in ("WORKLIFE_CONFIG_PATH", "WORKLIFE_LOG_LEVEL", "WORKLIFE_LOG_FILE"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("WORKLIFE_DATA_DIR", str(tmp_path))

        # Act
        with patch("worklife_coach.coaching_engine.configure_logging") as mock_logging:
            engine = CoachingEngine.from_env(tmp_path / "missing.env")

        # Assert
        assert isinstance(engine.data_store, JsonlDataStore)
        mock_logging.assert_called_once_with(None, "INFO")
