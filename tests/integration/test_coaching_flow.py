"""
End-to-end coaching conversations over the JSONL data store.
"""

from datetime import timedelta

import pytest

from worklife_coach.models.conversation import CoachingRequest
from worklife_coach.models.intent import IntentType


@pytest.mark.integration
class TestCareerChangerJourney:
    """A marketer exploring data science across two sessions."""

    @pytest.mark.asyncio
    async def test_multi_turn_session_then_restart(
        self, make_engine, sequential_ids, career_changer_profile, fixed_now
    ):
        # Arrange
        engine = make_engine(sequential_ids)
        await engine.data_store.save_user_profile(career_changer_profile)
        user_id = career_changer_profile.user_id

        # Act: clarity, then skills, then the transition plan
        clarity = await engine.process_request(
            CoachingRequest(user_id=user_id, message="What career path suits me?"), now=fixed_now
        )
        session_id = clarity.session_id
        skills = await engine.process_request(
            CoachingRequest(
                user_id=user_id, message="What skill should I learn to improve?", session_id=session_id
            ),
            now=fixed_now + timedelta(minutes=2),
        )
        transition = await engine.process_request(
            CoachingRequest(
                user_id=user_id,
                message="I want to switch careers and transition to data science",
                session_id=session_id,
            ),
            now=fixed_now + timedelta(minutes=4),
        )

        # Assert
        assert clarity.recommendations.career_paths[0].id == "data-science"
        assert skills.session_id == session_id
        assert skills.content.startswith("Continuing with your Data Science path.")
        assert "statistics" in [s.skill for s in skills.recommendations.skills]
        assert transition.intent.type == IntentType.TRANSITION_GUIDANCE
        assert transition.recommendations.transition_plan.source_field == "marketing"

        context = engine.conversation_manager.get_session_context(session_id)
        assert len(context.conversation_history) == 6
        assert "Data Science" in context.active_topics
        assert "data science" in context.active_topics

        # Act: a mindset turn, then the user finishes one of its steps
        mindset = await engine.process_request(
            CoachingRequest(
                user_id=user_id, message="I lack confidence and feel anxious", session_id=session_id
            ),
            now=fixed_now + timedelta(minutes=6),
        )
        acknowledgment = await engine.record_action_completion(
            user_id, mindset.recommendations.actions[0].id, session_id, fixed_now + timedelta(minutes=8)
        )
        await engine.end_session(session_id)

        # Assert
        assert acknowledgment.startswith('Great work completing "Write down three things')
        stored = await engine.data_store.get_user_profile(user_id)
        assert stored.progress.completed_actions == ["mindset-1"]
        assert stored.career_info.current_path.id == "data-science"
        assert len(await engine.data_store.get_progress_history(user_id)) == 1

        # Act: a restarted engine on the same files
        restarted = make_engine()
        later = fixed_now + timedelta(days=2)
        follow_up = await restarted.process_request(
            CoachingRequest(user_id=user_id, message="What skill should I learn to improve?"),
            now=later,
        )

        # Assert: the new session builds on the earlier one
        assert follow_up.session_id != session_id
        assert follow_up.content.startswith(
            "Based on our previous conversations, I notice your situation has evolved"
        )
        assert follow_up.recommendations.skills


@pytest.mark.integration
class TestNewUserOnboarding:
    @pytest.mark.asyncio
    async def test_profile_grows_from_conversation(self, make_engine, sequential_ids, fixed_now):
        # Arrange
        engine = make_engine(sequential_ids)

        # Act
        greeting = await engine.process_request(
            CoachingRequest(user_id="user-new", message="Hello there"), now=fixed_now
        )
        details = await engine.process_request(
            CoachingRequest(
                user_id="user-new",
                message="I have 3 years of experience with Python and SQL",
                session_id=greeting.session_id,
            ),
            now=fixed_now + timedelta(minutes=1),
        )

        # Assert
        assert greeting.intent.type == IntentType.PROFILE_BUILDING
        assert details.intent.type == IntentType.PROFILE_BUILDING
        profile = await engine.data_store.get_user_profile("user-new")
        assert profile.personal_info.years_of_experience == 3
        assert {s.name for s in profile.skills.current} == {"python", "sql"}
        assert "Describe your current role" in details.content
