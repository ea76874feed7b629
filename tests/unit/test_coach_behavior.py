"""
Unit tests for the coach personality helpers.
"""

import pytest

from worklife_coach.conversation.coach_behavior import (
    CONFIDENCE_RESPONSE,
    CONTEXT_QUESTIONS,
    DEFAULT_ACKNOWLEDGMENT,
    DEFAULT_MINDSET_RESPONSE,
    FEAR_RESPONSE,
    FIRST_TIME_GREETING,
    FOLLOW_UP_QUESTIONS,
    OVERWHELM_RESPONSE,
    STUCK_RESPONSE,
    CoachBehavior,
)
from worklife_coach.models.intent import IntentType
from worklife_coach.models.recommendations import Timeframe


@pytest.fixture
def coach():
    return CoachBehavior()


class TestGreetings:
    def test_first_time_greeting_asks_about_the_user(self, coach):
        assert coach.get_first_time_greeting() == FIRST_TIME_GREETING
        assert "tell me a bit about yourself" in FIRST_TIME_GREETING

    def test_returning_greeting_mentions_path_and_progress(self, coach, junior_developer_profile, software_path):
        profile = junior_developer_profile.model_copy(deep=True)
        profile.career_info.current_path = software_path
        profile.progress.completed_actions = ["a1", "a2"]

        greeting = coach.get_returning_greeting(profile)

        assert greeting == (
            "Welcome back! Last time we were working toward Software Engineering. "
            "You've completed 2 actions so far. What would you like to pick up today?"
        )

    def test_starter_questions_are_a_copy(self, coach):
        questions = coach.get_starter_questions()
        questions.clear()

        assert len(coach.get_starter_questions()) == 8


class TestStructureResponse:
    def test_blocks_in_order(self, coach):
        # Act
        content = coach.structure_response(
            "I hear you.",
            ["Insight one.", "Insight two."],
            [
                (Timeframe.THIS_MONTH, "Finish a course"),
                (Timeframe.TODAY, "Write three goals"),
            ],
            "What feels doable?",
        )

        # Assert
        assert content == (
            "I hear you.\n\nInsight one.\n\nInsight two.\n\n"
            "**Today:**\n- Write three goals\n\n"
            "**This month:**\n- Finish a course\n\n"
            "What feels doable?"
        )

    def test_empty_sections_are_skipped(self, coach):
        assert coach.structure_response("Hi.", [], [], "Ready?") == "Hi.\n\nReady?"


class TestAcknowledgmentsAndQuestions:
    @pytest.mark.parametrize(
        "message, fragment",
        [
            ("I feel stuck", "being stuck is really common"),
            ("I'm confused about this", "uncertainty can be frustrating"),
            ("I'm scared to quit", "That fear makes sense"),
            ("I'm overwhelmed", "classic overwhelm"),
            ("I'm not good enough", "confidence doesn't come before"),
        ],
    )
    def test_acknowledgment_by_keyword(self, coach, message, fragment):
        assert fragment in coach.generate_acknowledgment(message)

    def test_default_acknowledgment(self, coach):
        assert coach.generate_acknowledgment("Tell me about SQL") == DEFAULT_ACKNOWLEDGMENT

    def test_context_questions_rotate_by_depth(self, coach):
        questions = [coach.generate_follow_up_question(None, None, depth) for depth in range(4)]

        assert questions == list(CONTEXT_QUESTIONS) + [CONTEXT_QUESTIONS[0]]

    def test_intent_question_with_profile(self, coach, junior_developer_profile):
        question = coach.generate_follow_up_question(
            IntentType.TRANSITION_GUIDANCE, junior_developer_profile, conversation_depth=2
        )

        assert question == FOLLOW_UP_QUESTIONS[IntentType.TRANSITION_GUIDANCE]


class TestMindsetResponses:
    """Mindset replies keyed by phrase first, then by emotion indicator."""

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("I'm just not good enough for this", CONFIDENCE_RESPONSE),
            ("There is too much going on", OVERWHELM_RESPONSE),
            ("I lack confidence", CONFIDENCE_RESPONSE),
            ("I'm so stressed", OVERWHELM_RESPONSE),
            ("I'm anxious about interviews", FEAR_RESPONSE),
            ("I feel stuck", STUCK_RESPONSE),
            ("I'm frustrated", DEFAULT_MINDSET_RESPONSE),
        ],
    )
    def test_generate_mindset_response(self, coach, message, expected):
        assert coach.generate_mindset_response(message) == expected

    def test_detect_emotional_struggle(self, coach):
        assert coach.detect_emotional_struggle("I feel hopeless")
        assert not coach.detect_emotional_struggle("I'm excited about this")


class TestResponseQuality:
    def test_avoid_generic_advice(self, coach):
        assert not coach.avoid_generic_advice("Just follow your passion!")
        assert coach.avoid_generic_advice("Reach out to two data analysts this week.")

    def test_has_actionable_element(self, coach):
        assert coach.has_actionable_element("Reach out to one person this week")
        assert not coach.has_actionable_element("Nice.")

    @pytest.mark.parametrize(
        "response, expected",
        [
            ("Great! Well done!", "Great! Well done!"),
            ("A! B! C! D!", "A! B! C. D."),
        ],
    )
    def test_add_warmth_limits_exclamations(self, coach, response, expected):
        assert coach.add_warmth(response) == expected
