"""
Unit tests for the intent recognizer.
"""

import pytest

from worklife_coach.models.config import IntentConfig
from worklife_coach.models.intent import (
    EmotionalContent,
    Intent,
    IntentEntities,
    IntentType,
    TimeReference,
)
from worklife_coach.engines.intent_recognizer import IntentRecognizer


@pytest.fixture
def recognizer():
    return IntentRecognizer()


class TestRecognizeIntent:
    """Test cases for intent classification."""

    def test_stuck_and_confused_message(self, recognizer):
        """A stuck/confused message is mindset, clarity or skill related and emotional."""
        # Act
        intent = recognizer.recognize_intent("I feel stuck and don't know what to learn")

        # Assert
        assert intent.type in {
            IntentType.MINDSET_SUPPORT,
            IntentType.CAREER_CLARITY,
            IntentType.SKILL_GUIDANCE,
        }
        assert intent.entities.emotional is not None
        assert intent.entities.emotional.severity > 0
        indicators = recognizer.detect_emotional_content(
            "I feel stuck and don't know what to learn"
        ).indicators
        assert "stagnation" in indicators or "confusion" in indicators

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("What skill should I learn to improve?", IntentType.SKILL_GUIDANCE),
            ("I want to switch careers and transition to data science", IntentType.TRANSITION_GUIDANCE),
            ("I completed the course and made progress", IntentType.PROGRESS_CHECK),
            ("I lack confidence and feel anxious", IntentType.MINDSET_SUPPORT),
            ("Help me build a long-term plan with milestones", IntentType.GROWTH_PLANNING),
            ("What career path suits me?", IntentType.CAREER_CLARITY),
        ],
    )
    def test_classification(self, recognizer, message, expected):
        assert recognizer.recognize_intent(message).type == expected

    def test_unmatched_question_defaults_to_career_clarity(self, recognizer):
        assert recognizer.recognize_intent("Hmm?").type == IntentType.CAREER_CLARITY

    def test_unmatched_statement_defaults_to_profile_building(self, recognizer):
        assert recognizer.recognize_intent("Hello there").type == IntentType.PROFILE_BUILDING

    def test_confidence_is_bounded(self, recognizer):
        message = " ".join(["career path direction"] * 10)

        intent = recognizer.recognize_intent(message)

        assert 0.5 <= intent.confidence <= 1.0

    def test_no_emotional_entity_for_neutral_message(self, recognizer):
        intent = recognizer.recognize_intent("What skill should I learn?")

        assert intent.entities.emotional is None


class TestExtractEntities:
    """Test cases for entity extraction."""

    def test_career_fields_in_message_order(self, recognizer):
        entities = recognizer.extract_entities(
            "I want to move from finance to data science"
        )

        assert entities.career_fields == ["finance", "data science"]

    def test_longer_field_wins_over_contained_field(self, recognizer):
        entities = recognizer.extract_entities("I do software engineering")

        assert entities.career_fields == ["software engineering"]

    def test_skills_timeframe_and_experience(self, recognizer):
        entities = recognizer.extract_entities(
            "I have 4 years of experience with Python and SQL and want to start this week"
        )

        assert "python" in entities.skills
        assert "sql" in entities.skills
        assert entities.years_of_experience == 4
        assert entities.timeframe == TimeReference.THIS_WEEK

    def test_long_term_duration(self, recognizer):
        entities = recognizer.extract_entities("Where will I be in 6 months")

        assert entities.timeframe == TimeReference.LONG_TERM
        assert entities.duration == 6
        assert entities.duration_unit == "month"

    def test_unmatched_keys_stay_none(self, recognizer):
        entities = recognizer.extract_entities("Hello there")

        assert entities.career_fields is None
        assert entities.skills is None
        assert entities.timeframe is None
        assert entities.years_of_experience is None


class TestEmotionalContent:
    """Test cases for emotion detection and mindset prioritization."""

    def test_severity_capped_at_one(self, recognizer):
        emotional = recognizer.detect_emotional_content(
            "I'm stressed, overwhelmed, anxious, scared and hopeless!!"
        )

        assert emotional.severity == 1.0
        assert {"stress", "anxiety", "fear", "sadness"} <= set(emotional.indicators)

    def test_positive_emotion_is_not_negative(self, recognizer):
        emotional = recognizer.detect_emotional_content("I'm excited and motivated")

        assert emotional.has_emotional_content
        assert not recognizer.has_negative_emotion(emotional)

    def test_mindset_intent_is_always_prioritized(self, recognizer):
        intent = Intent(type=IntentType.MINDSET_SUPPORT, confidence=0.6)

        assert recognizer.should_prioritize_mindset(intent)

    def test_overwhelmed_message_prioritizes_mindset(self, recognizer):
        intent = recognizer.recognize_intent("I'm so overwhelmed and stressed about my career")

        assert intent.entities.emotional.severity >= 0.5
        assert recognizer.should_prioritize_mindset(intent)

    def test_severity_threshold_is_configurable(self):
        recognizer = IntentRecognizer(IntentConfig(mindset_severity_threshold=0.9))
        intent = Intent(
            type=IntentType.SKILL_GUIDANCE,
            confidence=0.6,
            entities=IntentEntities(
                emotional=EmotionalContent(
                    has_emotional_content=True, indicators=["confusion"], severity=0.6
                )
            ),
        )

        assert not recognizer.should_prioritize_mindset(intent)
        assert IntentRecognizer().should_prioritize_mindset(intent)
