"""Intent Recognizer.

Rule-based classification of a user message into one of eight coaching
intents, plus emotional-content detection and entity extraction.

Scoring: each keyword found in the message adds 1 to its category, each
phrase pattern adds 2. The highest score wins (earlier category on ties).
With no hits at all, a question defaults to ``career_clarity`` and anything
else to ``profile_building``.

Example Usage:
    from worklife_coach.engines.intent_recognizer import IntentRecognizer

    recognizer = IntentRecognizer()
    intent = recognizer.recognize_intent("I feel stuck and don't know what to learn")
    intent.type                                   # IntentType.MINDSET_SUPPORT
    recognizer.should_prioritize_mindset(intent)  # True
"""

import re
from typing import NamedTuple, Optional

from worklife_coach.models.config import IntentConfig
from worklife_coach.models.intent import (
    EmotionalContent,
    Intent,
    IntentEntities,
    IntentType,
    TimeReference,
)
from worklife_coach.utils.logger import get_logger


class EmotionPattern(NamedTuple):
    pattern: re.Pattern
    indicator: str
    weight: float
    negative: bool


class IntentLexicon(NamedTuple):
    keywords: tuple[str, ...]
    phrases: tuple[re.Pattern, ...]


def _p(expr: str) -> re.Pattern:
    return re.compile(expr, re.IGNORECASE)


EMOTION_PATTERNS: tuple[EmotionPattern, ...] = (
    EmotionPattern(_p(r"\b(anxious|anxiety|worried|worry|nervous)\b"), "anxiety", 0.8, True),
    EmotionPattern(_p(r"\b(stressed|stress|overwhelmed|overwhelm)\b"), "stress", 0.9, True),
    EmotionPattern(_p(r"\b(confused|confusing|lost|don't know|unsure)\b"), "confusion", 0.7, True),
    EmotionPattern(_p(r"\b(scared|afraid|fear|terrified)\b"), "fear", 0.8, True),
    EmotionPattern(_p(r"\b(frustrated|frustrating|frustration)\b"), "frustration", 0.7, True),
    EmotionPattern(_p(r"\b(depressed|depression|sad|hopeless)\b"), "sadness", 0.9, True),
    EmotionPattern(_p(r"\b(stuck|trapped|can't move forward)\b"), "stagnation", 0.7, True),
    EmotionPattern(_p(r"\b(doubt|doubting|uncertain|unsure)\b"), "doubt", 0.6, True),
    EmotionPattern(_p(r"\b(lack confidence|no confidence|not confident)\b"), "low confidence", 0.8, True),
    EmotionPattern(_p(r"\b(failing|failure|failed)\b"), "failure", 0.7, True),
    EmotionPattern(_p(r"\b(excited|exciting|enthusiastic)\b"), "excitement", 0.3, False),
    EmotionPattern(_p(r"\b(motivated|motivation|inspired)\b"), "motivation", 0.3, False),
    EmotionPattern(_p(r"\b(hopeful|optimistic|positive)\b"), "hope", 0.3, False),
)

NEGATIVE_INDICATORS = frozenset(p.indicator for p in EMOTION_PATTERNS if p.negative)

EMPHATIC_PUNCTUATION = re.compile(r"[!?]{2,}")
EMPHATIC_PUNCTUATION_WEIGHT = 0.2

# Category order is the tie-break order.
INTENT_LEXICON: dict[IntentType, IntentLexicon] = {
    IntentType.PROFILE_BUILDING: IntentLexicon(
        ("background", "experience", "education", "skills", "current role", "about me", "my story"),
        (_p(r"i (am|work|studied|have|graduated)"), _p(r"my (background|experience|education|skills)")),
    ),
    IntentType.CAREER_CLARITY: IntentLexicon(
        ("career path", "direction", "what should i do", "career options", "confused", "lost", "unclear"),
        (_p(r"what (career|path|direction)"), _p(r"should i (become|pursue|go into)"), _p(r"don't know what")),
    ),
    IntentType.SKILL_GUIDANCE: IntentLexicon(
        ("learn", "skill", "training", "course", "what to learn", "improve", "develop"),
        (_p(r"what (skill|should i learn)"), _p(r"how (do i|can i) learn"), _p(r"need to (learn|improve)")),
    ),
    IntentType.ACTION_PLANNING: IntentLexicon(
        ("next step", "what should i do", "action", "plan", "today", "this week", "start"),
        (_p(r"what (should|can) i do"), _p(r"next step"), _p(r"how do i (start|begin)"), _p(r"where do i start")),
    ),
    IntentType.MINDSET_SUPPORT: IntentLexicon(
        ("confidence", "motivation", "doubt", "fear", "anxious", "stressed", "overwhelmed", "stuck"),
        (_p(r"feel (anxious|stressed|overwhelmed|stuck|lost)"), _p(r"lack (confidence|motivation)"), _p(r"not confident")),
    ),
    IntentType.GROWTH_PLANNING: IntentLexicon(
        ("growth plan", "long term", "future", "roadmap", "milestone", "goal", "plan"),
        (_p(r"long[- ]term (plan|goal)"), _p(r"growth plan"), _p(r"where (will|should) i be"), _p(r"in \d+ (months|years)")),
    ),
    IntentType.TRANSITION_GUIDANCE: IntentLexicon(
        ("career change", "switch", "transition", "move to", "change field", "new career"),
        (_p(r"(change|switch|transition) (career|field|to)"), _p(r"move (to|into)"), _p(r"from .* to")),
    ),
    IntentType.PROGRESS_CHECK: IntentLexicon(
        ("progress", "update", "completed", "finished", "done", "accomplished"),
        (_p(r"i (completed|finished|did|accomplished)"), _p(r"made progress"), _p(r"update on")),
    ),
}

CONFIDENCE_KEYWORDS: dict[IntentType, tuple[str, ...]] = {
    IntentType.PROFILE_BUILDING: ("background", "experience", "education"),
    IntentType.CAREER_CLARITY: ("career", "path", "direction"),
    IntentType.SKILL_GUIDANCE: ("learn", "skill", "training"),
    IntentType.ACTION_PLANNING: ("next", "step", "action"),
    IntentType.MINDSET_SUPPORT: ("feel", "confidence", "motivation"),
    IntentType.GROWTH_PLANNING: ("plan", "goal", "future"),
    IntentType.TRANSITION_GUIDANCE: ("change", "transition", "switch"),
    IntentType.PROGRESS_CHECK: ("progress", "completed", "done"),
}

CAREER_FIELDS = (
    "software engineering", "data science", "product management", "ux design",
    "digital marketing", "business analysis", "project management", "finance",
    "healthcare", "education", "sales", "consulting", "engineering",
)

KNOWN_SKILLS = (
    "python", "javascript", "java", "sql", "react", "node",
    "communication", "leadership", "project management", "data analysis",
    "design", "marketing", "sales", "writing",
)

TIME_PATTERNS: tuple[tuple[re.Pattern, TimeReference], ...] = (
    (_p(r"\b(today|now|immediately)\b"), TimeReference.TODAY),
    (_p(r"\bthis week\b"), TimeReference.THIS_WEEK),
    (_p(r"\bthis month\b"), TimeReference.THIS_MONTH),
    (_p(r"\b(\d+)\s*(month|year)s?\b"), TimeReference.LONG_TERM),
)

EXPERIENCE_PATTERN = _p(r"(\d+)\s*years?\s*(of\s*)?(experience|exp)")


class IntentRecognizer:
    """Classifies messages and detects emotional content."""

    def __init__(self, config: Optional[IntentConfig] = None):
        self.config = config or IntentConfig()
        self.logger = get_logger(
            correlation_id="intent-recognizer", phase="intent", component="intent_recognizer"
        )

    def recognize_intent(self, message: str) -> Intent:
        """Classify a message and attach extracted entities.

        Args:
            message: Raw user message

        Returns:
            Intent with type, confidence and entities. ``entities.emotional``
            is set only when emotional content was found.
        """
        message_lower = message.lower()
        intent_type = self.classify_intent_type(message_lower)
        confidence = self.calculate_confidence(message_lower, intent_type)
        entities = self.extract_entities(message)

        emotional = self.detect_emotional_content(message)
        if emotional.has_emotional_content:
            entities.emotional = emotional

        self.logger.debug(
            "Intent recognized",
            intent=intent_type.value,
            confidence=round(confidence, 2),
            message_length=len(message),
            emotional_severity=emotional.severity,
        )
        return Intent(type=intent_type, confidence=confidence, entities=entities)

    def detect_emotional_content(self, message: str) -> EmotionalContent:
        indicators: list[str] = []
        total_weight = 0.0

        for emotion in EMOTION_PATTERNS:
            hits = len(emotion.pattern.findall(message))
            if hits:
                indicators.append(emotion.indicator)
                total_weight += emotion.weight * hits

        if EMPHATIC_PUNCTUATION.search(message):
            total_weight += EMPHATIC_PUNCTUATION_WEIGHT

        return EmotionalContent(
            has_emotional_content=bool(indicators),
            indicators=indicators,
            severity=min(total_weight / 2, 1.0),
        )

    def score_intents(self, message_lower: str) -> dict[IntentType, int]:
        scores = {}
        for intent_type, lexicon in INTENT_LEXICON.items():
            score = sum(1 for keyword in lexicon.keywords if keyword in message_lower)
            score += sum(2 for phrase in lexicon.phrases if phrase.search(message_lower))
            scores[intent_type] = score
        return scores

    def classify_intent_type(self, message_lower: str) -> IntentType:
        scores = self.score_intents(message_lower)

        best_type = IntentType.PROFILE_BUILDING
        best_score = 0
        for intent_type, score in scores.items():
            if score > best_score:
                best_type, best_score = intent_type, score

        if best_score == 0:
            return IntentType.CAREER_CLARITY if "?" in message_lower else IntentType.PROFILE_BUILDING
        return best_type

    def calculate_confidence(self, message_lower: str, intent_type: IntentType) -> float:
        confidence = 0.5

        word_count = len(message_lower.split())
        if word_count > 20:
            confidence += 0.2
        elif word_count > 10:
            confidence += 0.1

        keywords = CONFIDENCE_KEYWORDS.get(intent_type, ())
        confidence += 0.1 * sum(1 for k in keywords if k in message_lower)

        return min(confidence, 1.0)

    def extract_entities(self, message: str) -> IntentEntities:
        """Extract career fields, skills, time references and experience.

        Only keys that matched are set; everything else stays None.
        """
        message_lower = message.lower()
        entities = IntentEntities()

        # message order; a field contained in a longer matched field is dropped
        found = [f for f in CAREER_FIELDS if f in message_lower]
        fields = [f for f in found if not any(f != other and f in other for other in found)]
        if fields:
            entities.career_fields = sorted(fields, key=message_lower.index)

        skills = [s for s in KNOWN_SKILLS if s in message_lower]
        if skills:
            entities.skills = skills

        for pattern, reference in TIME_PATTERNS:
            match = pattern.search(message)
            if match:
                entities.timeframe = reference
                if reference == TimeReference.LONG_TERM:
                    entities.duration = int(match.group(1))
                    entities.duration_unit = match.group(2).lower()
                break

        experience = EXPERIENCE_PATTERN.search(message)
        if experience:
            entities.years_of_experience = int(experience.group(1))

        return entities

    def should_prioritize_mindset(self, intent: Intent) -> bool:
        """True for mindset intents or emotional content at or above the severity threshold."""
        if intent.type == IntentType.MINDSET_SUPPORT:
            return True

        emotional = intent.entities.emotional
        if emotional is None:
            return False
        return (
            emotional.has_emotional_content
            and emotional.severity >= self.config.mindset_severity_threshold
        )

    def has_negative_emotion(self, emotional: EmotionalContent) -> bool:
        return any(i in NEGATIVE_INDICATORS for i in emotional.indicators)
