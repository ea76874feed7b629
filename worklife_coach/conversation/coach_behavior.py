"""Coach personality: greetings, acknowledgments, follow-up questions and
the mindset-first replies used when a message shows emotional struggle.

Reply pattern: acknowledge, insights, next steps by timeframe, follow-up
question.
"""

from typing import Optional

from worklife_coach.engines.intent_recognizer import IntentRecognizer
from worklife_coach.models.intent import IntentType
from worklife_coach.models.profile import UserProfile
from worklife_coach.models.recommendations import Timeframe

WELCOME_MESSAGE = (
    "Hi! I'm your WorkLife coach. I'm here to help you get unstuck in your career, whether "
    "you're figuring out what to learn next, thinking about switching fields, or just feeling "
    "lost about where you're headed. Let's talk through it together."
)

FIRST_TIME_GREETING = """Welcome! I'm glad you're here. Before we dive in, I'd love to understand where you're at right now.

Could you tell me a bit about yourself? Things like:
- What you're currently doing (job, field, or studying)
- What's been on your mind lately about your career
- What you're hoping to figure out

No need to write a novel, just whatever feels relevant."""

STARTER_QUESTIONS = (
    "I'm not sure what career path is right for me. Where do I even start?",
    "I feel stuck in my current job. How do I know if I should stay or leave?",
    "What skills should I learn to advance my career?",
    "I want to switch careers but don't know how to make the transition.",
    "How do I grow in my current role without changing jobs?",
    "I lack confidence in my abilities. How can I build it?",
    "I'm overwhelmed with too many goals. What should I focus on first?",
    "How do I know if I'm on the right career path?",
)

CONTEXT_QUESTIONS = (
    "What's been on your mind about this lately?",
    "What have you already tried?",
    "What's the hardest part of this for you?",
)

FOLLOW_UP_QUESTIONS = {
    IntentType.CAREER_CLARITY: "What does success look like for you in your career?",
    IntentType.SKILL_GUIDANCE: (
        "What are you hoping this skill will do for you: switch fields, grow in your current "
        "role, or something else?"
    ),
    IntentType.ACTION_PLANNING: "What's one small step you could take this week?",
    IntentType.TRANSITION_GUIDANCE: "What's stopping you from making this transition?",
    IntentType.MINDSET_SUPPORT: "What would need to be true for you to feel ready?",
    IntentType.GROWTH_PLANNING: "Where do you want to be in 6 months?",
    IntentType.PROGRESS_CHECK: "How did that go? What did you learn?",
    IntentType.PROFILE_BUILDING: "What are you hoping to figure out first?",
}

DEFAULT_FOLLOW_UP = "What would you like to focus on next?"

# (message keywords, reply); first match wins
ACKNOWLEDGMENTS = (
    (
        ("stuck", "lost"),
        "That feeling of being stuck is really common, and it doesn't mean you're behind. "
        "It means you're being honest with yourself.",
    ),
    (("confused", "don't know"), "I hear you, that uncertainty can be frustrating. Let's break this down together."),
    (
        ("scared", "afraid", "worried"),
        "That fear makes sense, making career changes feels risky. But staying somewhere "
        "that's not working has its own cost.",
    ),
    (
        ("overwhelmed",),
        "That's classic overwhelm: when everything feels equally important, nothing gets done. "
        "Let's prioritize.",
    ),
    (
        ("confidence", "not good enough"),
        "I hear this a lot, and here's the thing: confidence doesn't come before you do the "
        "thing, it comes after.",
    ),
)
DEFAULT_ACKNOWLEDGMENT = "I understand where you're coming from. Let's work through this."

CONFIDENCE_RESPONSE = (
    "First, let's address this confidence piece. You're comparing your behind-the-scenes to "
    "everyone else's highlight reel. They're not more qualified, they're just better at "
    "talking about what they've done."
)
OVERWHELM_RESPONSE = (
    "Let's pause on the tactics for a moment. When everything feels urgent, nothing gets done. "
    "We need to pick one thing and make real progress there first."
)
FEAR_RESPONSE = (
    "That fear is valid, change is uncomfortable. But here's what I've seen: the discomfort of "
    "staying stuck often becomes worse than the discomfort of making a change."
)
STUCK_RESPONSE = (
    "Feeling stuck doesn't mean you're failing. It means you've outgrown where you are. That's "
    "actually progress, even if it doesn't feel like it."
)
DEFAULT_MINDSET_RESPONSE = (
    "I hear the frustration in what you're saying. Let's acknowledge that first, then figure "
    "out what to do about it."
)

# emotion indicator -> mindset reply, checked in this order
MINDSET_RESPONSES = (
    (("low confidence", "doubt"), CONFIDENCE_RESPONSE),
    (("stress",), OVERWHELM_RESPONSE),
    (("fear", "anxiety"), FEAR_RESPONSE),
    (("stagnation", "confusion"), STUCK_RESPONSE),
)

GENERIC_PHRASES = (
    "follow your passion",
    "believe in yourself",
    "never give up",
    "sky is the limit",
    "you can do anything",
    "dream big",
    "think positive",
)

ACTIONABLE_INDICATORS = (
    "?", "try", "start", "create", "write", "reach out", "talk to", "apply", "learn",
    "practice", "ask", "explore", "research", "today", "this week", "this month", "next",
    "recommend", "suggest", "consider", "focus on", "step", "action",
)

STEP_HEADINGS = {
    Timeframe.TODAY: "Today",
    Timeframe.THIS_WEEK: "This week",
    Timeframe.THIS_MONTH: "This month",
}

MAX_EXCLAMATIONS = 2


class CoachBehavior:
    def __init__(self, intent_recognizer: Optional[IntentRecognizer] = None):
        self.intent_recognizer = intent_recognizer or IntentRecognizer()

    def get_welcome_message(self) -> str:
        return WELCOME_MESSAGE

    def get_first_time_greeting(self) -> str:
        return FIRST_TIME_GREETING

    def get_returning_greeting(self, profile: UserProfile) -> str:
        path = profile.career_info.current_path
        completed = len(profile.progress.completed_actions)
        greeting = "Welcome back!"
        if path is not None:
            greeting += f" Last time we were working toward {path.title}."
        if completed:
            greeting += f" You've completed {completed} actions so far."
        return f"{greeting} What would you like to pick up today?"

    def get_starter_questions(self) -> list[str]:
        return list(STARTER_QUESTIONS)

    def structure_response(
        self,
        acknowledgment: str,
        insights: list[str],
        next_steps: list[tuple[Timeframe, str]],
        follow_up_question: str,
    ) -> str:
        """Acknowledgment, insights, steps grouped by timeframe, then the question."""
        blocks = [acknowledgment]
        if insights:
            blocks.append("\n\n".join(insights))
        for timeframe, heading in STEP_HEADINGS.items():
            steps = [text for tf, text in next_steps if tf == timeframe]
            if steps:
                blocks.append(f"**{heading}:**\n" + "\n".join(f"- {s}" for s in steps))
        blocks.append(follow_up_question)
        return "\n\n".join(b for b in blocks if b)

    def generate_acknowledgment(self, message: str) -> str:
        lower = message.lower()
        for keywords, text in ACKNOWLEDGMENTS:
            if any(k in lower for k in keywords):
                return text
        return DEFAULT_ACKNOWLEDGMENT

    def generate_follow_up_question(
        self,
        intent: Optional[IntentType],
        profile: Optional[UserProfile] = None,
        conversation_depth: int = 0,
    ) -> str:
        """Context question for new conversations, intent question afterwards.

        Context questions rotate with ``conversation_depth`` so repeated
        calls stay deterministic.
        """
        if conversation_depth == 0 or profile is None:
            return CONTEXT_QUESTIONS[conversation_depth % len(CONTEXT_QUESTIONS)]
        if intent is None:
            return DEFAULT_FOLLOW_UP
        return FOLLOW_UP_QUESTIONS.get(intent, DEFAULT_FOLLOW_UP)

    def detect_emotional_struggle(self, message: str) -> bool:
        emotional = self.intent_recognizer.detect_emotional_content(message)
        return self.intent_recognizer.has_negative_emotion(emotional)

    def generate_mindset_response(self, message: str) -> str:
        lower = message.lower()
        if "not good enough" in lower:
            return CONFIDENCE_RESPONSE
        if "too much" in lower:
            return OVERWHELM_RESPONSE

        indicators = set(self.intent_recognizer.detect_emotional_content(message).indicators)
        for keys, text in MINDSET_RESPONSES:
            if indicators.intersection(keys):
                return text
        return DEFAULT_MINDSET_RESPONSE

    def avoid_generic_advice(self, response: str) -> bool:
        """True when the response contains none of the stock platitudes."""
        lower = response.lower()
        return not any(phrase in lower for phrase in GENERIC_PHRASES)

    def has_actionable_element(self, response: str) -> bool:
        lower = response.lower()
        return any(indicator in lower for indicator in ACTIONABLE_INDICATORS)

    def add_warmth(self, response: str) -> str:
        """Keep at most two exclamation marks; later ones become periods."""
        parts = response.split("!")
        if len(parts) - 1 <= MAX_EXCLAMATIONS:
            return response
        kept = "!".join(parts[: MAX_EXCLAMATIONS + 1])
        return kept + "." + ".".join(parts[MAX_EXCLAMATIONS + 1 :])
