"""Error taxonomy and fallback texts for the coaching core.

- Data store failures (``DataStoreError``) are caught at the boundary and
  degrade to a missing profile or empty history.
- Engine failures (``EngineError`` or anything an engine raises) omit that
  recommendation for the turn.
- ``SessionNotFoundError`` is caller misuse and always propagates.
- Formatting failures fall back to ``FORMATTING_FALLBACK``.
"""

from typing import Optional

FORMATTING_FALLBACK = (
    "I'm here to help you with your career journey. What would you like to discuss?"
)

TECHNICAL_DIFFICULTY_FALLBACK = (
    "I'm experiencing some technical difficulties right now, but I'm still here "
    "to help. What would you like to focus on today?"
)

FALLBACK_RESPONSES = {
    "career_path": (
        "I'd love to help you explore career paths. Could you tell me more about "
        "your interests and the kind of work that energizes you?"
    ),
    "skill_recommendation": (
        "Let's figure out which skills to focus on. What career direction are you "
        "most interested in right now?"
    ),
    "action_steps": (
        "Let's start with one small step: write down the one career goal that "
        "matters most to you this month. What would that goal be?"
    ),
    "profile_analysis": (
        "To give you personalized guidance, could you share a bit about your "
        "current role, experience and what you want from your career?"
    ),
    "transition": (
        "Changing fields is a big move and worth planning carefully. Which field "
        "are you in now, and where would you like to go?"
    ),
    "growth_plan": (
        "A growth plan works best with a clear destination. Which career path "
        "would you like to build a long-term plan around?"
    ),
}


class CoachingError(Exception):
    """Base error for the coaching core.

    Attributes:
        code: Stable machine-readable error code
        recoverable: Whether the turn can continue with a degraded response
    """

    code = "COACHING_ERROR"

    def __init__(
        self, message: str, code: Optional[str] = None, recoverable: bool = True
    ):
        super().__init__(message)
        if code is not None:
            self.code = code
        self.recoverable = recoverable


class DataStoreError(CoachingError):
    code = "DATA_STORE_ERROR"


class DataIntegrityError(DataStoreError):
    """A persisted record failed schema validation."""

    code = "DATA_INTEGRITY_ERROR"


class EngineError(CoachingError):
    code = "ENGINE_ERROR"

    def __init__(self, engine: str, message: str):
        super().__init__(f"{engine}: {message}")
        self.engine = engine


class SessionNotFoundError(CoachingError):
    code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}", recoverable=False)
        self.session_id = session_id


def get_fallback_response(context: Optional[str] = None) -> str:
    """Fixed on-topic text for a failed recommendation context."""
    if context is None:
        return FORMATTING_FALLBACK
    return FALLBACK_RESPONSES.get(context, FORMATTING_FALLBACK)
