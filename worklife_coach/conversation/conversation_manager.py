"""
Conversation Manager

Session lifecycle and multi-turn context. Each turn appends the user
message, builds a context-aware reply and persists the history.

Reply layout:
    [history reference] [consistency note] [mindset support + question] [body]

The mindset block always comes before any tactical content. Data store
failures never fail a turn: a missing profile or history just means the
new-user flow. Continuing an unknown session raises SessionNotFoundError.

Example Usage:
    from worklife_coach.conversation.conversation_manager import ConversationManager

    manager = ConversationManager(InMemoryDataStore())
    session = await manager.start_session("user-1")
    reply = await manager.continue_session(session.id, "I feel stuck")
    await manager.end_session(session.id)
"""

from datetime import datetime, timedelta
from typing import Any, Awaitable, Optional

from worklife_coach.conversation.coach_behavior import CoachBehavior
from worklife_coach.engines.intent_recognizer import IntentRecognizer
from worklife_coach.models.config import ConversationConfig
from worklife_coach.models.conversation import (
    Message,
    MessageRole,
    Recommendations,
    Session,
    SessionContext,
)
from worklife_coach.models.intent import Intent
from worklife_coach.models.profile import UserProfile, utc_now
from worklife_coach.models.recommendations import Timeframe
from worklife_coach.utils.data_store import DataStore
from worklife_coach.utils.errors import SessionNotFoundError
from worklife_coach.utils.ids import IdFactory, uuid_id_factory
from worklife_coach.utils.logger import get_logger
from worklife_coach.utils.session_store import InMemorySessionStore, SessionStore

HISTORY_REFERENCE = "Based on our previous conversations, "
CHANGED_CIRCUMSTANCES = "I notice your situation has evolved since we last spoke."

DEFAULT_INSIGHT = "Let me help you work through this."
DEFAULT_NEXT_STEPS = [
    (Timeframe.TODAY, "Share more details about your situation"),
    (Timeframe.THIS_WEEK, "Reflect on what you want to achieve"),
]


def continue_sentence(prefix: str, text: str) -> str:
    """Join a lead-in clause to a sentence, lowercasing the sentence start."""
    if not text:
        return prefix.rstrip(", ") + "."
    if text.startswith(("I ", "I'")):
        return prefix + text
    return prefix + text[0].lower() + text[1:]


class ConversationManager:
    """Tracks sessions and builds context-aware replies."""

    def __init__(
        self,
        data_store: DataStore,
        session_store: Optional[SessionStore] = None,
        config: Optional[ConversationConfig] = None,
        intent_recognizer: Optional[IntentRecognizer] = None,
        coach_behavior: Optional[CoachBehavior] = None,
        id_factory: Optional[IdFactory] = None,
    ):
        self.data_store = data_store
        self.session_store = session_store or InMemorySessionStore()
        self.config = config or ConversationConfig()
        self.intent_recognizer = intent_recognizer or IntentRecognizer()
        self.coach_behavior = coach_behavior or CoachBehavior(self.intent_recognizer)
        self.id_factory = id_factory or uuid_id_factory
        self.logger = get_logger(
            correlation_id="conversation-manager",
            phase="conversation",
            component="conversation_manager",
        )

    async def start_session(self, user_id: str, now: Optional[datetime] = None) -> Session:
        """Create a session with an empty context and link it to the user."""
        now = now or utc_now()
        session = Session(
            id=self.id_factory("session"),
            user_id=user_id,
            start_time=now,
            last_activity=now,
            context=SessionContext(),
        )
        self.session_store.put(session)
        await self._guarded(
            self.data_store.associate_session_with_user(session.id, user_id),
            None,
            "associate_session_with_user",
            session.id,
        )
        self._session_logger(session.id).info("Session started", user_id=user_id)
        return session

    def get_session(self, session_id: str) -> Session:
        session = self.session_store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def get_session_context(self, session_id: str) -> Optional[SessionContext]:
        session = self.session_store.get(session_id)
        return session.context if session else None

    async def continue_session(
        self,
        session_id: str,
        user_message: str,
        intent: Optional[Intent] = None,
        body: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Message:
        """Run one conversational turn.

        Args:
            session_id: Live session id
            user_message: Raw user text
            intent: Recognized intent (recognized here when omitted)
            body: Formatted recommendation text for the turn, if any
            now: Turn time (defaults to current UTC time)

        Returns:
            The system reply message, already appended to the history

        Raises:
            SessionNotFoundError: If the session is unknown or already ended
        """
        now = now or utc_now()
        session = self.get_session(session_id)
        log = self._session_logger(session_id)

        intent = intent or self.intent_recognizer.recognize_intent(user_message)
        session.last_activity = now
        session.context.current_intent = intent.type
        session.context.conversation_history.append(
            Message(
                id=self.id_factory("msg"),
                role=MessageRole.USER,
                content=user_message,
                timestamp=now,
            )
        )

        profile = await self._guarded(
            self.data_store.get_user_profile(session.user_id), None, "get_user_profile", session_id
        )
        history = await self._guarded(
            self.data_store.get_conversation_history(session.user_id),
            [],
            "get_conversation_history",
            session_id,
        )

        content = self.generate_context_aware_response(
            session, user_message, intent, profile, history, body, now
        )
        reply = Message(id=self.id_factory("msg"), role=MessageRole.SYSTEM, content=content, timestamp=now)
        session.context.conversation_history.append(reply)
        self.session_store.put(session)

        await self._guarded(
            self.data_store.save_conversation(session_id, session.context.conversation_history),
            None,
            "save_conversation",
            session_id,
        )
        log.info(
            "Turn completed",
            intent=intent.type.value,
            message_length=len(user_message),
            reply_length=len(content),
            history_length=len(session.context.conversation_history),
        )
        return reply

    async def end_session(self, session_id: str) -> None:
        """Persist the final history and drop the session; unknown ids are ignored."""
        session = self.session_store.get(session_id)
        if session is None:
            return
        await self._guarded(
            self.data_store.save_conversation(session_id, session.context.conversation_history),
            None,
            "save_conversation",
            session_id,
        )
        self.session_store.delete(session_id)
        self._session_logger(session_id).info(
            "Session ended", message_count=len(session.context.conversation_history)
        )

    async def cleanup_expired_sessions(self, now: Optional[datetime] = None) -> list[str]:
        """End every session idle longer than the configured timeout."""
        now = now or utc_now()
        cutoff = now - timedelta(minutes=self.config.session_timeout_minutes)
        expired = self.session_store.idle_since(cutoff)
        for session_id in expired:
            await self.end_session(session_id)
        if expired:
            self.logger.info("Expired sessions cleaned up", count=len(expired))
        return expired

    def remember_recommendations(self, session_id: str, recommendations: Recommendations) -> None:
        """Keep the turn's actions, plan and topics in the session context."""
        session = self.get_session(session_id)
        context = session.context
        if recommendations.actions:
            known = {a.id for a in context.pending_actions}
            context.pending_actions.extend(a for a in recommendations.actions if a.id not in known)
        if recommendations.growth_plan is not None:
            context.growth_plan = recommendations.growth_plan

        topics = []
        if recommendations.career_paths:
            topics.extend(p.title for p in recommendations.career_paths[:1])
        if recommendations.transition_plan is not None:
            topics.append(recommendations.transition_plan.target_field)
        if recommendations.growth_plan is not None:
            topics.append(recommendations.growth_plan.career_path.title)
        for topic in topics:
            if topic not in context.active_topics:
                context.active_topics.append(topic)
        self.session_store.put(session)

    def generate_context_aware_response(
        self,
        session: Session,
        user_message: str,
        intent: Intent,
        profile: Optional[UserProfile],
        history: list[Message],
        body: Optional[str],
        now: datetime,
    ) -> str:
        lead = self.consistency_note(profile, now)
        main = self.generate_main_response(session, user_message, intent, profile, body)

        parts = []
        if self.references_history(session, history):
            if lead:
                parts.append(continue_sentence(HISTORY_REFERENCE, lead))
            else:
                main = continue_sentence(HISTORY_REFERENCE, main)
        elif lead:
            parts.append(lead)
        parts.append(main)
        return " ".join(p for p in parts if p).strip()

    def references_history(self, session: Session, history: list[Message]) -> bool:
        """True when a recent system message from an earlier session is substantial."""
        current_ids = {m.id for m in session.context.conversation_history}
        earlier = [m for m in history if m.id not in current_ids]
        recent = earlier[-self.config.history_window :]
        return any(
            m.role == MessageRole.SYSTEM and len(m.content) > self.config.context_reference_min_length
            for m in recent
        )

    def consistency_note(self, profile: Optional[UserProfile], now: datetime) -> str:
        """Continuity note for users who already have a career path.

        A profile updated within the recent-update window counts as changed
        circumstances, which is acknowledged instead of silently switching
        guidance.
        """
        if profile is None or profile.career_info.current_path is None:
            return ""
        recent_cutoff = now - timedelta(days=self.config.recent_update_days)
        if profile.progress.last_updated > recent_cutoff:
            return CHANGED_CIRCUMSTANCES
        return f"Continuing with your {profile.career_info.current_path.title} path."

    def should_lead_with_mindset(self, user_message: str, intent: Intent) -> bool:
        return self.intent_recognizer.should_prioritize_mindset(
            intent
        ) or self.coach_behavior.detect_emotional_struggle(user_message)

    def generate_main_response(
        self,
        session: Session,
        user_message: str,
        intent: Intent,
        profile: Optional[UserProfile],
        body: Optional[str],
    ) -> str:
        depth = len(session.context.conversation_history)
        follow_up = self.coach_behavior.generate_follow_up_question(intent.type, profile, depth)

        if self.should_lead_with_mindset(user_message, intent):
            mindset = self.coach_behavior.generate_mindset_response(user_message)
            blocks = [mindset, follow_up]
            if body:
                blocks.append(body)
            return "\n\n".join(blocks)

        if body:
            return body

        if depth == 1 and profile is None:
            return self.coach_behavior.get_first_time_greeting()

        return self.coach_behavior.structure_response(
            self.coach_behavior.generate_acknowledgment(user_message),
            [DEFAULT_INSIGHT],
            DEFAULT_NEXT_STEPS,
            follow_up,
        )

    async def _guarded(
        self, call: Awaitable[Any], default: Any, operation: str, session_id: str
    ) -> Any:
        """Await a data store call; on failure log and return ``default``."""
        try:
            return await call
        except Exception as e:
            self._session_logger(session_id).warning(
                "Data store call failed, continuing without it",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            return default

    def _session_logger(self, session_id: str):
        return get_logger(
            correlation_id=session_id,
            phase="conversation",
            component="conversation_manager",
        )
