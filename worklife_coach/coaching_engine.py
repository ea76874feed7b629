"""
Coaching Engine

Single entry point of the coaching core. Recognizes intent, routes the
message to the recommendation engines, formats the result and runs the
conversational turn.

Failure handling:
    - data store calls degrade (missing profile, empty history)
    - an engine that raises is left out of the turn's recommendations
    - an unknown session id raises SessionNotFoundError
    - anything else returns the technical-difficulties reply

Example Usage:
    from worklife_coach.coaching_engine import CoachingEngine
    from worklife_coach.models.conversation import CoachingRequest

    engine = CoachingEngine()
    response = await engine.process_request(
        CoachingRequest(user_id="user-1", message="What career path fits me?")
    )
    print(response.content)
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from worklife_coach.conversation.conversation_manager import ConversationManager
from worklife_coach.conversation.response_formatter import ResponseContext, ResponseFormatter
from worklife_coach.engines.action_steps import ActionStepGenerator
from worklife_coach.engines.career_paths import CareerPathEngine
from worklife_coach.engines.growth_plan import GrowthPlanBuilder
from worklife_coach.engines.in_role_growth import InRoleGrowthAdvisor
from worklife_coach.engines.intent_recognizer import IntentRecognizer
from worklife_coach.engines.profile_analyzer import ProfileAnalyzer
from worklife_coach.engines.skill_recommender import SkillRecommender
from worklife_coach.engines.transition_advisor import TransitionAdvisor
from worklife_coach.models.config import CoachingParams
from worklife_coach.models.conversation import (
    CoachingRequest,
    CoachingResponse,
    Recommendations,
    Session,
)
from worklife_coach.models.intent import Intent, IntentType
from worklife_coach.models.knowledge import KnowledgeBase, default_knowledge_base
from worklife_coach.models.profile import UserProfile, utc_now
from worklife_coach.models.recommendations import (
    ActionCategory,
    ActionStep,
    CareerPath,
    Timeframe,
)
from worklife_coach.utils.data_store import DataStore, InMemoryDataStore, JsonlDataStore
from worklife_coach.utils.errors import TECHNICAL_DIFFICULTY_FALLBACK, SessionNotFoundError
from worklife_coach.utils.ids import IdFactory, uuid_id_factory
from worklife_coach.utils.logger import configure_logging, get_logger
from worklife_coach.utils.session_store import SessionStore

IN_ROLE_MARKERS = ("current role", "current job", "where i am")

MINDSET_STEPS = (
    ("Write down three things you've accomplished recently, no matter how small", Timeframe.TODAY),
    (
        "Identify one challenge you're facing and reframe it as a learning opportunity",
        Timeframe.THIS_WEEK,
    ),
)

PROFILE_STEPS = {
    "current_role": "Describe your current role and what a typical week looks like",
    "goals": "Define your short-term and long-term career goals",
    "interests": "List your professional interests and what energizes you at work",
}


class CoachingEngine:
    """
    Coaching Engine for request orchestration.

    Owns one instance of each engine, the formatter and the conversation
    manager, all sharing the same configuration, knowledge base and id
    factory.
    """

    def __init__(
        self,
        data_store: Optional[DataStore] = None,
        params: Optional[CoachingParams] = None,
        knowledge_base: Optional[KnowledgeBase] = None,
        session_store: Optional[SessionStore] = None,
        id_factory: Optional[IdFactory] = None,
    ):
        """
        Initialize Coaching Engine.

        Args:
            data_store: Persistence collaborator (in-memory when omitted)
            params: Coaching parameters (defaults when omitted)
            knowledge_base: Static lookup tables (packaged tables when omitted)
            session_store: Live session storage (in-memory when omitted)
            id_factory: Id generator shared by every component
        """
        self.params = params or CoachingParams()
        self.data_store = data_store or InMemoryDataStore()
        self.id_factory = id_factory or uuid_id_factory
        kb = knowledge_base or default_knowledge_base()

        self.intent_recognizer = IntentRecognizer(self.params.intent)
        self.profile_analyzer = ProfileAnalyzer()
        self.career_path_engine = CareerPathEngine(kb)
        self.skill_recommender = SkillRecommender(kb)
        self.action_step_generator = ActionStepGenerator(self.params.action_steps, self.id_factory)
        self.growth_plan_builder = GrowthPlanBuilder(self.params.growth_plan, self.id_factory)
        self.transition_advisor = TransitionAdvisor(kb, self.id_factory)
        self.in_role_growth_advisor = InRoleGrowthAdvisor()
        self.response_formatter = ResponseFormatter()
        self.conversation_manager = ConversationManager(
            self.data_store,
            session_store=session_store,
            config=self.params.conversation,
            intent_recognizer=self.intent_recognizer,
            id_factory=self.id_factory,
        )

        self.logger = get_logger(
            correlation_id="coaching-engine",
            phase="coaching",
            component="coaching_engine",
        )

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> "CoachingEngine":
        """Build an engine from environment configuration.

        Logging is configured from the loaded parameters; a configured data
        directory selects the JSONL store.
        """
        params = CoachingParams.from_env(env_file)
        configure_logging(params.logging.log_file, params.logging.log_level)
        data_store = JsonlDataStore(params.data_dir) if params.data_dir else InMemoryDataStore()
        return cls(data_store=data_store, params=params)

    async def process_request(
        self, request: CoachingRequest, now: Optional[datetime] = None
    ) -> CoachingResponse:
        """
        Process one coaching request.

        Args:
            request: User id, message and optional session id
            now: Request time (defaults to current UTC time)

        Returns:
            CoachingResponse with non-empty content

        Raises:
            SessionNotFoundError: If request.session_id names no live session
        """
        now = now or utc_now()
        session: Optional[Session] = None
        try:
            session = await self._resolve_session(request, now)
            log = get_logger(correlation_id=session.id, phase="coaching", component="coaching_engine")

            intent = self.intent_recognizer.recognize_intent(request.message)
            profile = await self._guarded(
                self.data_store.get_user_profile(request.user_id), None, "get_user_profile", log
            )
            if intent.type == IntentType.PROFILE_BUILDING:
                profile = await self._collect_profile(request.user_id, intent, profile, now, log)

            recommendations = await self.route_request(intent, request.message, profile, session, now)
            await self._remember_current_path(profile, recommendations, log)

            body = self.format_response(intent, recommendations, profile, session, now)
            reply = await self.conversation_manager.continue_session(
                session.id, request.message, intent=intent, body=body, now=now
            )
            self.conversation_manager.remember_recommendations(session.id, recommendations)

            log.info(
                "Request processed",
                user_id=request.user_id,
                intent=intent.type.value,
                confidence=round(intent.confidence, 2),
                recommendation_types=[
                    name
                    for name in Recommendations.model_fields
                    if getattr(recommendations, name) is not None
                ],
            )
            return CoachingResponse(
                content=reply.content,
                session_id=session.id,
                timestamp=reply.timestamp,
                intent=intent,
                recommendations=None if recommendations.is_empty() else recommendations,
            )
        except SessionNotFoundError:
            raise
        except Exception as e:
            return await self._handle_error(e, request, session, now)

    async def record_action_completion(
        self,
        user_id: str,
        action_id: str,
        session_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """Record a completed action and return the acknowledgment text."""
        now = now or utc_now()
        log = get_logger(
            correlation_id=session_id or "coaching-engine",
            phase="coaching",
            component="coaching_engine",
        )
        await self._guarded(
            self.data_store.track_action_completion(user_id, action_id, now),
            None,
            "track_action_completion",
            log,
        )
        profile = await self._guarded(
            self.data_store.get_user_profile(user_id), None, "get_user_profile", log
        )

        step = self._complete_pending_action(session_id, action_id)
        if step is not None and profile is not None:
            return self.action_step_generator.generate_progress_acknowledgment([step], profile)

        completed = len(profile.progress.completed_actions) if profile else 1
        return self.response_formatter.format_progress_acknowledgment(completed)

    async def end_session(self, session_id: str) -> None:
        await self.conversation_manager.end_session(session_id)

    async def route_request(
        self,
        intent: Intent,
        message: str,
        profile: Optional[UserProfile],
        session: Session,
        now: datetime,
    ) -> Recommendations:
        """Run the engines the intent calls for; failed engines leave their field None."""
        recommendations = Recommendations()
        if profile is None and intent.type != IntentType.MINDSET_SUPPORT:
            return recommendations

        if intent.type == IntentType.CAREER_CLARITY:
            recommendations.career_paths = self._run_engine("career_path_engine", self._career_paths, profile)
        elif intent.type == IntentType.SKILL_GUIDANCE:
            recommendations.skills = self._run_engine("skill_recommender", self._skills, profile)
        elif intent.type in (IntentType.ACTION_PLANNING, IntentType.PROGRESS_CHECK):
            recommendations.actions = self._run_engine("action_step_generator", self._action_steps, profile, now)
        elif intent.type == IntentType.GROWTH_PLANNING:
            recommendations.growth_plan = self._run_engine(
                "growth_plan_builder", self._growth_plan, profile, session, now
            )
        elif intent.type == IntentType.TRANSITION_GUIDANCE:
            recommendations.transition_plan = self._run_engine(
                "transition_advisor", self._transition_plan, intent, profile
            )
        elif intent.type == IntentType.MINDSET_SUPPORT:
            recommendations.actions = self._mindset_steps()
        elif intent.type == IntentType.PROFILE_BUILDING:
            recommendations.actions = self._run_engine(
                "profile_analyzer", self._profile_building_steps, profile, now
            )

        if profile is not None and any(m in message.lower() for m in IN_ROLE_MARKERS):
            recommendations.in_role_growth = self._run_engine(
                "in_role_growth_advisor", self.in_role_growth_advisor.analyze_in_role_growth, profile
            )
        return recommendations

    def format_response(
        self,
        intent: Intent,
        recommendations: Recommendations,
        profile: Optional[UserProfile],
        session: Session,
        now: datetime,
    ) -> Optional[str]:
        """Recommendation text for the turn, or None when nothing was produced."""
        if recommendations.is_empty():
            return None

        has_progress = profile is not None and bool(profile.progress.completed_actions)
        context = ResponseContext(
            intent=intent.type,
            profile=profile,
            is_returning_user=has_progress,
            has_progress=has_progress and intent.type != IntentType.PROGRESS_CHECK,
        )
        body = self.response_formatter.format_combined_response(recommendations, context, now)

        if intent.type == IntentType.PROGRESS_CHECK and profile is not None:
            completed = [
                a
                for a in session.context.pending_actions
                if a.id in profile.progress.completed_actions
            ]
            acknowledgment = self.action_step_generator.generate_progress_acknowledgment(
                completed, profile
            )
            if acknowledgment:
                body = f"{acknowledgment}\n\n{body}"
        return body

    def _career_paths(self, profile: UserProfile) -> list[CareerPath]:
        paths = self.career_path_engine.generate_career_paths(profile)
        return self.career_path_engine.identify_trade_offs(paths)

    def _target_path(self, profile: UserProfile) -> CareerPath:
        if profile.career_info.current_path is not None:
            return profile.career_info.current_path
        return self.career_path_engine.generate_career_paths(profile)[0]

    def _skills(self, profile: UserProfile):
        return self.skill_recommender.recommend_skills(profile, self._target_path(profile))

    def _action_steps(self, profile: UserProfile, now: datetime) -> Optional[list[ActionStep]]:
        goals = profile.career_info.goals
        if not goals:
            return None
        path = profile.career_info.current_path
        skills = self.skill_recommender.recommend_skills(profile, path) if path else None
        return self.action_step_generator.generate_action_steps(profile, goals, path, skills, now)

    def _growth_plan(self, profile: UserProfile, session: Session, now: datetime):
        existing = session.context.growth_plan
        if existing is not None and existing.user_id == profile.user_id:
            return self.growth_plan_builder.adapt_growth_plan(existing, profile, now)
        return self.growth_plan_builder.build_growth_plan(profile, self._target_path(profile), now)

    def _transition_plan(self, intent: Intent, profile: UserProfile):
        fields = intent.entities.career_fields or []
        if not fields:
            return None
        if len(fields) >= 2:
            source, target = fields[0], fields[-1]
        else:
            source, target = profile.personal_info.industry or "current field", fields[0]
        return self.transition_advisor.generate_transition_plan(source, target, profile)

    def _mindset_steps(self) -> list[ActionStep]:
        return [
            ActionStep(
                id=self.id_factory("mindset"),
                description=description,
                timeframe=timeframe,
                category=ActionCategory.REFLECTION,
            )
            for description, timeframe in MINDSET_STEPS
        ]

    def _profile_building_steps(self, profile: UserProfile, now: datetime) -> Optional[list[ActionStep]]:
        completeness = self.profile_analyzer.check_profile_completeness(profile)
        if completeness.is_complete:
            return self._action_steps(profile, now)
        steps = [
            ActionStep(
                id=self.id_factory("profile"),
                description=PROFILE_STEPS[field],
                timeframe=Timeframe.TODAY,
                category=ActionCategory.REFLECTION,
            )
            for field in completeness.missing_fields
            if field in PROFILE_STEPS
        ]
        return steps or None

    def _run_engine(self, engine: str, func: Callable, *args) -> Any:
        """Call one engine; on failure log and return None so the field is omitted."""
        try:
            return func(*args)
        except Exception as e:
            self.logger.warning(
                "Engine failed, omitting its recommendations",
                engine=engine,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    async def _guarded(self, call: Awaitable[Any], default: Any, operation: str, log) -> Any:
        try:
            return await call
        except Exception as e:
            log.warning(
                "Data store call failed, continuing without it",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            return default

    async def _resolve_session(self, request: CoachingRequest, now: datetime) -> Session:
        if request.session_id is None:
            return await self.conversation_manager.start_session(request.user_id, now)
        session = self.conversation_manager.get_session(request.session_id)
        if session.user_id != request.user_id:
            raise SessionNotFoundError(request.session_id)
        return session

    async def _collect_profile(
        self, user_id: str, intent: Intent, profile: Optional[UserProfile], now: datetime, log
    ) -> UserProfile:
        collected = self.profile_analyzer.collect_profile_data(user_id, intent, profile, now)
        await self._guarded(self.data_store.save_user_profile(collected), None, "save_user_profile", log)
        return collected

    async def _remember_current_path(
        self, profile: Optional[UserProfile], recommendations: Recommendations, log
    ) -> None:
        if profile is None or profile.career_info.current_path is not None:
            return
        if not recommendations.career_paths:
            return
        profile.career_info.current_path = recommendations.career_paths[0]
        await self._guarded(self.data_store.save_user_profile(profile), None, "save_user_profile", log)
        log.info("Current career path set", user_id=profile.user_id, path=profile.career_info.current_path.title)

    def _complete_pending_action(self, session_id: Optional[str], action_id: str) -> Optional[ActionStep]:
        if session_id is None:
            return None
        context = self.conversation_manager.get_session_context(session_id)
        if context is None:
            return None
        for index, action in enumerate(context.pending_actions):
            if action.id == action_id:
                done = action.model_copy(update={"completed": True})
                context.pending_actions[index] = done
                return done
        return None

    async def _handle_error(
        self,
        error: Exception,
        request: CoachingRequest,
        session: Optional[Session],
        now: datetime,
    ) -> CoachingResponse:
        self.logger.error(
            "Coaching request failed, returning fallback response",
            user_id=request.user_id,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=True,
        )
        if session is None:
            session = await self.conversation_manager.start_session(request.user_id, now)
        return CoachingResponse(
            content=TECHNICAL_DIFFICULTY_FALLBACK,
            session_id=session.id,
            timestamp=now,
            intent=Intent(type=IntentType.PROFILE_BUILDING, confidence=0.5),
        )
