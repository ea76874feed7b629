"""Response Formatter.

Turns engine output into conversational text. One recommendation type leads
each reply, in fixed priority:

    transition plan > growth plan > career paths > skills > actions

In-role growth guidance is appended after the lead section. Every reply
carries an actionable element (a question, a recommendation verb or a next
step); when a section does not, a generic next-step question is appended.
"""

from datetime import datetime
from typing import Optional

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel

from worklife_coach.models.conversation import Recommendations
from worklife_coach.models.intent import IntentType
from worklife_coach.models.profile import GoalType, UserProfile, utc_now
from worklife_coach.models.recommendations import (
    ActionStep,
    CareerPath,
    GrowthPlan,
    InRoleGrowthAnalysis,
    SkillRecommendation,
    Timeframe,
    TransitionPlan,
)
from worklife_coach.utils.errors import FORMATTING_FALLBACK
from worklife_coach.utils.logger import get_logger

ACTIONABLE_MARKERS = (
    "?",
    "recommend",
    "suggest",
    "try",
    "start",
    "consider",
    "next step",
    "action",
    "do this",
    "focus on",
)

GENERIC_NEXT_STEP = "What would you like to focus on next?"

TIMEFRAME_HEADINGS = {
    Timeframe.TODAY: "Today",
    Timeframe.THIS_WEEK: "This Week",
    Timeframe.THIS_MONTH: "This Month",
}


class ResponseContext(BaseModel):
    intent: Optional[IntentType] = None
    profile: Optional[UserProfile] = None
    is_returning_user: bool = False
    has_progress: bool = False


def has_actionable_element(content: str) -> bool:
    lower = content.lower()
    return any(marker in lower for marker in ACTIONABLE_MARKERS)


def months_until(target: datetime, now: datetime) -> int:
    delta = relativedelta(target, now)
    return max(0, delta.years * 12 + delta.months)


class ResponseFormatter:
    """Formats recommendations as chat replies."""

    def __init__(self):
        self.logger = get_logger(
            correlation_id="response-formatter",
            phase="conversation",
            component="response_formatter",
        )

    def format_career_paths(self, paths: list[CareerPath]) -> str:
        if not paths:
            return (
                "I'd like to learn more about your background and interests to provide "
                "better career guidance. What kind of work energizes you?"
            )

        if len(paths) == 1:
            path = paths[0]
            return (
                f"Based on your profile, I recommend exploring **{path.title}**. {path.reasoning}\n\n"
                f"This path aligns well with your background (fit score: {round(path.fit_score * 100)}%).\n\n"
                "Next step: Let's identify the key skills you'll need for this path. Ready?"
            )

        lines = [f"I see {len(paths)} promising career paths for you:", ""]
        for index, path in enumerate(paths, start=1):
            lines.append(f"{index}. **{path.title}** (fit: {round(path.fit_score * 100)}%)")
            lines.append(f"   {path.reasoning}")
            lines.append("")
        lines.append("Which of these resonates most with you? I can dive deeper into any of them.")
        return "\n".join(lines)

    def format_skill_recommendations(
        self, skills: list[SkillRecommendation], profile: Optional[UserProfile] = None
    ) -> str:
        if not skills:
            return (
                "Let's first clarify your career direction so I can recommend the most "
                "relevant skills."
            )

        top = skills[0]
        if len(skills) == 1:
            return (
                f"The most impactful skill for you to develop right now is **{top.skill}**. "
                f"{top.reasoning}\nEstimated learning time: {top.estimated_time}.\n"
                "Would you like specific resources to get started?"
            )

        lines = ["Here are the key skills I recommend, prioritized by impact:", ""]
        for index, skill in enumerate(skills[:3], start=1):
            lines.append(f"{index}. **{skill.skill}** (priority: {skill.priority:.2f})")
            lines.append(f"   {skill.reasoning}")
            lines.append(f"   Time: {skill.estimated_time}")
            lines.append("")

        if profile and any(g.type == GoalType.SHORT_TERM for g in profile.career_info.goals):
            lines.append(f"Given your timeline, I'd suggest starting with **{top.skill}** for maximum impact.")
        return "\n".join(lines).rstrip()

    def format_action_steps(self, actions: list[ActionStep]) -> str:
        if not actions:
            return "Let's identify some concrete steps you can take. What's your biggest priority right now?"

        lines = ["Here are your next steps:", ""]
        for timeframe, heading in TIMEFRAME_HEADINGS.items():
            bucket = [a for a in actions if a.timeframe == timeframe]
            if not bucket:
                continue
            lines.append(f"**{heading}:**")
            lines.extend(f"- {a.description}" for a in bucket)
            lines.append("")
        lines.append(
            "Start with the 'today' items - small wins build momentum. Let me know when you complete them!"
        )
        return "\n".join(lines)

    def format_growth_plan(self, plan: GrowthPlan, now: Optional[datetime] = None) -> str:
        now = now or utc_now()
        lines = [
            f"I've created a {plan.timeline} growth plan for your journey toward "
            f"**{plan.career_path.title}**.",
            "",
        ]

        if plan.milestones:
            lines.append("**Key Milestones:**")
            for index, milestone in enumerate(plan.milestones[:3], start=1):
                lines.append(f"{index}. {milestone.title} ({months_until(milestone.target_date, now)} months)")
                lines.append(f"   {milestone.description}")
            lines.append("")

        first = plan.phases[0]
        lines.append(f"**Your First Phase: {first.name}** ({first.duration})")
        lines.append(f"Focus: {', '.join(first.objectives)}")
        if first.actions:
            lines.append("")
            lines.append("Immediate actions:")
            lines.extend(f"- {a.description}" for a in first.actions[:2])

        lines.append("")
        lines.append("This plan connects your daily actions to your long-term goals. Ready to get started?")
        return "\n".join(lines)

    def format_transition_plan(self, plan: TransitionPlan) -> str:
        lines = [f"Let's map out your transition from **{plan.source_field}** to **{plan.target_field}**.", ""]

        if plan.transferable_skills:
            lines.append("**Good news:** You already have valuable transferable skills:")
            lines.extend(f"- {s.skill}" for s in plan.transferable_skills[:3])
            lines.append("")

        if plan.skills_to_acquire:
            lines.append("**Skills to develop:**")
            lines.extend(f"- {s.skill}: {s.reasoning}" for s in plan.skills_to_acquire[:3])
            lines.append("")

        lines.append(f"**Timeline:** {plan.estimated_duration} ({plan.difficulty_level.value} transition)")
        lines.append("")

        first = plan.phases[0]
        lines.append(f"**Phase 1: {first.name}** ({first.duration})")
        lines.append(first.focus)
        if first.actions:
            lines.append("")
            lines.append("First steps:")
            lines.extend(f"- {a.description}" for a in first.actions[:2])

        lines.append("")
        lines.append("This is a realistic path forward. Shall we start with Phase 1?")
        return "\n".join(lines)

    def format_in_role_growth(self, analysis: InRoleGrowthAnalysis) -> str:
        role = analysis.current_role or "your current role"
        lines = [f"Here's how you can grow within {role}:", ""]
        for opportunity in analysis.opportunities[:3]:
            lines.append(f"- **{opportunity.title}**: {opportunity.description}")

        if analysis.employer_relevant_skills:
            lines.append("")
            lines.append("Skills your employer is likely to value:")
            lines.extend(
                f"- {s.skill}: {s.reasoning}" for s in analysis.employer_relevant_skills[:2]
            )

        stagnation = analysis.stagnation_assessment
        if stagnation is not None:
            lines.append("")
            lines.append(stagnation.honest_assessment)
            if analysis.alternative_paths:
                titles = ", ".join(p.title for p in analysis.alternative_paths[:3])
                lines.append(f"Options worth considering: {titles}.")
        return "\n".join(lines)

    def format_progress_acknowledgment(self, completed_count: int) -> str:
        if completed_count <= 0:
            return ""
        if completed_count == 1:
            return "Great work completing your last action!"
        return f"Excellent progress! You've completed {completed_count} action items."

    def ensure_actionable(self, content: str, recommendations: Optional[Recommendations] = None) -> str:
        """Append a concrete next step or question when ``content`` has none."""
        if has_actionable_element(content):
            return content

        if recommendations is not None:
            if recommendations.actions:
                return f"{content}\n\nNext step: {recommendations.actions[0].description}"
            if recommendations.skills:
                return (
                    f"{content}\n\nI recommend focusing on {recommendations.skills[0].skill} "
                    "as your next learning priority."
                )
            if recommendations.career_paths:
                return (
                    f"{content}\n\nShall we explore the {recommendations.career_paths[0].title} "
                    "path in more detail?"
                )

        if not content.strip():
            return GENERIC_NEXT_STEP
        return f"{content}\n\n{GENERIC_NEXT_STEP}"

    def format_general_response(
        self, message: str, recommendations: Optional[Recommendations] = None
    ) -> str:
        try:
            return self.ensure_actionable(message, recommendations)
        except Exception as e:
            self.logger.error("Failed to format general response", error=str(e))
            return FORMATTING_FALLBACK

    def format_combined_response(
        self,
        recommendations: Recommendations,
        context: Optional[ResponseContext] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """Lead with the highest-priority recommendation present.

        Args:
            recommendations: Engine output for the turn; missing fields are skipped
            context: Returning-user progress and profile details
            now: Reference time for milestone distances

        Returns:
            Non-empty reply text with an actionable element; the fixed
            fallback text if formatting fails
        """
        context = context or ResponseContext()
        try:
            sections = []
            if context.has_progress and context.profile is not None:
                acknowledgment = self.format_progress_acknowledgment(
                    len(context.profile.progress.completed_actions)
                )
                if acknowledgment:
                    sections.append(acknowledgment)

            lead = self._lead_section(recommendations, context, now)
            if lead:
                sections.append(lead)
            if recommendations.in_role_growth is not None:
                sections.append(self.format_in_role_growth(recommendations.in_role_growth))

            return self.ensure_actionable("\n\n".join(sections), recommendations)
        except Exception as e:
            self.logger.error(
                "Failed to format combined response",
                error=str(e),
                error_type=type(e).__name__,
            )
            return FORMATTING_FALLBACK

    def _lead_section(
        self, recommendations: Recommendations, context: ResponseContext, now: Optional[datetime]
    ) -> str:
        if recommendations.transition_plan is not None:
            return self.format_transition_plan(recommendations.transition_plan)
        if recommendations.growth_plan is not None:
            return self.format_growth_plan(recommendations.growth_plan, now)
        if recommendations.career_paths:
            return self.format_career_paths(recommendations.career_paths)
        if recommendations.skills:
            return self.format_skill_recommendations(recommendations.skills, context.profile)
        if recommendations.actions:
            return self.format_action_steps(recommendations.actions)
        return ""
