"""Action Step Generator.

Creates today / this-week / this-month action steps for a user's goals and
acknowledges completed ones.

Overload control: after generation each timeframe keeps at most 3 steps,
or 2 when the user has more than 2 active goals. Steps are kept in goal
priority order, so trimming drops the lowest-priority goals' steps first.

Example Usage:
    from worklife_coach.engines.action_steps import ActionStepGenerator

    generator = ActionStepGenerator(id_factory=SequentialIdFactory())
    steps = generator.generate_action_steps(profile, profile.career_info.goals, top_path, skills)
"""

from datetime import datetime
from typing import Optional

from worklife_coach.models.config import ActionStepConfig
from worklife_coach.models.profile import ChallengeType, Goal, GoalType, UserProfile, utc_now
from worklife_coach.models.recommendations import (
    ActionCategory,
    ActionStep,
    CareerPath,
    SkillRecommendation,
    Timeframe,
)
from worklife_coach.utils.dates import end_of_day, end_of_month, end_of_week
from worklife_coach.utils.ids import IdFactory, uuid_id_factory
from worklife_coach.utils.logger import get_logger

ALL_CATEGORIES = (
    ActionCategory.LEARNING,
    ActionCategory.NETWORKING,
    ActionCategory.APPLICATION,
    ActionCategory.REFLECTION,
)

TIMEFRAME_PREFERENCES: dict[Timeframe, tuple[ActionCategory, ...]] = {
    Timeframe.TODAY: (ActionCategory.REFLECTION, ActionCategory.APPLICATION),
    Timeframe.THIS_WEEK: (ActionCategory.NETWORKING, ActionCategory.APPLICATION),
    Timeframe.THIS_MONTH: (ActionCategory.LEARNING,),
}

# Generic steps, used when no goal, path or skill context applies.
FALLBACK_TEMPLATES: dict[ActionCategory, dict[Timeframe, str]] = {
    ActionCategory.LEARNING: {
        Timeframe.TODAY: "Identify one skill to focus on this week",
        Timeframe.THIS_WEEK: "Complete 2 hours of focused learning on your target skill",
        Timeframe.THIS_MONTH: "Complete a full online course or certification",
    },
    ActionCategory.NETWORKING: {
        Timeframe.TODAY: "Identify 3 people to connect with on LinkedIn",
        Timeframe.THIS_WEEK: "Reach out to 2 professionals for informational interviews",
        Timeframe.THIS_MONTH: "Conduct 3 informational interviews",
    },
    ActionCategory.APPLICATION: {
        Timeframe.TODAY: "Update your resume with recent accomplishments",
        Timeframe.THIS_WEEK: "Apply to 3 relevant opportunities",
        Timeframe.THIS_MONTH: "Apply to 10+ positions aligned with your goals",
    },
    ActionCategory.REFLECTION: {
        Timeframe.TODAY: "Write down 3 specific career goals",
        Timeframe.THIS_WEEK: "Reflect on what energizes you in your work",
        Timeframe.THIS_MONTH: "Create a detailed vision for your ideal career",
    },
}

CATEGORY_ACKNOWLEDGMENTS = {
    ActionCategory.LEARNING: "You're building valuable skills through your learning efforts.",
    ActionCategory.NETWORKING: "Your networking activities are expanding your professional connections.",
    ActionCategory.APPLICATION: "You're taking concrete steps toward your career goals.",
    ActionCategory.REFLECTION: "Your reflection work is helping you gain clarity on your path.",
}


def prioritize_goals(goals: list[Goal]) -> list[Goal]:
    """Priority descending, short-term before long-term, earlier target date first."""
    return sorted(
        goals,
        key=lambda g: (
            -g.priority,
            0 if g.type == GoalType.SHORT_TERM else 1,
            g.target_date is None,
            g.target_date.timestamp() if g.target_date else 0.0,
        ),
    )


def due_date_for(timeframe: Timeframe, now: datetime) -> datetime:
    if timeframe == Timeframe.TODAY:
        return end_of_day(now)
    if timeframe == Timeframe.THIS_WEEK:
        return end_of_week(now)
    return end_of_month(now)


class ActionStepGenerator:
    """Builds time-bound action steps."""

    def __init__(
        self,
        config: Optional[ActionStepConfig] = None,
        id_factory: Optional[IdFactory] = None,
    ):
        self.config = config or ActionStepConfig()
        self.id_factory = id_factory or uuid_id_factory
        self.logger = get_logger(
            correlation_id="action-step-generator",
            phase="recommendations",
            component="action_step_generator",
        )

    def generate_action_steps(
        self,
        profile: UserProfile,
        goals: list[Goal],
        career_path: Optional[CareerPath] = None,
        skill_recommendations: Optional[list[SkillRecommendation]] = None,
        now: Optional[datetime] = None,
    ) -> list[ActionStep]:
        """Generate up to one step per timeframe for each goal, then cap per timeframe.

        Args:
            profile: User profile (struggles steer categories)
            goals: Goals to plan for
            career_path: Names networking steps when given
            skill_recommendations: The top skill names learning steps when given
            now: Reference time for due dates (defaults to current UTC time)

        Returns:
            Steps grouped today, this week, this month; each bucket capped
        """
        now = now or utc_now()
        steps = []
        for goal in prioritize_goals(goals):
            categories = self.determine_categories(goal, profile)
            for timeframe in Timeframe:
                category = self.select_category(timeframe, categories)
                steps.append(
                    ActionStep(
                        id=self.id_factory("action"),
                        description=self.describe_step(
                            timeframe, category, goal, career_path, skill_recommendations
                        ),
                        timeframe=timeframe,
                        category=category,
                        due_date=due_date_for(timeframe, now),
                    )
                )

        active_goals = len({g.id for g in profile.career_info.goals} | {g.id for g in goals})
        balanced = self.balance_timeframes(steps, active_goals)
        self.logger.info(
            "Generated action steps",
            user_id=profile.user_id,
            goal_count=len(goals),
            generated=len(steps),
            kept=len(balanced),
        )
        return balanced

    def max_steps_per_timeframe(self, active_goals: int) -> int:
        if active_goals > self.config.overload_goal_threshold:
            return self.config.reduced_steps_per_timeframe
        return self.config.max_steps_per_timeframe

    def balance_timeframes(self, steps: list[ActionStep], active_goals: int) -> list[ActionStep]:
        cap = self.max_steps_per_timeframe(active_goals)
        balanced = []
        for timeframe in Timeframe:
            balanced.extend([s for s in steps if s.timeframe == timeframe][:cap])
        return balanced

    def determine_categories(self, goal: Goal, profile: UserProfile) -> list[ActionCategory]:
        text = goal.description.lower()
        struggle_types = {s.type for s in profile.career_info.struggles}
        categories = []

        if "learn" in text or "skill" in text or ChallengeType.SKILLS in struggle_types:
            categories.append(ActionCategory.LEARNING)
        if any(k in text for k in ("network", "connect", "mentor")):
            categories.append(ActionCategory.NETWORKING)
        if any(k in text for k in ("apply", "job", "project")) or goal.type == GoalType.SHORT_TERM:
            categories.append(ActionCategory.APPLICATION)
        if (
            struggle_types & {ChallengeType.DIRECTION, ChallengeType.CONFIDENCE}
            or "clarity" in text
            or "explore" in text
        ):
            categories.append(ActionCategory.REFLECTION)

        return categories or list(ALL_CATEGORIES)

    def select_category(
        self, timeframe: Timeframe, categories: list[ActionCategory]
    ) -> ActionCategory:
        for preferred in TIMEFRAME_PREFERENCES[timeframe]:
            if preferred in categories:
                return preferred
        return categories[0]

    def describe_step(
        self,
        timeframe: Timeframe,
        category: ActionCategory,
        goal: Goal,
        career_path: Optional[CareerPath],
        skill_recommendations: Optional[list[SkillRecommendation]],
    ) -> str:
        if category == ActionCategory.LEARNING and skill_recommendations:
            skill = skill_recommendations[0].skill
            return {
                Timeframe.TODAY: f"Research learning resources for {skill}",
                Timeframe.THIS_WEEK: f"Complete an introductory tutorial or course module on {skill}",
                Timeframe.THIS_MONTH: f"Dedicate 10 hours to learning {skill} through structured practice",
            }[timeframe]

        if category == ActionCategory.NETWORKING and career_path:
            title = career_path.title
            return {
                Timeframe.TODAY: f"Identify 3 professionals in {title} to connect with on LinkedIn",
                Timeframe.THIS_WEEK: f"Reach out to 2 people working in {title} for informational interviews",
                Timeframe.THIS_MONTH: f"Attend a virtual or in-person event related to {title}",
            }[timeframe]

        goal_text = goal.description
        if category == ActionCategory.APPLICATION:
            return {
                Timeframe.TODAY: f"Update your resume to highlight relevant experience for {goal_text}",
                Timeframe.THIS_WEEK: f"Apply to 3 opportunities aligned with {goal_text}",
                Timeframe.THIS_MONTH: f"Complete a portfolio project that demonstrates skills for {goal_text}",
            }[timeframe]

        if category == ActionCategory.REFLECTION:
            return {
                Timeframe.TODAY: f"Write down 3 specific outcomes you want from {goal_text}",
                Timeframe.THIS_WEEK: f"Reflect on your strengths and how they align with {goal_text}",
                Timeframe.THIS_MONTH: (
                    "Create a vision document outlining where you want to be in 6 months "
                    f"regarding {goal_text}"
                ),
            }[timeframe]

        return FALLBACK_TEMPLATES[category][timeframe]

    def generate_progress_acknowledgment(
        self, completed_steps: list[ActionStep], profile: UserProfile
    ) -> str:
        """Acknowledge completed steps; empty string when there are none."""
        if not completed_steps:
            return ""

        if len(completed_steps) == 1:
            parts = [f'Great work completing "{completed_steps[0].description}"!']
        else:
            parts = [f"Excellent progress! You've completed {len(completed_steps)} action steps."]

        completed_categories = {s.category for s in completed_steps}
        parts.extend(
            CATEGORY_ACKNOWLEDGMENTS[c] for c in ALL_CATEGORIES if c in completed_categories
        )

        new_ids = {s.id for s in completed_steps} - set(profile.progress.completed_actions)
        total = len(profile.progress.completed_actions) + len(new_ids)
        if total >= 10:
            parts.append(
                f"You've completed {total} total actions, and you're building real momentum!"
            )
        elif total >= 5:
            parts.append(f"You're building momentum with {total} completed actions.")

        return " ".join(parts)
