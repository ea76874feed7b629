"""Growth Plan Builder.

Builds a phased long-term plan toward a career path and re-derives it as
the user makes progress.

Phase layouts by mean transition time:
    <= 6 months   Foundation 0-3, Execution 3-6
    <= 12 months  Foundation 0-4, Development 4-8, Advancement 8-12
    longer        Foundation 0-6, Skill Building 6-12, Application 12-18, Mastery 18-24

Each phase ends in a milestone, but only milestones falling 3-12 months
after plan creation are kept. Every action in a phase links back to one of
that phase's objectives (see ``get_linked_objective``).
"""

import math
import re
from datetime import datetime
from typing import NamedTuple, Optional

from worklife_coach.models.config import GrowthPlanConfig
from worklife_coach.models.profile import UserProfile, utc_now
from worklife_coach.models.recommendations import (
    ActionCategory,
    ActionStep,
    CareerPath,
    GrowthPlan,
    Milestone,
    Phase,
    Timeframe,
)
from worklife_coach.utils.dates import add_months, parse_mean_months, within_month_band
from worklife_coach.utils.ids import IdFactory, uuid_id_factory
from worklife_coach.utils.logger import get_logger


class PhaseTemplate(NamedTuple):
    name: str
    start_month: int
    end_month: int

    @property
    def duration(self) -> str:
        return f"{self.start_month}-{self.end_month} months"


SHORT_LAYOUT = (PhaseTemplate("Foundation", 0, 3), PhaseTemplate("Execution", 3, 6))
MEDIUM_LAYOUT = (
    PhaseTemplate("Foundation", 0, 4),
    PhaseTemplate("Development", 4, 8),
    PhaseTemplate("Advancement", 8, 12),
)
LONG_LAYOUT = (
    PhaseTemplate("Foundation", 0, 6),
    PhaseTemplate("Skill Building", 6, 12),
    PhaseTemplate("Application", 12, 18),
    PhaseTemplate("Mastery", 18, 24),
)

STOPWORDS = frozenset({"the", "a", "an", "in", "on", "at", "to", "for", "of", "and", "or"})


def phase_layout(mean_months: float) -> tuple[PhaseTemplate, ...]:
    if mean_months <= 6:
        return SHORT_LAYOUT
    if mean_months <= 12:
        return MEDIUM_LAYOUT
    return LONG_LAYOUT


def phase_objectives(name: str, career_path: CareerPath) -> list[str]:
    lower = name.lower()
    if "foundation" in lower:
        return [
            f"Build foundational knowledge in {career_path.title}",
            "Establish learning routine and habits",
            "Connect with professionals in the field",
        ]
    if "development" in lower or "skill" in lower:
        return [
            "Develop core technical skills",
            "Complete practical projects",
            "Build portfolio of work",
        ]
    if "execution" in lower or "application" in lower:
        return [
            "Apply skills in real-world scenarios",
            "Gain practical experience",
            "Demonstrate competency to potential employers",
        ]
    if "advancement" in lower or "mastery" in lower:
        return [
            "Achieve proficiency in key skills",
            "Transition into target role",
            "Establish yourself in the new career path",
        ]
    return [f"Make steady progress toward {career_path.title}"]


def phase_skills(name: str, skills: list[str]) -> list[str]:
    """Slice required skills by phase position: first, middle or final third."""
    lower = name.lower()
    n = len(skills)
    if "foundation" in lower:
        return skills[: math.ceil(n / 3)]
    if "development" in lower or "skill" in lower or "execution" in lower:
        return skills[n // 3 : math.ceil(2 * n / 3)]
    return skills[math.ceil(2 * n / 3) :]


def significant_words(text: str) -> set[str]:
    return {w for w in re.split(r"\s+", text.lower().strip()) if len(w) > 3 and w not in STOPWORDS}


def action_matches_objective(action: ActionStep, objective: str) -> bool:
    action_text = action.description.lower().strip()
    objective_text = objective.lower().strip()
    if action_text in objective_text or objective_text in action_text:
        return True
    return len(significant_words(action_text) & significant_words(objective_text)) >= 2


class GrowthPlanBuilder:
    """Builds and adapts growth plans."""

    def __init__(
        self,
        config: Optional[GrowthPlanConfig] = None,
        id_factory: Optional[IdFactory] = None,
    ):
        self.config = config or GrowthPlanConfig()
        self.id_factory = id_factory or uuid_id_factory
        self.logger = get_logger(
            correlation_id="growth-plan-builder",
            phase="recommendations",
            component="growth_plan_builder",
        )

    def build_growth_plan(
        self, profile: UserProfile, career_path: CareerPath, now: Optional[datetime] = None
    ) -> GrowthPlan:
        """Build a phased plan toward ``career_path`` starting at ``now``."""
        now = now or utc_now()
        layout = phase_layout(parse_mean_months(career_path.time_to_transition))
        phases = [self._create_phase(t, career_path, now) for t in layout]
        milestones = self._create_milestones(layout, phases, now)

        plan = GrowthPlan(
            id=self.id_factory("plan"),
            user_id=profile.user_id,
            career_path=career_path,
            timeline=career_path.time_to_transition,
            phases=phases,
            milestones=milestones,
            created_at=now,
            last_updated=now,
        )
        self.logger.info(
            "Built growth plan",
            user_id=profile.user_id,
            career_path=career_path.title,
            phase_count=len(phases),
            milestone_count=len(milestones),
        )
        return plan

    def adapt_growth_plan(
        self, plan: GrowthPlan, profile: UserProfile, now: Optional[datetime] = None
    ) -> GrowthPlan:
        """Re-derive a plan from updated profile progress.

        - Milestones completed in the profile are marked complete.
        - Incomplete past-due milestones move to now + 3 months, but only when
          that date still falls 3-12 months after plan creation.
        - Actions whose ids are in the profile's completed actions are marked complete.
        """
        now = now or utc_now()
        completed_milestone_ids = {m.id for m in profile.progress.milestones if m.completed}
        completed_actions = set(profile.progress.completed_actions)

        milestones = []
        for milestone in plan.milestones:
            if milestone.id in completed_milestone_ids and not milestone.completed:
                milestone = milestone.model_copy(update={"completed": True, "completed_date": now})
            elif not milestone.completed and milestone.target_date < now:
                pushed = add_months(now, self.config.milestone_push_months)
                if self._in_band(plan.created_at, pushed):
                    milestone = milestone.model_copy(update={"target_date": pushed})
                else:
                    self.logger.info(
                        "Past-due milestone left in place, new date outside plan window",
                        milestone_id=milestone.id,
                    )
            milestones.append(milestone)

        phases = [
            phase.model_copy(
                update={
                    "actions": [
                        a.model_copy(update={"completed": a.id in completed_actions})
                        for a in phase.actions
                    ]
                }
            )
            for phase in plan.phases
        ]

        return plan.model_copy(
            update={"milestones": milestones, "phases": phases, "last_updated": max(now, plan.last_updated)}
        )

    def get_linked_objective(self, action: ActionStep, plan: GrowthPlan) -> Optional[str]:
        """Objective of the action's own phase that the action serves.

        Exact description match first, then substring or two shared
        significant words, then the phase's first objective. None only for
        actions that are not part of the plan.
        """
        for phase in plan.phases:
            if not any(a.id == action.id for a in phase.actions):
                continue
            if action.description in phase.objectives:
                return action.description
            for objective in phase.objectives:
                if action_matches_objective(action, objective):
                    return objective
            return phase.objectives[0]
        return None

    def validate_action_objective_linkage(self, plan: GrowthPlan) -> tuple[bool, list[str]]:
        unlinked = [
            action.id
            for phase in plan.phases
            for action in phase.actions
            if self.get_linked_objective(action, plan) is None
        ]
        return not unlinked, unlinked

    def validate_growth_plan_timeline(self, plan: GrowthPlan) -> list[str]:
        """Ids of milestones whose target date falls outside the 3-12 month band."""
        return [m.id for m in plan.milestones if not self._in_band(plan.created_at, m.target_date)]

    def _in_band(self, created_at: datetime, moment: datetime) -> bool:
        return within_month_band(
            created_at, moment, self.config.milestone_min_months, self.config.milestone_max_months
        )

    def _create_phase(self, template: PhaseTemplate, career_path: CareerPath, start: datetime) -> Phase:
        objectives = phase_objectives(template.name, career_path)
        skills = phase_skills(template.name, list(career_path.required_skills))

        actions = [
            ActionStep(
                id=self.id_factory("action"),
                description=objective,
                timeframe=Timeframe.THIS_MONTH,
                category=ActionCategory.LEARNING,
                due_date=add_months(start, template.start_month + index),
            )
            for index, objective in enumerate(objectives)
        ]
        actions.extend(
            ActionStep(
                id=self.id_factory("action"),
                description=f"Learn and practice {skill}",
                timeframe=Timeframe.THIS_MONTH,
                category=ActionCategory.LEARNING,
                due_date=add_months(start, template.start_month + index // 2),
            )
            for index, skill in enumerate(skills)
        )

        return Phase(
            name=template.name,
            duration=template.duration,
            objectives=objectives,
            skills=skills,
            actions=actions,
        )

    def _create_milestones(
        self, layout: tuple[PhaseTemplate, ...], phases: list[Phase], start: datetime
    ) -> list[Milestone]:
        milestones = []
        for template, phase in zip(layout, phases):
            target = add_months(start, template.end_month)
            if not self._in_band(start, target):
                continue
            milestones.append(
                Milestone(
                    id=self.id_factory("milestone"),
                    title=f"Complete {phase.name} Phase",
                    description=(
                        f"Successfully complete all objectives in the {phase.name} phase: "
                        + ", ".join(phase.objectives)
                    ),
                    target_date=target,
                )
            )
        return milestones
