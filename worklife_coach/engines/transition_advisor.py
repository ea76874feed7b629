"""Transition Advisor.

Plans a move from one career field to another: what transfers, what has to
be learned, how hard and how long the move is, and the phases to get there.

Difficulty score:
    0.3 * (1 - average transferability)
  + 0.4 * (skills to acquire / target core skills)
  + 0.3 * (1 - source/target core skill overlap)

Below 0.4 is easy (one phase), below 0.7 moderate (two phases), otherwise
challenging (three phases).
"""

from typing import NamedTuple, Optional

from worklife_coach.models.knowledge import FieldMetadata, KnowledgeBase, default_knowledge_base
from worklife_coach.models.profile import UserProfile
from worklife_coach.models.recommendations import (
    ActionCategory,
    ActionStep,
    DifficultyLevel,
    SkillRecommendation,
    Timeframe,
    TransferableSkill,
    TransitionPhase,
    TransitionPlan,
)
from worklife_coach.utils.ids import IdFactory, uuid_id_factory
from worklife_coach.utils.logger import get_logger

BASE_MONTHS = {
    DifficultyLevel.EASY: 6,
    DifficultyLevel.MODERATE: 12,
    DifficultyLevel.CHALLENGING: 18,
}
EASY_MAX_MONTHS = 18
CHALLENGING_MIN_MAX_MONTHS = 15

COMPLEX_SKILLS = ("machine learning", "system design", "statistics")
MODERATE_SKILLS = ("programming", "python", "javascript", "user research", "product strategy")


class TransferScore(NamedTuple):
    transferability: float
    relevance: float


class PhaseSpec(NamedTuple):
    name: str
    duration: str
    focus: str
    stage: str
    success_criteria: tuple[str, ...]


EASY_PHASES = (
    PhaseSpec(
        "Skill Development and Transition",
        "3-6 months",
        "Acquire core skills and begin applying to target roles",
        "early",
        (
            "Complete learning for core skills",
            "Build portfolio projects demonstrating new skills",
            "Network with professionals in target field",
            "Apply to entry-level positions in target field",
        ),
    ),
)

MODERATE_PHASES = (
    PhaseSpec(
        "Foundation Building",
        "4-6 months",
        "Learn fundamental skills required for target field",
        "early",
        (
            "Complete foundational skill training",
            "Build 2-3 portfolio projects",
            "Join relevant professional communities",
            "Identify potential mentors in target field",
        ),
    ),
    PhaseSpec(
        "Transition and Application",
        "4-6 months",
        "Apply skills and actively pursue opportunities",
        "late",
        (
            "Complete advanced skill development",
            "Build comprehensive portfolio",
            "Conduct informational interviews",
            "Apply to target roles and secure interviews",
        ),
    ),
)

CHALLENGING_PHASES = (
    PhaseSpec(
        "Exploration and Foundation",
        "4-6 months",
        "Understand target field and build foundational knowledge",
        "early",
        (
            "Complete introductory courses in target field",
            "Understand industry landscape and key players",
            "Identify specific role targets within field",
            "Begin building foundational skills",
        ),
    ),
    PhaseSpec(
        "Skill Development",
        "6-9 months",
        "Intensive skill building and practical application",
        "middle",
        (
            "Achieve proficiency in core technical skills",
            "Complete multiple portfolio projects",
            "Contribute to open source or volunteer projects",
            "Build network in target field",
        ),
    ),
    PhaseSpec(
        "Transition Execution",
        "3-6 months",
        "Active job search and transition to new role",
        "late",
        (
            "Polish portfolio and professional materials",
            "Conduct targeted job search",
            "Leverage network for opportunities",
            "Successfully transition to new role",
        ),
    ),
)

PHASES_BY_DIFFICULTY = {
    DifficultyLevel.EASY: EASY_PHASES,
    DifficultyLevel.MODERATE: MODERATE_PHASES,
    DifficultyLevel.CHALLENGING: CHALLENGING_PHASES,
}

STAGE_ACTIONS: dict[str, tuple[tuple[str, Timeframe, ActionCategory], ...]] = {
    "early": (
        ("Research target field and identify key companies", Timeframe.THIS_WEEK, ActionCategory.REFLECTION),
        ("Join online communities in target field", Timeframe.THIS_MONTH, ActionCategory.NETWORKING),
    ),
    "middle": (
        ("Complete intermediate skill courses", Timeframe.THIS_MONTH, ActionCategory.LEARNING),
        ("Build portfolio project showcasing new skills", Timeframe.THIS_MONTH, ActionCategory.APPLICATION),
        ("Attend industry events or webinars", Timeframe.THIS_MONTH, ActionCategory.NETWORKING),
    ),
    "late": (
        ("Update resume highlighting transferable skills", Timeframe.THIS_WEEK, ActionCategory.APPLICATION),
        (
            "Conduct informational interviews with target field professionals",
            Timeframe.THIS_MONTH,
            ActionCategory.NETWORKING,
        ),
        ("Apply to entry-level or transition roles", Timeframe.THIS_MONTH, ActionCategory.APPLICATION),
    ),
}


def skills_overlap(a: str, b: str) -> bool:
    a, b = a.lower(), b.lower()
    return a == b or a in b or b in a


def estimate_skill_learning_time(skill: str) -> str:
    lower = skill.lower()
    if any(s in lower for s in COMPLEX_SKILLS):
        return "6-9 months"
    if any(s in lower for s in MODERATE_SKILLS):
        return "4-6 months"
    return "2-4 months"


def average_transferability(skills: list[TransferableSkill]) -> float:
    if not skills:
        return 0.0
    return sum(s.transferability for s in skills) / len(skills)


class TransitionAdvisor:
    """Builds field-to-field transition plans."""

    def __init__(
        self,
        knowledge_base: Optional[KnowledgeBase] = None,
        id_factory: Optional[IdFactory] = None,
    ):
        self.kb = knowledge_base or default_knowledge_base()
        self.id_factory = id_factory or uuid_id_factory
        self.logger = get_logger(
            correlation_id="transition-advisor",
            phase="recommendations",
            component="transition_advisor",
        )

    def generate_transition_plan(
        self, source_field: str, target_field: str, profile: UserProfile
    ) -> TransitionPlan:
        """Plan a transition between two fields.

        Args:
            source_field: Field the user is leaving
            target_field: Field the user wants to enter
            profile: User profile (current skills, experience, motivation, goals)

        Returns:
            TransitionPlan with one to three phases depending on difficulty
        """
        source = self.kb.field_metadata(source_field)
        target = self.kb.field_metadata(target_field)

        transferable = self.identify_transferable_skills(profile, source, target)
        to_acquire = self.identify_skills_to_acquire(profile, target)
        difficulty = self.assess_difficulty(transferable, to_acquire, source, target)

        plan = TransitionPlan(
            source_field=source_field,
            target_field=target_field,
            transferable_skills=transferable,
            skills_to_acquire=to_acquire,
            phases=self.generate_phases(difficulty, to_acquire),
            estimated_duration=self.estimate_duration(difficulty, to_acquire, profile),
            difficulty_level=difficulty,
            risks=self.identify_risks(difficulty, transferable, to_acquire, profile),
            success_factors=self.identify_success_factors(transferable, profile),
        )
        self.logger.info(
            "Generated transition plan",
            user_id=profile.user_id,
            source_field=source_field,
            target_field=target_field,
            difficulty=difficulty.value,
            duration=plan.estimated_duration,
        )
        return plan

    def identify_transferable_skills(
        self, profile: UserProfile, source: FieldMetadata, target: FieldMetadata
    ) -> list[TransferableSkill]:
        transferable = []
        for skill in profile.skills.current:
            score = self._transfer_score(skill.name, source, target)
            transferability = score.transferability * min(skill.level / 5, 1.0)
            if transferability > 0.3 or score.relevance > 0.4:
                transferable.append(
                    TransferableSkill(
                        skill=skill.name,
                        current_level=skill.level,
                        transferability=transferability,
                        relevance_to_target=score.relevance,
                    )
                )
        transferable.sort(key=lambda s: (s.transferability + s.relevance_to_target) / 2, reverse=True)
        return transferable

    def identify_skills_to_acquire(
        self, profile: UserProfile, target: FieldMetadata
    ) -> list[SkillRecommendation]:
        """Target core skills the user lacks, in core-skill order.

        Priority steps down from 1.0 by 0.04 per position (floor 0.8) so that
        core-skill order is kept and results are repeatable.
        """
        current = [s.name for s in profile.skills.current]
        missing = [
            skill for skill in target.core_skills if not any(skills_overlap(skill, c) for c in current)
        ]

        recommendations = []
        for index, skill in enumerate(missing):
            metadata = self.kb.find_skill(skill)
            recommendations.append(
                SkillRecommendation(
                    skill=skill,
                    priority=max(1.0 - 0.04 * index, 0.8),
                    reasoning=(
                        f"{skill} is a core skill for {target.name} and essential "
                        "for successful transition"
                    ),
                    learning_resources=list(self.kb.resources_for(skill)),
                    estimated_time=estimate_skill_learning_time(skill),
                    dependencies=[
                        d for d in (metadata.dependencies if metadata else ()) if d.lower() != skill.lower()
                    ],
                )
            )
        return recommendations

    def assess_difficulty(
        self,
        transferable: list[TransferableSkill],
        to_acquire: list[SkillRecommendation],
        source: FieldMetadata,
        target: FieldMetadata,
    ) -> DifficultyLevel:
        core_count = max(len(target.core_skills), 1)
        gap_ratio = len(to_acquire) / core_count
        common = [s for s in source.core_skills if any(skills_overlap(s, t) for t in target.core_skills)]
        similarity = len(common) / core_count

        score = (
            (1 - average_transferability(transferable)) * 0.3
            + gap_ratio * 0.4
            + (1 - similarity) * 0.3
        )
        if score < 0.4:
            return DifficultyLevel.EASY
        if score < 0.7:
            return DifficultyLevel.MODERATE
        return DifficultyLevel.CHALLENGING

    def estimate_duration(
        self,
        difficulty: DifficultyLevel,
        to_acquire: list[SkillRecommendation],
        profile: UserProfile,
    ) -> str:
        """Range string centred on the adjusted month count, +/- 3 months.

        Easy transitions top out at 18 months; challenging ones reach at
        least 15.
        """
        total = BASE_MONTHS[difficulty] + min(len(to_acquire) * 2, 12)
        years = profile.personal_info.years_of_experience
        multiplier = 0.8 if years >= 5 else 0.9 if years >= 3 else 1.0
        adjusted = round(total * multiplier)

        min_months = max(adjusted - 3, 3)
        max_months = adjusted + 3
        if difficulty == DifficultyLevel.EASY:
            max_months = min(max_months, EASY_MAX_MONTHS)
        elif difficulty == DifficultyLevel.CHALLENGING:
            max_months = max(max_months, CHALLENGING_MIN_MAX_MONTHS)
        min_months = min(min_months, max_months)
        return f"{min_months}-{max_months} months"

    def generate_phases(
        self, difficulty: DifficultyLevel, to_acquire: list[SkillRecommendation]
    ) -> list[TransitionPhase]:
        return [
            TransitionPhase(
                name=spec.name,
                duration=spec.duration,
                focus=spec.focus,
                actions=self._phase_actions(spec.stage, to_acquire),
                success_criteria=list(spec.success_criteria),
            )
            for spec in PHASES_BY_DIFFICULTY[difficulty]
        ]

    def identify_risks(
        self,
        difficulty: DifficultyLevel,
        transferable: list[TransferableSkill],
        to_acquire: list[SkillRecommendation],
        profile: UserProfile,
    ) -> list[str]:
        risks = []
        if difficulty == DifficultyLevel.CHALLENGING:
            risks.append("Significant time investment required (18+ months)")
            risks.append("May need to accept entry-level position despite experience")
        elif difficulty == DifficultyLevel.MODERATE:
            risks.append("Moderate time commitment (12+ months) required")

        if len(to_acquire) >= 5:
            risks.append("Large skill gap requires substantial learning effort")
        if average_transferability(transferable) < 0.5:
            risks.append("Limited skill transferability may require starting from basics")
        if profile.personal_info.years_of_experience < 2:
            risks.append("Limited work experience may make transition more challenging")

        risks.append("Potential salary reduction during transition period")
        risks.append("Competitive job market for career changers")
        return risks

    def identify_success_factors(
        self, transferable: list[TransferableSkill], profile: UserProfile
    ) -> list[str]:
        factors = []
        strong = [s.skill for s in transferable if s.transferability >= 0.7]
        if strong:
            factors.append(f"Strong transferable skills: {', '.join(strong[:3])}")
        if profile.personal_info.years_of_experience >= 3:
            factors.append("Solid work experience demonstrates professionalism and work ethic")
        if profile.mindset.motivation_level >= 0.7:
            factors.append("High motivation level supports sustained learning effort")
        if profile.career_info.goals:
            factors.append("Clear goals provide direction and focus")

        factors.append("Networking and building relationships in target field")
        factors.append("Demonstrating passion and commitment through projects and learning")
        factors.append("Leveraging unique perspective from previous field")
        return factors

    def _transfer_score(
        self, skill_name: str, source: FieldMetadata, target: FieldMetadata
    ) -> TransferScore:
        if any(skills_overlap(skill_name, s) for s in target.core_skills):
            return TransferScore(1.0, 1.0)
        if self.kb.is_universal(skill_name):
            return TransferScore(0.9, 0.7)
        if any(skills_overlap(skill_name, s) for s in source.core_skills):
            return TransferScore(0.3, 0.4)
        return TransferScore(0.6, 0.5)

    def _phase_actions(self, stage: str, to_acquire: list[SkillRecommendation]) -> list[ActionStep]:
        templates = list(STAGE_ACTIONS[stage])
        if stage == "early" and to_acquire:
            templates.insert(
                0, (f"Begin learning {to_acquire[0].skill}", Timeframe.THIS_WEEK, ActionCategory.LEARNING)
            )
        return [
            ActionStep(
                id=self.id_factory("action"),
                description=description,
                timeframe=timeframe,
                category=category,
            )
            for description, timeframe, category in templates
        ]
