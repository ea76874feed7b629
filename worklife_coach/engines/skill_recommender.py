"""Skill Recommender.

Turns the skill gaps between a profile and a career path into prioritized,
dependency-ordered skill recommendations.

Priority:
    0.4 * impact
  + 0.3 * (target level - current level) / 10
  + 0.2 * (1 - min(learning months / 12, 1))
  + 0.1 * (1 - min(dependency count / 5, 1))

Ordering is a layered topological sort: each round takes every remaining
skill whose in-list dependencies are already placed, highest priority first.
A round with nothing ready means a cycle; the highest-priority remaining
skill is then placed on its own. Every skill leaves the pool exactly once,
so the loop always terminates. A dependency names an in-list skill when
either name contains the other, ignoring case.
"""

import math
from typing import NamedTuple, Optional

from worklife_coach.models.knowledge import KnowledgeBase, SkillMetadata, default_knowledge_base
from worklife_coach.models.profile import UserProfile
from worklife_coach.models.recommendations import CareerPath, SkillRecommendation
from worklife_coach.utils.logger import get_logger

DEFAULT_TARGET_LEVEL = 5.0


class SkillGap(NamedTuple):
    skill: str
    current_level: float
    target_level: float
    estimated_learning_time: str

    @property
    def size(self) -> float:
        return self.target_level - self.current_level


class ScoredSkill(NamedTuple):
    gap: SkillGap
    metadata: SkillMetadata
    priority: float


def names_match(a: str, b: str) -> bool:
    """Case-insensitive match where either skill name may contain the other."""
    a, b = a.lower(), b.lower()
    return a == b or a in b or b in a


def estimate_learning_time(level_gap: float, base_months: int) -> str:
    months = math.ceil(level_gap / 5 * base_months)
    if months <= 1:
        return "2-4 weeks"
    if months <= 6:
        return f"{months} months"
    return f"{months}-{months + 3} months"


class SkillRecommender:
    """Recommends what to learn next for a career path."""

    def __init__(self, knowledge_base: Optional[KnowledgeBase] = None):
        self.kb = knowledge_base or default_knowledge_base()
        self.logger = get_logger(
            correlation_id="skill-recommender",
            phase="recommendations",
            component="skill_recommender",
        )

    def recommend_skills(
        self, profile: UserProfile, career_path: CareerPath
    ) -> list[SkillRecommendation]:
        """Recommend skills for ``career_path``, prerequisites first.

        Args:
            profile: User profile (current and target skills are read)
            career_path: Target path whose required skills define the gaps

        Returns:
            Recommendations where every dependency that is itself recommended
            appears earlier in the list. Deterministic for identical inputs.
        """
        scored = []
        for gap in self.identify_skill_gaps(profile, career_path):
            metadata = self.kb.skill_metadata(gap.skill)
            scored.append(ScoredSkill(gap, metadata, self.calculate_priority(gap, metadata)))

        scored.sort(key=lambda s: s.priority, reverse=True)
        ordered = self.order_by_dependencies(scored)

        recommendations = [
            SkillRecommendation(
                skill=s.gap.skill,
                priority=s.priority,
                reasoning=self.generate_reasoning(s.gap, s.metadata, career_path),
                learning_resources=list(s.metadata.resources),
                estimated_time=s.gap.estimated_learning_time,
                dependencies=self._own_dependencies(s),
            )
            for s in ordered
        ]
        self.logger.info(
            "Recommended skills",
            user_id=profile.user_id,
            career_path=career_path.title,
            skill_count=len(recommendations),
        )
        return recommendations

    def get_highest_impact_skill(
        self, profile: UserProfile, career_path: CareerPath
    ) -> Optional[SkillRecommendation]:
        """Best recommendation the user can start now.

        Returns the highest-priority recommendation whose dependencies are all
        covered by current or learning skills, else the first recommendation,
        else None when there is nothing to recommend.
        """
        recommendations = self.recommend_skills(profile, career_path)
        if not recommendations:
            return None

        known = profile.all_skill_names()

        def satisfied(dependency: str) -> bool:
            return any(names_match(dependency, k) for k in known)

        startable = [r for r in recommendations if all(satisfied(d) for d in r.dependencies)]
        if startable:
            return max(startable, key=lambda r: r.priority)
        return recommendations[0]

    def identify_skill_gaps(self, profile: UserProfile, career_path: CareerPath) -> list[SkillGap]:
        """Required and target skills the user has below target level.

        Current levels come from a case-insensitive substring match against
        current skills; target levels from the matching target skill, else 5.
        """
        names: dict[str, str] = {}
        for name in list(career_path.required_skills) + [s.name for s in profile.skills.target]:
            names.setdefault(name.lower(), name)

        target_levels = {s.name.lower(): s.level for s in profile.skills.target}
        gaps = []
        for lower, name in names.items():
            current = next(
                (
                    s
                    for s in profile.skills.current
                    if names_match(s.name, lower)
                ),
                None,
            )
            current_level = current.level if current else 0.0
            target_level = target_levels.get(lower, DEFAULT_TARGET_LEVEL)
            if current_level >= target_level:
                continue

            metadata = self.kb.skill_metadata(name)
            gaps.append(
                SkillGap(
                    skill=name,
                    current_level=current_level,
                    target_level=target_level,
                    estimated_learning_time=estimate_learning_time(
                        target_level - current_level, metadata.learning_months
                    ),
                )
            )
        return gaps

    def calculate_priority(self, gap: SkillGap, metadata: SkillMetadata) -> float:
        score = (
            metadata.impact * 0.4
            + (gap.size / 10) * 0.3
            + (1 - min(metadata.learning_months / 12, 1)) * 0.2
            + (1 - min(len(metadata.dependencies) / 5, 1)) * 0.1
        )
        return max(0.0, min(score, 1.0))

    def order_by_dependencies(self, scored: list[ScoredSkill]) -> list[ScoredSkill]:
        """Topologically order skills, breaking ties and cycles by priority.

        ``scored`` must already be sorted by priority, highest first.
        """
        remaining = list(scored)
        ordered: list[ScoredSkill] = []

        def blocked(skill: ScoredSkill) -> bool:
            return any(
                names_match(dep, other.gap.skill)
                for dep in self._own_dependencies(skill)
                for other in remaining
                if other is not skill
            )

        while remaining:
            ready = [s for s in remaining if not blocked(s)]
            if not ready:
                forced = remaining[0]
                self.logger.warning(
                    "Circular skill dependency, forcing highest priority skill",
                    skill=forced.gap.skill,
                    remaining=len(remaining),
                )
                ready = [forced]

            for skill in ready:
                ordered.append(skill)
                remaining.remove(skill)

        return ordered

    def generate_reasoning(
        self, gap: SkillGap, metadata: SkillMetadata, career_path: CareerPath
    ) -> str:
        reasons = []
        if any(s.lower() == gap.skill.lower() for s in career_path.required_skills):
            reasons.append(
                f"{gap.skill} is essential for your target career path in {career_path.title}"
            )

        if metadata.impact >= 0.8:
            reasons.append("This skill has high impact on your career progression")
        elif metadata.impact >= 0.6:
            reasons.append("This skill will significantly enhance your capabilities")

        if gap.size >= 4:
            reasons.append("Closing this skill gap is a priority for reaching your goals")
        elif gap.size >= 2:
            reasons.append("Developing this skill will help you advance toward your target level")

        if metadata.learning_months <= 3:
            reasons.append("This skill can be learned relatively quickly")
        elif metadata.learning_months >= 9:
            reasons.append(
                "This skill requires significant time investment but offers long-term value"
            )

        if metadata.dependencies:
            reasons.append(
                "Building on your knowledge of " + " and ".join(metadata.dependencies[:2])
            )

        if not reasons:
            reasons.append(f"{gap.skill} rounds out your profile for {career_path.title}")
        return ". ".join(reasons) + "."

    @staticmethod
    def _own_dependencies(skill: ScoredSkill) -> list[str]:
        """Metadata dependencies minus the skill itself (partial lookups can self-match)."""
        name = skill.gap.skill.lower()
        return [d for d in skill.metadata.dependencies if d.lower() != name]
