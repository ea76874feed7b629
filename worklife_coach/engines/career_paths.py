"""Career Path Engine.

Matches a profile against the path templates of the knowledge base and
scores each candidate:

    fit = 0.4 * min(matching interests / 3, 1)
        + 0.3 * min(matching skills / 5, 1)
        + 0.2 * growth potential
        + 0.1 * (min(years / 10, 1) if years >= 2 else 0.5)

A template is a candidate when an interest contains one of its keywords, a
current skill contains one of its related skills, or the user's industry is
listed. A current role always adds a "Senior <role>" candidate. The result
is never empty.

Example Usage:
    from worklife_coach.engines.career_paths import CareerPathEngine

    engine = CareerPathEngine()
    paths = engine.identify_trade_offs(engine.generate_career_paths(profile))
"""

import re
from typing import NamedTuple, Optional

from worklife_coach.models.knowledge import KnowledgeBase, PathTemplate, default_knowledge_base
from worklife_coach.models.profile import UserProfile
from worklife_coach.models.recommendations import CareerPath
from worklife_coach.utils.dates import parse_mean_months
from worklife_coach.utils.logger import get_logger

INTEREST_WEIGHT = 0.4
SKILL_WEIGHT = 0.3
GROWTH_WEIGHT = 0.2
EXPERIENCE_WEIGHT = 0.1

SENIOR_ROLE_SKILLS = ("leadership", "advanced technical skills", "mentoring")
SENIOR_ROLE_GROWTH = 0.7

DEFAULT_PATH = CareerPath(
    id="general-career-development",
    title="General Career Development",
    description="Focus on building foundational skills and exploring career options",
    reasoning=(
        "Based on your profile, we recommend starting with skill development and "
        "career exploration to identify the best path forward."
    ),
    fit_score=0.5,
    required_skills=["communication", "problem-solving", "time management"],
    time_to_transition="6-12 months",
    growth_potential=0.6,
)


class PathCandidate(NamedTuple):
    id: str
    title: str
    description: str
    required_skills: tuple[str, ...]
    growth_potential: float
    matching_interests: list[str]
    matching_skills: list[str]


def slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


class CareerPathEngine:
    """Generates and compares career path recommendations."""

    def __init__(self, knowledge_base: Optional[KnowledgeBase] = None):
        self.kb = knowledge_base or default_knowledge_base()
        self.logger = get_logger(
            correlation_id="career-path-engine",
            phase="recommendations",
            component="career_path_engine",
        )

    def generate_career_paths(self, profile: UserProfile) -> list[CareerPath]:
        """Score every matching template against the profile.

        Args:
            profile: User profile

        Returns:
            Paths sorted by fit score, highest first; the general development
            path when nothing matched
        """
        paths = [self._build_path(profile, c) for c in self.identify_candidates(profile)]
        paths.sort(key=lambda p: p.fit_score, reverse=True)

        if not paths:
            self.logger.info("No path templates matched, using default path", user_id=profile.user_id)
            return [DEFAULT_PATH]

        self.logger.info(
            "Generated career paths",
            user_id=profile.user_id,
            path_count=len(paths),
            top_path=paths[0].title,
            top_fit=round(paths[0].fit_score, 3),
        )
        return paths

    def identify_candidates(self, profile: UserProfile) -> list[PathCandidate]:
        interests = profile.career_info.interests
        current_skills = profile.skills.current
        industry = (profile.personal_info.industry or "").lower()
        candidates = []

        for template in self.kb.path_templates:
            matching_interests = [
                i for i in interests if any(k in i.lower() for k in template.keywords)
            ]
            matching_skills = [
                s.name
                for s in current_skills
                if any(r in s.name.lower() for r in template.related_skills)
            ]
            if matching_interests or matching_skills or (industry and industry in template.industries):
                candidates.append(self._candidate(template, matching_interests, matching_skills))

        role = profile.personal_info.current_role
        if role:
            title = f"Senior {role}"
            candidates.append(
                PathCandidate(
                    id=slugify(title),
                    title=title,
                    description=f"Advance to a senior position in your current role as {role}",
                    required_skills=SENIOR_ROLE_SKILLS,
                    growth_potential=SENIOR_ROLE_GROWTH,
                    matching_interests=[],
                    matching_skills=[s.name for s in current_skills],
                )
            )

        return candidates

    def calculate_fit_score(self, profile: UserProfile, candidate: PathCandidate) -> float:
        interest_score = min(len(candidate.matching_interests) / 3, 1.0)
        skill_score = min(len(candidate.matching_skills) / 5, 1.0)
        years = profile.personal_info.years_of_experience
        experience_score = min(years / 10, 1.0) if years >= 2 else 0.5

        score = (
            interest_score * INTEREST_WEIGHT
            + skill_score * SKILL_WEIGHT
            + candidate.growth_potential * GROWTH_WEIGHT
            + experience_score * EXPERIENCE_WEIGHT
        )
        return max(0.0, min(score, 1.0))

    def generate_reasoning(self, profile: UserProfile, candidate: PathCandidate) -> str:
        reasons = []
        if candidate.matching_interests:
            reasons.append(
                "This path aligns with your interests in "
                + " and ".join(candidate.matching_interests[:2])
            )
        if candidate.matching_skills:
            reasons.append(
                "You already have relevant skills like "
                + " and ".join(candidate.matching_skills[:2])
            )
        if candidate.growth_potential >= 0.7:
            reasons.append(
                "This field offers strong growth potential and career advancement opportunities"
            )

        years = profile.personal_info.years_of_experience
        if years >= 3:
            reasons.append("Your experience level makes you well-positioned for this transition")
        elif years < 2:
            reasons.append("This path is accessible for early-career professionals")

        if not reasons:
            reasons.append(
                "This path offers opportunities for professional growth and skill development"
            )
        return ". ".join(reasons) + "."

    def estimate_transition_time(self, profile: UserProfile, candidate: PathCandidate) -> str:
        skill_names = [s.name.lower() for s in profile.skills.current]
        required = candidate.required_skills
        have = sum(1 for r in required if any(r.lower() in name for name in skill_names))
        gap_ratio = 1 - have / len(required) if required else 0.5

        if gap_ratio < 0.3 and profile.personal_info.years_of_experience >= 2:
            return "3-6 months"
        if gap_ratio < 0.5:
            return "6-12 months"
        if gap_ratio < 0.7:
            return "12-18 months"
        return "18-24 months"

    def identify_trade_offs(self, paths: list[CareerPath]) -> list[CareerPath]:
        """Append comparative notes to each path's reasoning.

        Every path is compared on fit, transition time and growth against
        whichever path wins that dimension. Returns new path objects; single
        path lists come back unchanged.
        """
        if len(paths) <= 1:
            return list(paths)

        best_fit = max(paths, key=lambda p: p.fit_score)
        fastest = min(paths, key=lambda p: parse_mean_months(p.time_to_transition))
        highest_growth = max(paths, key=lambda p: p.growth_potential)

        annotated = []
        for path in paths:
            notes = []
            if path.fit_score >= best_fit.fit_score:
                notes.append("Best overall fit for your profile")
            else:
                notes.append(f"Lower overall fit than {best_fit.title}")

            if parse_mean_months(path.time_to_transition) <= parse_mean_months(fastest.time_to_transition):
                notes.append("Fastest path to transition")
            else:
                notes.append(f"Longer transition time compared to {fastest.title}")

            if path.growth_potential >= highest_growth.growth_potential:
                notes.append("Highest long-term growth potential")
            else:
                notes.append(f"Lower growth potential than {highest_growth.title}")

            annotated.append(
                path.model_copy(
                    update={"reasoning": f"{path.reasoning} Trade-offs: {'; '.join(notes)}."}
                )
            )
        return annotated

    def _candidate(
        self, template: PathTemplate, interests: list[str], skills: list[str]
    ) -> PathCandidate:
        return PathCandidate(
            id=template.id,
            title=template.title,
            description=template.description,
            required_skills=template.required_skills,
            growth_potential=template.growth_potential,
            matching_interests=interests,
            matching_skills=skills,
        )

    def _build_path(self, profile: UserProfile, candidate: PathCandidate) -> CareerPath:
        return CareerPath(
            id=candidate.id,
            title=candidate.title,
            description=candidate.description,
            reasoning=self.generate_reasoning(profile, candidate),
            fit_score=self.calculate_fit_score(profile, candidate),
            required_skills=list(candidate.required_skills),
            time_to_transition=self.estimate_transition_time(profile, candidate),
            growth_potential=candidate.growth_potential,
        )
