"""In-Role Growth Advisor.

Advancement guidance scoped to the user's current position. Alternative
paths are only offered when the role looks stagnant; otherwise the advice
stays inside the current role.
"""

from typing import NamedTuple, Optional

from worklife_coach.models.profile import ChallengeType, UserProfile
from worklife_coach.models.recommendations import (
    CareerPath,
    GrowthOpportunity,
    GrowthOpportunityType,
    InRoleGrowthAnalysis,
    SkillRecommendation,
    StagnationAssessment,
    StagnationSeverity,
)
from worklife_coach.utils.logger import get_logger

LONG_TENURE_YEARS = 5
LOW_PROGRESS_TENURE_YEARS = 3

HONEST_ASSESSMENTS = {
    StagnationSeverity.HIGH: (
        "Based on your profile, it appears your current role has significant growth limitations. "
        "While there may be some opportunities to expand your responsibilities, you may need to "
        "consider alternative paths to achieve your career goals."
    ),
    StagnationSeverity.MEDIUM: (
        "Your current role shows some signs of stagnation. There are likely opportunities to grow "
        "within your position, but they may be limited. It's worth exploring both in-role "
        "advancement and alternative options."
    ),
    StagnationSeverity.LOW: (
        "While you may be experiencing some challenges, there appear to be opportunities for "
        "growth in your current role. Focus on the identified opportunities while staying open "
        "to other possibilities."
    ),
}


class RoleSkill(NamedTuple):
    role_keywords: tuple[str, ...]
    skill: str
    priority: float
    reasoning: str
    resources: tuple[str, ...]
    estimated_time: str
    dependencies: tuple[str, ...] = ()


ROLE_SKILLS = (
    RoleSkill(
        ("engineer", "developer"),
        "Testing",
        0.85,
        "Testing skills are highly valued by employers and improve code quality in your current role",
        ("Jest documentation", "Testing Library", "Test-Driven Development book"),
        "2-3 months",
    ),
    RoleSkill(
        ("engineer", "developer"),
        "System Design",
        0.9,
        "System design expertise is critical for senior engineering roles and demonstrates "
        "technical leadership to your employer",
        ("System Design Primer", "Designing Data-Intensive Applications"),
        "6-8 months",
        ("programming",),
    ),
    RoleSkill(
        ("product",),
        "Stakeholder Management",
        0.9,
        "Stakeholder management is essential for product roles and increases your influence "
        "within the organization",
        ("Crucial Conversations book", "Leadership courses"),
        "3-4 months",
    ),
    RoleSkill(
        ("product",),
        "Analytics",
        0.8,
        "Data-driven decision making is highly valued in product management and strengthens "
        "your standing in your current role",
        ("Google Analytics Academy", "Mixpanel guides"),
        "3-4 months",
    ),
    RoleSkill(
        ("design",),
        "User Research",
        0.85,
        "User research skills are highly valued in design roles and demonstrate strategic "
        "thinking to your organization",
        ("Nielsen Norman Group", "Just Enough Research book"),
        "3-4 months",
    ),
)

COMMUNICATION_SKILL = RoleSkill(
    (),
    "Communication",
    0.85,
    "Strong communication skills are valued across every role in your organization and "
    "essential for career advancement",
    ("Toastmasters", "Business writing courses"),
    "4-6 months",
)


def has_skill(current_skills: list[str], skill: str) -> bool:
    skill_lower = skill.lower()
    return any(s == skill_lower or skill_lower in s or s in skill_lower for s in current_skills)


def normalized_severity(severity: float) -> float:
    """Struggle severity on a 0-1 scale; values above 1 are read as 0-10."""
    return severity / 10 if severity > 1 else severity


def escalate(severity: StagnationSeverity) -> StagnationSeverity:
    if severity == StagnationSeverity.LOW:
        return StagnationSeverity.MEDIUM
    return StagnationSeverity.HIGH


class InRoleGrowthAdvisor:
    """Finds growth opportunities inside the current role."""

    def __init__(self):
        self.logger = get_logger(
            correlation_id="in-role-growth-advisor",
            phase="recommendations",
            component="in_role_growth_advisor",
        )

    def analyze_in_role_growth(self, profile: UserProfile) -> InRoleGrowthAnalysis:
        stagnation = self.assess_stagnation(profile)
        alternatives = self.generate_alternative_paths(profile) if stagnation else []

        analysis = InRoleGrowthAnalysis(
            current_role=profile.personal_info.current_role,
            opportunities=self.identify_opportunities(profile),
            employer_relevant_skills=self.recommend_employer_relevant_skills(profile),
            stagnation_assessment=stagnation,
            alternative_paths=alternatives,
        )
        self.logger.info(
            "Analyzed in-role growth",
            user_id=profile.user_id,
            opportunity_count=len(analysis.opportunities),
            stagnant=stagnation is not None,
            severity=stagnation.severity.value if stagnation else None,
        )
        return analysis

    def identify_opportunities(self, profile: UserProfile) -> list[GrowthOpportunity]:
        """Experience-gated opportunities; the visibility one is always present."""
        years = profile.personal_info.years_of_experience
        opportunities = []

        if years >= 2:
            opportunities.append(
                GrowthOpportunity(
                    type=GrowthOpportunityType.RESPONSIBILITY,
                    title="Lead a team initiative",
                    description="Lead a small project or initiative within your team",
                    action_steps=[
                        "Ask your manager which upcoming project needs an owner",
                        "Draft a one-page plan with scope and milestones",
                    ],
                    expected_impact="high",
                    timeframe="1-3 months",
                )
            )
        if years >= 3 and len(profile.skills.current) >= 3:
            opportunities.append(
                GrowthOpportunity(
                    type=GrowthOpportunityType.RESPONSIBILITY,
                    title="Mentor others",
                    description="Mentor junior team members or new hires",
                    action_steps=["Offer to onboard the next new hire on your team"],
                    expected_impact="medium",
                    timeframe="ongoing",
                )
            )

        opportunities.append(
            GrowthOpportunity(
                type=GrowthOpportunityType.VISIBILITY,
                title="Share your work",
                description="Present your work at team meetings or company all-hands",
                action_steps=["Pick one recent result and prepare a 5-minute summary"],
                expected_impact="medium",
                timeframe="this month",
            )
        )
        if years >= 2:
            opportunities.append(
                GrowthOpportunity(
                    type=GrowthOpportunityType.VISIBILITY,
                    title="Work across teams",
                    description="Volunteer for cross-functional projects to expand your network",
                    action_steps=["Identify one cross-team effort and offer to contribute"],
                    expected_impact="high",
                    timeframe="1-3 months",
                )
            )

        learning = [s.name for s in profile.skills.learning]
        if learning:
            opportunities.append(
                GrowthOpportunity(
                    type=GrowthOpportunityType.SKILL_DEVELOPMENT,
                    title="Finish what you're learning",
                    description=f"Complete your current learning goals: {', '.join(learning)}",
                    action_steps=[f"Schedule weekly practice time for {learning[0]}"],
                    expected_impact="high",
                    timeframe="1-3 months",
                )
            )
        opportunities.append(
            GrowthOpportunity(
                type=GrowthOpportunityType.SKILL_DEVELOPMENT,
                title="Build employer-valued skills",
                description="Identify and learn skills that are valued by your current employer",
                action_steps=["Ask your manager which skills matter most for the next level"],
                expected_impact="high",
                timeframe="3-6 months",
            )
        )

        if years >= 4:
            opportunities.append(
                GrowthOpportunity(
                    type=GrowthOpportunityType.LEADERSHIP,
                    title="Own a key area",
                    description="Take ownership of a key area or process within your team",
                    action_steps=["Propose owning one recurring process and improving it"],
                    expected_impact="high",
                    timeframe="3-6 months",
                )
            )
        return opportunities

    def recommend_employer_relevant_skills(self, profile: UserProfile) -> list[SkillRecommendation]:
        """Role-keyed skill suggestions, highest priority first."""
        role = (profile.personal_info.current_role or "").lower()
        current = [s.name.lower() for s in profile.skills.current]

        selected = [
            rs
            for rs in ROLE_SKILLS
            if any(k in role for k in rs.role_keywords) and not has_skill(current, rs.skill)
        ]
        if profile.personal_info.years_of_experience >= 2 and not has_skill(current, "communication"):
            selected.append(COMMUNICATION_SKILL)

        recommendations = [
            SkillRecommendation(
                skill=rs.skill,
                priority=rs.priority,
                reasoning=rs.reasoning,
                learning_resources=list(rs.resources),
                estimated_time=rs.estimated_time,
                dependencies=list(rs.dependencies),
            )
            for rs in selected
        ]
        recommendations.sort(key=lambda r: r.priority, reverse=True)
        return recommendations

    def assess_stagnation(self, profile: UserProfile) -> Optional[StagnationAssessment]:
        """Stagnation assessment, or None when no stagnation signal holds.

        Signals: an explicit stagnation struggle; a direction struggle with
        5+ years of tenure; low progress (fewer than 3 completed actions and
        2 completed milestones) with 3+ years of tenure. Two or more signals
        raise the severity one level.
        """
        years = profile.personal_info.years_of_experience
        struggles = profile.career_info.struggles
        stagnation_struggle = next((s for s in struggles if s.type == ChallengeType.STAGNATION), None)
        has_direction = any(s.type == ChallengeType.DIRECTION for s in struggles)
        completed_milestones = sum(1 for m in profile.progress.milestones if m.completed)
        low_progress = len(profile.progress.completed_actions) < 3 and completed_milestones < 2
        long_tenure = years >= LONG_TENURE_YEARS

        signals = [
            stagnation_struggle is not None,
            has_direction and long_tenure,
            low_progress and years >= LOW_PROGRESS_TENURE_YEARS,
        ]
        if not any(signals):
            return None

        severity = StagnationSeverity.LOW
        reasons = []
        limitations = []

        if stagnation_struggle is not None:
            level = normalized_severity(stagnation_struggle.severity)
            if level >= 0.7:
                severity = StagnationSeverity.HIGH
            elif level >= 0.4:
                severity = StagnationSeverity.MEDIUM
            reasons.append("You have explicitly identified feeling stuck in your current role")

        if long_tenure and low_progress:
            if severity == StagnationSeverity.LOW:
                severity = StagnationSeverity.MEDIUM
            reasons.append("Limited recent progress despite significant experience")
            limitations.append("Few advancement opportunities in current position")

        if has_direction:
            reasons.append("Lack of clear direction may indicate limited growth path in current role")
            limitations.append("Unclear career progression within current organization")

        if not reasons:
            reasons.append("Limited progress in completing actions and milestones")
            limitations.append("May need to increase engagement with growth activities")

        if sum(signals) >= 2:
            severity = escalate(severity)

        return StagnationAssessment(
            is_stagnant=True,
            severity=severity,
            reasons=reasons,
            growth_limitations=limitations,
            honest_assessment=HONEST_ASSESSMENTS[severity],
        )

    def generate_alternative_paths(self, profile: UserProfile) -> list[CareerPath]:
        """Paths outside the current role; never empty."""
        role = profile.personal_info.current_role
        industry = profile.personal_info.industry
        interests = profile.career_info.interests
        current = [s.name for s in profile.skills.current]
        paths = []

        if industry:
            paths.append(
                CareerPath(
                    id="internal-transfer",
                    title=f"Internal Transfer within {industry}",
                    description=(
                        "Explore opportunities in different teams or departments within "
                        "your current organization"
                    ),
                    reasoning=(
                        "Internal transfers allow you to leverage your existing knowledge of the "
                        "company while finding new growth opportunities"
                    ),
                    fit_score=0.75,
                    required_skills=current,
                    time_to_transition="3-6 months",
                    growth_potential=0.7,
                )
            )
        if role:
            paths.append(
                CareerPath(
                    id="same-role-elsewhere",
                    title=f"{role} at a Different Company",
                    description=(
                        "Seek similar roles at companies with better growth opportunities "
                        "or culture fit"
                    ),
                    reasoning=(
                        "Moving to a new company in a similar role can provide fresh challenges "
                        "and advancement opportunities"
                    ),
                    fit_score=0.8,
                    required_skills=current,
                    time_to_transition="2-4 months",
                    growth_potential=0.75,
                )
            )
        if interests:
            interest = interests[0]
            paths.append(
                CareerPath(
                    id="interest-aligned-pivot",
                    title=f"Transition to {interest}-focused Role",
                    description=f"Pivot to a role that aligns more closely with your interests in {interest}",
                    reasoning=f"Your interest in {interest} suggests this could be a more fulfilling career direction",
                    fit_score=0.7,
                    required_skills=current + [interest],
                    time_to_transition="6-12 months",
                    growth_potential=0.8,
                )
            )
        if profile.personal_info.years_of_experience >= LONG_TENURE_YEARS:
            paths.append(
                CareerPath(
                    id="leadership-track",
                    title="Leadership or Management Track",
                    description="Transition into a leadership role managing teams or projects",
                    reasoning="Your experience level positions you well for leadership opportunities",
                    fit_score=0.65,
                    required_skills=current + ["Leadership", "Communication", "Mentoring"],
                    time_to_transition="6-12 months",
                    growth_potential=0.85,
                )
            )

        if not paths:
            paths.append(
                CareerPath(
                    id="career-exploration",
                    title="Career Exploration Outside Your Current Role",
                    description="Research adjacent roles and industries that build on what you already do",
                    reasoning=(
                        "When growth in your current role is limited, a structured look at "
                        "adjacent roles shows where your experience carries over"
                    ),
                    fit_score=0.6,
                    required_skills=current or ["communication", "problem-solving"],
                    time_to_transition="3-6 months",
                    growth_potential=0.7,
                )
            )
        return paths
