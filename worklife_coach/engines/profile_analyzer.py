"""Profile Analyzer.

Derives career stage, strengths, weaknesses, skill gaps, readiness and
progress from a ``UserProfile``. Missing optional data never raises; it
shows up as an incomplete profile instead.

Example Usage:
    from worklife_coach.engines.profile_analyzer import ProfileAnalyzer

    analyzer = ProfileAnalyzer()
    analyzer.categorize_challenge("I feel stuck in the same place")  # STAGNATION
    analyzer.check_profile_completeness(profile).missing_fields
"""

from datetime import datetime
from typing import Optional

from worklife_coach.models.analysis import (
    CareerStage,
    GapPriority,
    ProfileAnalysis,
    ProfileCompleteness,
    ProgressReport,
    ReadinessFactors,
    ReadinessScore,
    SkillGap,
    TimeRange,
)
from worklife_coach.models.conversation import ProgressRecord
from worklife_coach.models.intent import Intent
from worklife_coach.models.profile import (
    ChallengeType,
    Goal,
    GoalType,
    Skill,
    UserProfile,
    utc_now,
)
from worklife_coach.models.recommendations import CareerPath
from worklife_coach.utils.logger import get_logger

# Checked in order; the first category with a hit wins.
CHALLENGE_KEYWORDS: tuple[tuple[ChallengeType, tuple[str, ...]], ...] = (
    (ChallengeType.DIRECTION, ("lost", "direction", "confused", "unclear", "don't know what", "unsure about path")),
    (ChallengeType.SKILLS, ("skill", "learn", "knowledge", "technical", "don't know how")),
    (ChallengeType.CONFIDENCE, ("confidence", "confident", "doubt", "imposter", "not good enough", "afraid", "anxious")),
    (ChallengeType.OVERWHELM, ("overwhelm", "too much", "stressed", "burned out", "can't handle")),
    (ChallengeType.TRANSITION, ("transition", "change career", "switch", "move to", "different field")),
    (ChallengeType.STAGNATION, ("stagnant", "stuck", "not growing", "plateau", "same place")),
)

PROFICIENT_LEVEL = 7
COLLECTED_SKILL_LEVEL = 3


class ProfileAnalyzer:
    """Read-only analysis over a user profile."""

    def __init__(self) -> None:
        self.logger = get_logger(
            correlation_id="profile-analyzer", phase="analysis", component="profile_analyzer"
        )

    def categorize_challenge(self, description: str) -> ChallengeType:
        lower = description.lower()
        for challenge_type, keywords in CHALLENGE_KEYWORDS:
            if any(k in lower for k in keywords):
                return challenge_type
        return ChallengeType.DIRECTION

    def check_profile_completeness(self, profile: UserProfile) -> ProfileCompleteness:
        """Check that role, goals, interests and struggles are present."""
        missing = []
        if not profile.personal_info.current_role:
            missing.append("current_role")
        if not profile.career_info.goals:
            missing.append("goals")
        if not profile.career_info.interests:
            missing.append("interests")
        if not profile.career_info.struggles:
            missing.append("struggles")
        return ProfileCompleteness(is_complete=not missing, missing_fields=missing)

    def determine_career_stage(self, profile: UserProfile) -> CareerStage:
        years = profile.personal_info.years_of_experience
        if years < 3:
            return CareerStage.EARLY
        if years <= 7:
            return CareerStage.MID
        return CareerStage.SENIOR

    def analyze_profile(self, profile: UserProfile) -> ProfileAnalysis:
        """Summarize strengths, weaknesses, stage and challenges.

        Returns:
            ProfileAnalysis with primary challenges ordered by severity, highest first
        """
        challenges = sorted(
            profile.career_info.struggles, key=lambda c: c.severity, reverse=True
        )
        return ProfileAnalysis(
            strengths=self._identify_strengths(profile),
            weaknesses=self._identify_weaknesses(profile),
            interests=list(profile.career_info.interests),
            career_stage=self.determine_career_stage(profile),
            in_transition=any(
                c.type == ChallengeType.TRANSITION for c in profile.career_info.struggles
            ),
            confidence_level=profile.mindset.confidence_level,
            primary_challenges=challenges,
        )

    def identify_gaps(
        self, profile: UserProfile, target_path: CareerPath, target_level: float = PROFICIENT_LEVEL
    ) -> list[SkillGap]:
        """Required skills of a path the user lacks or has below ``target_level``."""
        current = {s.name.lower(): s for s in profile.skills.current}
        gaps = []
        for required in target_path.required_skills:
            skill = current.get(required.lower())
            if skill is None:
                gaps.append(
                    SkillGap(
                        skill=required,
                        current_level=0,
                        target_level=target_level,
                        priority=GapPriority.HIGH,
                        estimated_learning_time="3-6 months",
                    )
                )
            elif skill.level < target_level:
                gaps.append(
                    SkillGap(
                        skill=required,
                        current_level=skill.level,
                        target_level=target_level,
                        priority=GapPriority.HIGH if skill.level < 4 else GapPriority.MEDIUM,
                        estimated_learning_time=self._estimate_learning_time(
                            skill.level, target_level
                        ),
                    )
                )
        return gaps

    def assess_readiness(self, profile: UserProfile, goal: Goal) -> ReadinessScore:
        """Score readiness for a goal from skills (40%), experience (30%), motivation (30%)."""
        target_count = len(profile.skills.target)
        skill_alignment = (
            1.0 if target_count == 0 else min(len(profile.skills.current) / target_count, 1.0)
        )
        experience = min(profile.personal_info.years_of_experience / 10, 1.0)
        motivation = profile.mindset.motivation_level

        blockers = []
        recommendations = []
        if skill_alignment < 0.5:
            blockers.append("Significant skill gaps exist")
            recommendations.append("Focus on acquiring foundational skills first")
        if motivation < 0.5:
            blockers.append("Low motivation level")
            recommendations.append(
                'Work on clarifying your "why" and building intrinsic motivation'
            )
        if profile.personal_info.years_of_experience < 2 and goal.type == GoalType.LONG_TERM:
            recommendations.append(
                "Consider breaking this long-term goal into smaller milestones"
            )

        return ReadinessScore(
            score=min(skill_alignment * 0.4 + experience * 0.3 + motivation * 0.3, 1.0),
            factors=ReadinessFactors(
                skill_alignment=skill_alignment,
                experience_level=experience,
                motivation_level=motivation,
            ),
            blockers=blockers,
            recommendations=recommendations,
        )

    def track_progress(
        self,
        profile: UserProfile,
        timeframe: TimeRange,
        progress_records: Optional[list[ProgressRecord]] = None,
    ) -> ProgressReport:
        """Count completions inside ``timeframe``.

        The profile stores completed action ids without timestamps, so action
        completions are windowed only when the data store's progress records
        are passed in; otherwise every completed action counts.
        """
        if progress_records is not None:
            completed_actions = sum(
                1
                for r in progress_records
                if r.user_id == profile.user_id and timeframe.contains(r.completed_at)
            )
        else:
            completed_actions = len(profile.progress.completed_actions)

        milestones = profile.progress.milestones
        completed_milestones = sum(
            1
            for m in milestones
            if m.completed and m.completed_date and timeframe.contains(m.completed_date)
        )
        goals_achieved = sum(
            1
            for g in profile.career_info.goals
            if g.target_date is not None and g.target_date <= timeframe.end
        )

        return ProgressReport(
            user_id=profile.user_id,
            timeframe=timeframe,
            completed_actions=completed_actions,
            completed_milestones=completed_milestones,
            skills_acquired=[
                s.name for s in profile.skills.current if s.level >= PROFICIENT_LEVEL
            ],
            goals_achieved=goals_achieved,
            overall_progress=completed_milestones / len(milestones) if milestones else 0.0,
        )

    def collect_profile_data(
        self,
        user_id: str,
        intent: Intent,
        existing: Optional[UserProfile] = None,
        now: Optional[datetime] = None,
    ) -> UserProfile:
        """Create or update a profile from what a profile-building message revealed.

        Mentioned years of experience replace the stored value, mentioned
        skills are added as current skills and career fields as interests.
        The returned profile is a copy; ``existing`` is left untouched.
        """
        profile = existing.model_copy(deep=True) if existing else UserProfile(user_id=user_id)
        entities = intent.entities

        if entities.years_of_experience is not None:
            profile.personal_info.years_of_experience = min(entities.years_of_experience, 60)

        known_skills = {s.name.lower() for s in profile.skills.current}
        for skill_name in entities.skills or []:
            if skill_name.lower() not in known_skills:
                profile.skills.current.append(Skill(name=skill_name, level=COLLECTED_SKILL_LEVEL))
                known_skills.add(skill_name.lower())

        interests = {i.lower() for i in profile.career_info.interests}
        for career_field in entities.career_fields or []:
            if career_field.lower() not in interests:
                profile.career_info.interests.append(career_field)
                interests.add(career_field.lower())

        profile.touch(now or utc_now())
        self.logger.info(
            "Profile data collected",
            user_id=user_id,
            created=existing is None,
            skill_count=len(profile.skills.current),
            interest_count=len(profile.career_info.interests),
        )
        return profile

    def _identify_strengths(self, profile: UserProfile) -> list[str]:
        strengths = [s.name for s in profile.skills.current if s.level >= PROFICIENT_LEVEL]
        if profile.mindset.confidence_level >= 0.7:
            strengths.append("High self-confidence")
        if profile.personal_info.years_of_experience >= 5:
            strengths.append("Significant work experience")
        return strengths

    def _identify_weaknesses(self, profile: UserProfile) -> list[str]:
        weaknesses = [f"Limited {s.name}" for s in profile.skills.current if s.level < 4]
        if profile.mindset.confidence_level < 0.5:
            weaknesses.append("Low self-confidence")
        weaknesses.extend(c.description for c in profile.career_info.struggles)
        return weaknesses

    @staticmethod
    def _estimate_learning_time(current_level: float, target_level: float) -> str:
        gap = target_level - current_level
        if gap <= 2:
            return "1-2 months"
        if gap <= 4:
            return "3-4 months"
        if gap <= 6:
            return "5-6 months"
        return "6+ months"
