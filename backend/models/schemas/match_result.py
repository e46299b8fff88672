"""Match Scorer output: per-skill evidence and the per-role score."""

from pydantic import BaseModel, Field

from config import Settings, settings as default_settings
from models.schemas.role_skills import RoleSkillSource
from models.schemas.skill import SkillLevel


class MatchingConfig(BaseModel):
    """Per-call scoring configuration. Defaults mirror ``config.Settings``."""
    fuzzy_match_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    bonus_for_high_level_skills: float = 1.2
    beginner_multiplier: float = 0.8
    skills_weight: float = Field(default=1.0, ge=0.0, le=1.0)
    minimum_score_threshold: int = Field(default=0, ge=0, le=100)
    skill_source_strategy: str = "merged"

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "MatchingConfig":
        s = s or default_settings
        return cls(
            fuzzy_match_threshold=s.fuzzy_match_threshold,
            bonus_for_high_level_skills=s.bonus_for_high_level_skills,
            beginner_multiplier=s.beginner_multiplier,
            skills_weight=s.skills_weight,
            minimum_score_threshold=s.minimum_score_threshold,
            skill_source_strategy=s.skill_source_strategy,
        )

    def level_multiplier(self, level: SkillLevel) -> float:
        if level in (SkillLevel.EXPERT, SkillLevel.ADVANCED):
            return self.bonus_for_high_level_skills
        if level == SkillLevel.BEGINNER:
            return self.beginner_multiplier
        return 1.0


class SkillMatch(BaseModel):
    """A role skill claimed by one of the user's skills."""
    skill_name: str  # the role skill as listed
    user_skill: str = ""
    user_level: SkillLevel = SkillLevel.INTERMEDIATE
    confidence: float = 0.0  # 0.0-1.0
    source: RoleSkillSource | None = None
    match_type: str = "exact"  # exact, alias, fuzzy
    level_multiplier: float = 1.0


class ScoreBreakdown(BaseModel):
    skills_score: int = 0  # 0-100, simple matched/user-skills ratio
    weighted_score: int = 0  # 0-100, confidence x level multiplier variant
    user_skill_count: int = 0
    unmatched_role_skills: list[str] = []
    source: RoleSkillSource | None = None


class RoleMatchScore(BaseModel):
    role_id: str = ""
    overall_score: int = Field(default=0, ge=0, le=100)
    skills_matched: int = 0
    total_skills: int = 0
    matched_skills: list[SkillMatch] = []
    has_skills_listed: bool = False
    breakdown: ScoreBreakdown = ScoreBreakdown()
