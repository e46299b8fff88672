"""Pydantic contracts shared by the matching pipeline components."""

from models.schemas.batch_result import (
    BatchMatchResult,
    FilteringStatistics,
    MatchError,
    MatchErrorCode,
    MatchingStatistics,
)
from models.schemas.extraction import SkillExperience
from models.schemas.match_result import (
    MatchingConfig,
    RoleMatchScore,
    ScoreBreakdown,
    SkillMatch,
)
from models.schemas.role_data import Company, RoleData, SkillEntry
from models.schemas.role_skills import RoleSkillSelection, RoleSkillSource
from models.schemas.skill import FuzzyMatch, SkillAlias, SkillLevel, UserSkill

__all__ = [
    "BatchMatchResult",
    "Company",
    "FilteringStatistics",
    "FuzzyMatch",
    "MatchError",
    "MatchErrorCode",
    "MatchingConfig",
    "MatchingStatistics",
    "RoleData",
    "RoleMatchScore",
    "RoleSkillSelection",
    "RoleSkillSource",
    "ScoreBreakdown",
    "SkillAlias",
    "SkillEntry",
    "SkillExperience",
    "SkillLevel",
    "SkillMatch",
    "UserSkill",
]
