"""Batch Orchestrator output and ranking statistics."""

from enum import Enum

from pydantic import BaseModel

from models.schemas.match_result import RoleMatchScore


class MatchErrorCode(str, Enum):
    ROLE_NOT_FOUND = "ROLE_NOT_FOUND"
    PROCESSING_ERROR = "PROCESSING_ERROR"


class MatchError(BaseModel):
    """A role-scoped failure collected instead of raised."""
    role_id: str
    message: str
    error_code: MatchErrorCode


class BatchMatchResult(BaseModel):
    user_id: str
    role_scores: list[RoleMatchScore] = []
    errors: list[MatchError] = []
    total_processed: int = 0
    processing_time_ms: float = 0.0


class MatchingStatistics(BaseModel):
    total_roles: int = 0
    roles_with_skills: int = 0
    roles_without_skills: int = 0
    average_score: int = 0  # rounded mean over roles with skills only
    high_score_roles: int = 0  # > 70
    medium_score_roles: int = 0  # 40-70
    low_score_roles: int = 0  # < 40


class FilteringStatistics(BaseModel):
    """How much of a scored list survived a filter pass."""
    total: int = 0
    filtered: int = 0
    with_skills: int = 0
    average_score: int = 0  # rounded mean over roles with skills and a non-zero score
