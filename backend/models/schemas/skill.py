"""Skill vocabulary and user skill profile contracts."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator


class SkillLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


class SkillAlias(BaseModel):
    """A canonical skill name and the spellings that resolve to it."""
    canonical: str
    aliases: tuple[str, ...] = ()

    model_config = {"frozen": True}


class UserSkill(BaseModel):
    """A declared skill from the candidate's profile."""
    name: str
    level: SkillLevel = SkillLevel.INTERMEDIATE
    category_id: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v


class FuzzyMatch(BaseModel):
    """Outcome of comparing one user skill against one role skill."""
    matched: bool
    confidence: float  # 0.0-1.0
    user_canonical: str
    role_canonical: str
