"""Role Skill Selector output: which skills a role lists and where they came from."""

from enum import Enum

from pydantic import BaseModel


class RoleSkillSource(str, Enum):
    AI_EXTRACTED = "AI_EXTRACTED"
    STRUCTURED_SKILLS = "STRUCTURED_SKILLS"
    REQUIREMENTS = "REQUIREMENTS"
    ORG_SPECIALTIES = "ORG_SPECIALTIES"
    DESCRIPTION_DERIVED = "DESCRIPTION_DERIVED"


class RoleSkillSelection(BaseModel):
    """Skills chosen for a role.

    ``has_skills_listed=False`` means there was no skill data to judge the
    role by. It is not the same as "nothing matched".
    """
    skills: list[str] = []
    source: RoleSkillSource | None = None  # first contributing source
    has_skills_listed: bool = False
    sources_used: list[RoleSkillSource] = []
