"""Description Skill Extractor output."""

from pydantic import BaseModel


class SkillExperience(BaseModel):
    """A skill mentioned together with a years-of-experience requirement."""
    skill: str
    years_required: int
