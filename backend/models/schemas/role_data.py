"""Role data as delivered by the role provider.

Job postings arrive from several feeds with incomplete metadata, so every
field is optional and coercion is lenient: wrong container types collapse to
empty lists and non-string entries are dropped instead of failing validation.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, str)]


class SkillEntry(BaseModel):
    """Object form of a structured skill, e.g. ``{"name": "React"}``."""
    name: str


class Company(BaseModel):
    name: str = ""
    specialties: list[str] = []

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("specialties", mode="before")
    @classmethod
    def _coerce_specialties(cls, v: Any) -> list[str]:
        return _string_list(v)


class RoleData(BaseModel):
    id: str = ""
    title: str = ""
    ai_key_skills: list[str] = Field(
        default=[], validation_alias=AliasChoices("ai_key_skills", "aiKeySkills")
    )
    skills: list[str | SkillEntry] = []
    requirements: list[str] = []
    company: Company | None = None
    linkedin_org_specialties: list[str] = Field(
        default=[],
        validation_alias=AliasChoices("linkedin_org_specialties", "linkedinOrgSpecialties"),
    )
    description: str = ""

    model_config = {"extra": "ignore", "from_attributes": True}

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("ai_key_skills", "requirements", "linkedin_org_specialties", mode="before")
    @classmethod
    def _coerce_string_lists(cls, v: Any) -> list[str]:
        return _string_list(v)

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, v: Any) -> list[str | SkillEntry]:
        if not isinstance(v, (list, tuple)):
            return []
        entries: list[str | SkillEntry] = []
        for item in v:
            if isinstance(item, str):
                entries.append(item)
            elif isinstance(item, SkillEntry):
                entries.append(item)
            elif isinstance(item, Mapping) and isinstance(item.get("name"), str):
                entries.append(SkillEntry(name=item["name"]))
            elif isinstance(getattr(item, "name", None), str):
                entries.append(SkillEntry(name=item.name))
        return entries

    @field_validator("company", mode="before")
    @classmethod
    def _coerce_company(cls, v: Any) -> Any:
        if v is None or isinstance(v, (Company, Mapping)):
            return v
        if hasattr(v, "specialties") or hasattr(v, "name"):
            return {
                "name": getattr(v, "name", ""),
                "specialties": getattr(v, "specialties", []),
            }
        return None

    @property
    def skill_names(self) -> list[str]:
        return [s if isinstance(s, str) else s.name for s in self.skills]

    @property
    def org_specialties(self) -> list[str]:
        company_specialties = self.company.specialties if self.company else []
        return company_specialties + self.linkedin_org_specialties

    @classmethod
    def coerce(cls, raw: Any) -> "RoleData":
        """Build a RoleData from a model, mapping or attribute object.

        Never raises: input that cannot be read at all becomes an empty role.
        """
        if isinstance(raw, RoleData):
            return raw
        if raw is None:
            return cls()
        try:
            if isinstance(raw, Mapping):
                return cls.model_validate(dict(raw))
            return cls.model_validate(raw, from_attributes=True)
        except ValidationError:
            return cls()
