"""Role Skill Selector: decide which skills a role is judged by.

Roles carry skill data of very different quality. Curated AI key skills are
trusted first; structured fields (skills list, requirements, company
specialties) next; mining the free-text description is the last resort.

Strategies:
    merged    AI key skills | structured + requirements + specialties | description
    priority  each source is its own tier, first non-empty tier wins
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from config import settings
from models.schemas.role_data import RoleData
from models.schemas.role_skills import RoleSkillSelection, RoleSkillSource
from services import skill_extractor
from services.skill_taxonomy import SkillTaxonomy, get_taxonomy

logger = logging.getLogger(__name__)

SkillSourceFn = Callable[[RoleData, SkillTaxonomy], list[str]]

STRATEGIES = ("merged", "priority")


def ai_key_skills(role: RoleData, taxonomy: SkillTaxonomy) -> list[str]:
    return list(role.ai_key_skills)


def structured_skills(role: RoleData, taxonomy: SkillTaxonomy) -> list[str]:
    return role.skill_names


def requirement_skills(role: RoleData, taxonomy: SkillTaxonomy) -> list[str]:
    return list(role.requirements)


def org_specialties(role: RoleData, taxonomy: SkillTaxonomy) -> list[str]:
    return role.org_specialties


def description_skills(role: RoleData, taxonomy: SkillTaxonomy) -> list[str]:
    return skill_extractor.extract_skills(role.description, taxonomy)


SOURCE_EXTRACTORS: dict[RoleSkillSource, SkillSourceFn] = {
    RoleSkillSource.AI_EXTRACTED: ai_key_skills,
    RoleSkillSource.STRUCTURED_SKILLS: structured_skills,
    RoleSkillSource.REQUIREMENTS: requirement_skills,
    RoleSkillSource.ORG_SPECIALTIES: org_specialties,
    RoleSkillSource.DESCRIPTION_DERIVED: description_skills,
}

TIERS: dict[str, tuple[tuple[RoleSkillSource, ...], ...]] = {
    "merged": (
        (RoleSkillSource.AI_EXTRACTED,),
        (
            RoleSkillSource.STRUCTURED_SKILLS,
            RoleSkillSource.REQUIREMENTS,
            RoleSkillSource.ORG_SPECIALTIES,
        ),
        (RoleSkillSource.DESCRIPTION_DERIVED,),
    ),
    "priority": tuple((source,) for source in SOURCE_EXTRACTORS),
}


class RoleSkillSelector:
    """Walks an ordered chain of source tiers and keeps the first with skills."""

    def __init__(
        self,
        taxonomy: SkillTaxonomy | None = None,
        strategy: str | None = None,
        tiers: Sequence[Sequence[RoleSkillSource]] | None = None,
        extractors: dict[RoleSkillSource, SkillSourceFn] | None = None,
    ) -> None:
        strategy = strategy or settings.skill_source_strategy
        if tiers is None:
            if strategy not in TIERS:
                raise ValueError(
                    f"Unknown skill source strategy {strategy!r}, expected one of {STRATEGIES}"
                )
            tiers = TIERS[strategy]
        self.taxonomy = taxonomy or get_taxonomy()
        self.strategy = strategy
        self.tiers = tuple(tuple(tier) for tier in tiers)
        self.extractors = {**SOURCE_EXTRACTORS, **(extractors or {})}

    def select(self, role: Any) -> RoleSkillSelection:
        """Return the role's skills and the source(s) they came from. Never raises."""
        role = RoleData.coerce(role)

        for tier in self.tiers:
            skills: list[str] = []
            seen: set[str] = set()
            sources_used: list[RoleSkillSource] = []

            for source in tier:
                added = self._collect(self.extractors[source], role, skills, seen)
                if added:
                    sources_used.append(source)

            if skills:
                return RoleSkillSelection(
                    skills=skills,
                    source=sources_used[0],
                    has_skills_listed=True,
                    sources_used=sources_used,
                )

        return RoleSkillSelection()

    def _collect(
        self,
        extractor: SkillSourceFn,
        role: RoleData,
        skills: list[str],
        seen: set[str],
    ) -> int:
        """Append cleaned, valid, not-yet-seen names; return how many were added."""
        try:
            raw = extractor(role, self.taxonomy)
        except Exception as e:
            logger.warning(
                "Skill source %s failed for role %r: %s",
                getattr(extractor, "__name__", extractor), role.id, e,
            )
            return 0

        added = 0
        for name in raw or []:
            cleaned = self.taxonomy.clean(name)
            if not self.taxonomy.is_valid_skill_name(cleaned):
                continue
            key = cleaned.lower()
            if key in seen:
                continue
            seen.add(key)
            skills.append(cleaned)
            added += 1
        return added


_default_selector: RoleSkillSelector | None = None


def _get_default_selector() -> RoleSkillSelector:
    global _default_selector
    if _default_selector is None:
        _default_selector = RoleSkillSelector()
    return _default_selector


def select_role_skills(
    role: Any,
    taxonomy: SkillTaxonomy | None = None,
    strategy: str | None = None,
) -> RoleSkillSelection:
    """Module-level shortcut over :class:`RoleSkillSelector`."""
    if taxonomy is None and strategy is None:
        return _get_default_selector().select(role)
    return RoleSkillSelector(taxonomy=taxonomy, strategy=strategy).select(role)
