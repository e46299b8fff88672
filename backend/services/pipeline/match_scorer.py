"""Match Scorer: score one user skill profile against one role.

Each user skill claims at most one role skill and each role skill is claimed
at most once (first-come, in user-skill order). The overall score is the
share of the user's skills that found a role skill:

    overall_score = round_half_up(matched / user_skill_count * 100 * skills_weight)

Level multipliers do not change ``overall_score``; they only feed the
``weighted_score`` reported in the breakdown.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import ValidationError

from models.schemas.match_result import (
    MatchingConfig,
    RoleMatchScore,
    ScoreBreakdown,
    SkillMatch,
)
from models.schemas.role_data import RoleData
from models.schemas.role_skills import RoleSkillSource
from models.schemas.skill import UserSkill
from services.pipeline.role_skill_selector import RoleSkillSelector
from services.pipeline.tracing import NULL_TRACER, MatchTracer
from services.skill_taxonomy import SkillTaxonomy, get_taxonomy

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (``round`` would give 62 for 62.5)."""
    return int(value + 0.5)


def coerce_user_skills(
    user_skills: Iterable[Any] | None,
    taxonomy: SkillTaxonomy | None = None,
) -> list[UserSkill]:
    """Turn raw user skills into ``UserSkill`` models, dropping unusable entries.

    Accepts models, dicts and bare strings. Entries that fail validation or
    whose name is not a valid skill name are skipped.
    """
    taxonomy = taxonomy or get_taxonomy()
    if isinstance(user_skills, str):
        user_skills = [user_skills]
    elif not isinstance(user_skills, Iterable):
        user_skills = []

    result: list[UserSkill] = []
    for raw in user_skills:
        try:
            if isinstance(raw, UserSkill):
                skill = raw
            elif isinstance(raw, str):
                skill = UserSkill(name=raw)
            else:
                skill = UserSkill.model_validate(raw, from_attributes=True)
        except ValidationError:
            logger.debug("Skipping malformed user skill: %r", raw)
            continue
        if taxonomy.is_valid_skill_name(skill.name):
            result.append(skill)
    return result


def _match_type(user_skill: str, role_skill: str, confidence: float) -> str:
    if user_skill.strip().lower() == role_skill.strip().lower():
        return "exact"
    if confidence >= 1.0:
        return "alias"
    return "fuzzy"


def match_skills(
    user_skills: Sequence[UserSkill],
    role_skills: Sequence[str],
    config: MatchingConfig | None = None,
    source: RoleSkillSource | None = None,
    taxonomy: SkillTaxonomy | None = None,
) -> list[SkillMatch]:
    """Assign role skills to user skills, first come first served.

    For every user skill the best-scoring unclaimed role skill at or above
    the threshold is taken; on equal confidence the earlier role skill wins.
    User skills without a qualifying role skill produce no entry.
    """
    config = config or MatchingConfig.from_settings()
    taxonomy = taxonomy or get_taxonomy()

    claimed: set[int] = set()
    matches: list[SkillMatch] = []

    for user_skill in user_skills:
        best_index = -1
        best_confidence = 0.0
        for i, role_skill in enumerate(role_skills):
            if i in claimed:
                continue
            result = taxonomy.fuzzy_match(
                user_skill.name, role_skill, config.fuzzy_match_threshold
            )
            if result.matched and result.confidence > best_confidence:
                best_index = i
                best_confidence = result.confidence
                if best_confidence >= 1.0:
                    break

        if best_index < 0:
            continue

        claimed.add(best_index)
        role_skill = role_skills[best_index]
        matches.append(SkillMatch(
            skill_name=role_skill,
            user_skill=user_skill.name,
            user_level=user_skill.level,
            confidence=best_confidence,
            source=source,
            match_type=_match_type(user_skill.name, role_skill, best_confidence),
            level_multiplier=config.level_multiplier(user_skill.level),
        ))

    return matches


class MatchScorer:
    """Scores roles for a user. Holds the taxonomy, selector and tracer."""

    def __init__(
        self,
        config: MatchingConfig | None = None,
        taxonomy: SkillTaxonomy | None = None,
        selector: RoleSkillSelector | None = None,
        tracer: MatchTracer | None = None,
    ) -> None:
        self.config = config or MatchingConfig.from_settings()
        self.taxonomy = taxonomy or get_taxonomy()
        self.selector = selector or RoleSkillSelector(
            taxonomy=self.taxonomy, strategy=self.config.skill_source_strategy
        )
        self.tracer = tracer or NULL_TRACER

    def score(
        self,
        user_skills: Iterable[Any] | None,
        role_data: Any,
        role_id: str | None = None,
    ) -> RoleMatchScore:
        """Score one role. Malformed input degrades to a zero score, never an exception."""
        role = RoleData.coerce(role_data)
        role_id = role_id if role_id is not None else role.id

        selection = self.selector.select(role)
        self.tracer.role_skills_selected(role_id, selection)

        if not selection.has_skills_listed:
            result = RoleMatchScore(role_id=role_id)
            self.tracer.match_computed(role_id, result)
            return result

        skills = coerce_user_skills(user_skills, self.taxonomy)
        matches = match_skills(
            skills, selection.skills, self.config, selection.source, self.taxonomy
        )

        user_count = len(skills)
        matched = len(matches)
        if user_count:
            overall = round_half_up(matched / user_count * 100 * self.config.skills_weight)
            weighted_total = sum(m.confidence * m.level_multiplier for m in matches)
            weighted = min(100, round_half_up(weighted_total / user_count * 100))
        else:
            overall = 0
            weighted = 0

        claimed = {m.skill_name for m in matches}
        result = RoleMatchScore(
            role_id=role_id,
            overall_score=min(100, overall),
            skills_matched=matched,
            total_skills=len(selection.skills),
            matched_skills=matches,
            has_skills_listed=True,
            breakdown=ScoreBreakdown(
                skills_score=min(100, overall),
                weighted_score=weighted,
                user_skill_count=user_count,
                unmatched_role_skills=[s for s in selection.skills if s not in claimed],
                source=selection.source,
            ),
        )
        self.tracer.match_computed(role_id, result)
        return result


def score_role(
    user_skills: Iterable[Any] | None,
    role_data: Any,
    config: MatchingConfig | None = None,
    *,
    role_id: str | None = None,
    tracer: MatchTracer | None = None,
    taxonomy: SkillTaxonomy | None = None,
) -> RoleMatchScore:
    """Score ``user_skills`` against a single role."""
    scorer = MatchScorer(config=config, taxonomy=taxonomy, tracer=tracer)
    return scorer.score(user_skills, role_data, role_id=role_id)
