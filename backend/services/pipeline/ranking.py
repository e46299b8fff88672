"""Pure helpers for ordering, filtering and summarizing role scores."""

from collections.abc import Iterable
from typing import Literal

import numpy as np

from models.schemas.batch_result import FilteringStatistics, MatchingStatistics
from models.schemas.match_result import MatchingConfig, RoleMatchScore
from services.pipeline.match_scorer import round_half_up

HIGH_SCORE_THRESHOLD = 70  # strictly above
MEDIUM_SCORE_THRESHOLD = 40  # inclusive


def sort_by_score(scores: Iterable[RoleMatchScore]) -> list[RoleMatchScore]:
    """Best first: score, then skills matched, then roles with listed skills.

    Stable, so fully tied roles keep their input order.
    """
    return sorted(
        scores,
        key=lambda s: (-s.overall_score, -s.skills_matched, not s.has_skills_listed),
    )


def filter_by_min_score(
    scores: Iterable[RoleMatchScore],
    min_score: int | None = None,
    config: MatchingConfig | None = None,
) -> list[RoleMatchScore]:
    """Keep roles scoring at least ``min_score``.

    Without an explicit ``min_score`` the threshold comes from ``config``,
    falling back to the ``minimum_score_threshold`` setting.
    """
    if min_score is None:
        config = config or MatchingConfig.from_settings()
        min_score = config.minimum_score_threshold
    return [s for s in scores if s.overall_score >= min_score]


def filter_by_score_range(
    scores: Iterable[RoleMatchScore],
    min_score: int = 0,
    max_score: int = 100,
) -> list[RoleMatchScore]:
    """Keep roles whose score lies in ``[min_score, max_score]``."""
    return [s for s in scores if min_score <= s.overall_score <= max_score]


def filter_with_skills_listed(scores: Iterable[RoleMatchScore]) -> list[RoleMatchScore]:
    return [s for s in scores if s.has_skills_listed]


def top_roles(scores: Iterable[RoleMatchScore], limit: int = 10) -> list[RoleMatchScore]:
    if limit <= 0:
        return []
    return sort_by_score(scores)[:limit]


def apply_match_filters(
    scores: Iterable[RoleMatchScore],
    min_score: int = 0,
    max_score: int = 100,
    require_skills_listed: bool = False,
    direction: Literal["asc", "desc"] = "desc",
) -> list[RoleMatchScore]:
    """Score range, optional skills-listed filter, then ordering.

    ``desc`` is :func:`sort_by_score`. ``asc`` keeps roles with listed skills
    ahead of the rest and orders each group by increasing score.
    """
    kept = filter_by_score_range(scores, min_score, max_score)
    if require_skills_listed:
        kept = filter_with_skills_listed(kept)
    if direction == "asc":
        return sorted(kept, key=lambda s: (not s.has_skills_listed, s.overall_score))
    return sort_by_score(kept)


def filtering_statistics(
    scores: Iterable[RoleMatchScore],
    filtered: Iterable[RoleMatchScore],
) -> FilteringStatistics:
    """Compare a filtered list against the full one.

    Unlike :func:`statistics`, the average skips zero scores as well as
    roles without listed skills.
    """
    scores = list(scores)
    nonzero = np.array(
        [s.overall_score for s in scores if s.has_skills_listed and s.overall_score > 0],
        dtype=float,
    )
    return FilteringStatistics(
        total=len(scores),
        filtered=len(list(filtered)),
        with_skills=sum(1 for s in scores if s.has_skills_listed),
        average_score=round_half_up(float(nonzero.mean())) if nonzero.size else 0,
    )


def statistics(scores: Iterable[RoleMatchScore]) -> MatchingStatistics:
    """Summarize a batch. Averages and tiers only count roles with listed skills."""
    scores = list(scores)
    scored = np.array(
        [s.overall_score for s in scores if s.has_skills_listed], dtype=float
    )

    average = round_half_up(float(scored.mean())) if scored.size else 0
    return MatchingStatistics(
        total_roles=len(scores),
        roles_with_skills=int(scored.size),
        roles_without_skills=len(scores) - int(scored.size),
        average_score=average,
        high_score_roles=int(np.count_nonzero(scored > HIGH_SCORE_THRESHOLD)),
        medium_score_roles=int(np.count_nonzero(
            (scored >= MEDIUM_SCORE_THRESHOLD) & (scored <= HIGH_SCORE_THRESHOLD)
        )),
        low_score_roles=int(np.count_nonzero(scored < MEDIUM_SCORE_THRESHOLD)),
    )
