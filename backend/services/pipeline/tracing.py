"""Hooks for observing how a role was scored.

The scorer calls a tracer at two points: after role skills are selected and
after the match score is computed. ``NullTracer`` is the default and does
nothing. ``LoggingTracer`` writes DEBUG records.
"""

import logging

from config import Settings, settings as default_settings
from models.schemas.match_result import RoleMatchScore
from models.schemas.role_skills import RoleSkillSelection

logger = logging.getLogger(__name__)


class MatchTracer:
    """Base tracer. Subclasses override the hooks they care about."""

    def role_skills_selected(self, role_id: str, selection: RoleSkillSelection) -> None:
        pass

    def match_computed(self, role_id: str, score: RoleMatchScore) -> None:
        pass


class NullTracer(MatchTracer):
    pass


class LoggingTracer(MatchTracer):
    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def role_skills_selected(self, role_id: str, selection: RoleSkillSelection) -> None:
        if not self._log.isEnabledFor(logging.DEBUG):
            return
        self._log.debug(
            "Role %s: %d skills from %s (sources: %s)",
            role_id,
            len(selection.skills),
            selection.source.value if selection.source else "none",
            ", ".join(s.value for s in selection.sources_used) or "none",
        )

    def match_computed(self, role_id: str, score: RoleMatchScore) -> None:
        if not self._log.isEnabledFor(logging.DEBUG):
            return
        self._log.debug(
            "Role %s: score=%d matched=%d/%d [%s]",
            role_id,
            score.overall_score,
            score.skills_matched,
            score.total_skills,
            ", ".join(
                f"{m.user_skill}->{m.skill_name} ({m.match_type}, {m.confidence:.2f})"
                for m in score.matched_skills
            ),
        )


NULL_TRACER = NullTracer()


def get_tracer(s: Settings | None = None) -> MatchTracer:
    """Pick the tracer configured by ``trace_matching``."""
    s = s or default_settings
    return LoggingTracer() if s.trace_matching else NULL_TRACER
