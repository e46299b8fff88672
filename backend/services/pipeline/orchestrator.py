"""Batch orchestrator: score one user's skills against many roles.

Flow per role id (concurrently, bounded by a semaphore):
    role_provider(role_id)          → role data | None
      ├─ None                       → MatchError(ROLE_NOT_FOUND)
      ├─ raises / times out         → MatchError(PROCESSING_ERROR)
      └─ MatchScorer.score(...)     → RoleMatchScore

A failing role never affects the others. Cancelling the batch itself still
cancels every in-flight fetch.
"""

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any

from config import settings
from models.requests import BatchMatchRequest
from models.schemas.batch_result import BatchMatchResult, MatchError, MatchErrorCode
from models.schemas.match_result import MatchingConfig, RoleMatchScore
from services.pipeline.match_scorer import MatchScorer, coerce_user_skills
from services.pipeline.tracing import MatchTracer, get_tracer
from services.skill_taxonomy import SkillTaxonomy

logger = logging.getLogger(__name__)

RoleProvider = Callable[[str], Any | Awaitable[Any]]


def _is_async_callable(fn: Any) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    )


async def _fetch_role(provider: RoleProvider, role_id: str, timeout: float | None) -> Any:
    """Call the provider; plain callables run in a worker thread."""
    if _is_async_callable(provider):
        call = provider(role_id)
    else:
        call = asyncio.to_thread(provider, role_id)
    role = await asyncio.wait_for(call, timeout)
    if inspect.isawaitable(role):
        role = await asyncio.wait_for(role, timeout)
    return role


def _processing_error(role_id: str, message: str) -> MatchError:
    return MatchError(
        role_id=role_id,
        message=message,
        error_code=MatchErrorCode.PROCESSING_ERROR,
    )


async def run_batch(
    user_id: str,
    role_ids: Sequence[str],
    user_skills: Iterable[Any] | None,
    role_provider: RoleProvider,
    config: MatchingConfig | None = None,
    *,
    max_concurrency: int | None = None,
    provider_timeout: float | None = None,
    tracer: MatchTracer | None = None,
    taxonomy: SkillTaxonomy | None = None,
) -> BatchMatchResult:
    """Score ``user_skills`` against every role in ``role_ids``.

    Missing roles and provider failures are collected into ``errors``;
    successful scores are returned in ``role_scores``.
    """
    start = time.perf_counter()
    role_ids = list(role_ids)

    scorer = MatchScorer(
        config=config,
        taxonomy=taxonomy,
        tracer=tracer or get_tracer(),
    )
    skills = coerce_user_skills(user_skills, scorer.taxonomy)
    limit = max_concurrency or settings.batch_max_concurrency
    timeout = provider_timeout if provider_timeout is not None else settings.provider_timeout_seconds
    semaphore = asyncio.Semaphore(limit)

    async def _process(role_id: str) -> RoleMatchScore | MatchError:
        async with semaphore:
            try:
                role = await _fetch_role(role_provider, role_id, timeout)
            except asyncio.CancelledError:
                task = asyncio.current_task()
                if task is not None and task.cancelling():
                    raise
                logger.warning("Role provider cancelled while fetching role %s", role_id)
                return _processing_error(role_id, f"Fetching role {role_id} was cancelled")
            except TimeoutError:
                logger.warning("Role provider timed out after %ss for role %s", timeout, role_id)
                return _processing_error(
                    role_id, f"Fetching role {role_id} timed out after {timeout}s"
                )
            except Exception as e:
                logger.warning("Role provider failed for role %s: %s", role_id, e)
                return _processing_error(role_id, str(e) or "Unknown error")

        if role is None:
            logger.info("Role %s not found", role_id)
            return MatchError(
                role_id=role_id,
                message=f"Role with ID {role_id} not found",
                error_code=MatchErrorCode.ROLE_NOT_FOUND,
            )

        try:
            return scorer.score(skills, role, role_id=role_id)
        except Exception as e:
            logger.warning("Scoring failed for role %s: %s", role_id, e)
            return _processing_error(role_id, str(e) or "Unknown error")

    outcomes = await asyncio.gather(*(_process(role_id) for role_id in role_ids))

    role_scores = [o for o in outcomes if isinstance(o, RoleMatchScore)]
    errors = [o for o in outcomes if isinstance(o, MatchError)]
    elapsed_ms = (time.perf_counter() - start) * 1000

    logger.info(
        "Batch for user %s: %d roles, %d scored, %d errors in %.1fms",
        user_id, len(role_ids), len(role_scores), len(errors), elapsed_ms,
    )
    return BatchMatchResult(
        user_id=user_id,
        role_scores=role_scores,
        errors=errors,
        total_processed=len(role_ids),
        processing_time_ms=elapsed_ms,
    )


async def run_batch_request(
    request: BatchMatchRequest,
    role_provider: RoleProvider,
    config: MatchingConfig | None = None,
    **kwargs: Any,
) -> BatchMatchResult:
    """Run a batch from a validated ``BatchMatchRequest``."""
    return await run_batch(
        request.user_id,
        request.role_ids,
        request.user_skills,
        role_provider,
        config,
        **kwargs,
    )


def run_batch_sync(
    user_id: str,
    role_ids: Sequence[str],
    user_skills: Iterable[Any] | None,
    role_provider: RoleProvider,
    config: MatchingConfig | None = None,
    **kwargs: Any,
) -> BatchMatchResult:
    """Blocking wrapper around :func:`run_batch` for code without an event loop."""
    return asyncio.run(
        run_batch(user_id, role_ids, user_skills, role_provider, config, **kwargs)
    )
