"""Tests for the batch orchestrator."""

import asyncio
import threading
import time

import pytest

from models.requests import BatchMatchRequest
from models.schemas.batch_result import BatchMatchResult, MatchErrorCode
from models.schemas.match_result import MatchingConfig
from models.schemas.role_data import RoleData
from models.schemas.skill import UserSkill
from services.pipeline.orchestrator import run_batch, run_batch_request, run_batch_sync


USER_SKILLS = [
    UserSkill(name="React"),
    UserSkill(name="TypeScript"),
    UserSkill(name="Node.js"),
    UserSkill(name="PostgreSQL"),
    UserSkill(name="Docker"),
]

ROLES = {
    "frontend": {
        "id": "frontend",
        "requirements": ["React", "TypeScript", "Node.js"],
        "skills": [{"name": "CSS"}],
    },
    "backend": {"id": "backend", "ai_key_skills": ["PostgreSQL", "Docker", "Go"]},
    "culture": {"id": "culture", "description": "We value teamwork"},
}


def _sync_provider(role_id):
    if role_id == "broken":
        raise RuntimeError("database unavailable")
    return ROLES.get(role_id)


async def _async_provider(role_id):
    await asyncio.sleep(0)
    return _sync_provider(role_id)


class TestRunBatch:
    @pytest.mark.asyncio
    async def test_missing_and_failing_roles_are_isolated(self):
        result = await run_batch(
            "user-1", ["missing", "broken", "frontend"], USER_SKILLS, _async_provider
        )
        assert isinstance(result, BatchMatchResult)
        assert result.user_id == "user-1"
        assert result.total_processed == 3
        assert len(result.role_scores) == 1
        assert result.role_scores[0].role_id == "frontend"
        assert result.role_scores[0].overall_score == 60

        errors = {e.role_id: e for e in result.errors}
        assert len(errors) == 2
        assert errors["missing"].error_code == MatchErrorCode.ROLE_NOT_FOUND
        assert errors["missing"].message == "Role with ID missing not found"
        assert errors["broken"].error_code == MatchErrorCode.PROCESSING_ERROR
        assert errors["broken"].message == "database unavailable"

    @pytest.mark.asyncio
    async def test_sync_provider_runs_in_worker_thread(self):
        main_thread = threading.get_ident()
        seen_threads = []

        def provider(role_id):
            seen_threads.append(threading.get_ident())
            return ROLES.get(role_id)

        result = await run_batch("user-1", ["frontend", "backend"], USER_SKILLS, provider)
        assert len(result.role_scores) == 2
        assert seen_threads and main_thread not in seen_threads

    @pytest.mark.asyncio
    async def test_scores_every_role(self):
        result = await run_batch(
            "user-1", ["frontend", "backend", "culture"], USER_SKILLS, _sync_provider
        )
        scores = {s.role_id: s for s in result.role_scores}
        assert scores["frontend"].overall_score == 60
        assert scores["backend"].overall_score == 40
        assert scores["culture"].has_skills_listed is False
        assert scores["culture"].overall_score == 0
        assert result.errors == []

    @pytest.mark.asyncio
    async def test_timeout_is_a_processing_error(self):
        async def provider(role_id):
            if role_id == "slow":
                await asyncio.sleep(5)
            return ROLES.get(role_id)

        result = await run_batch(
            "user-1", ["slow", "frontend"], USER_SKILLS, provider, provider_timeout=0.05
        )
        assert [s.role_id for s in result.role_scores] == ["frontend"]
        assert len(result.errors) == 1
        assert result.errors[0].role_id == "slow"
        assert result.errors[0].error_code == MatchErrorCode.PROCESSING_ERROR
        assert "timed out" in result.errors[0].message

    @pytest.mark.asyncio
    async def test_provider_cancellation_is_a_processing_error(self):
        async def provider(role_id):
            if role_id == "cancelled":
                raise asyncio.CancelledError()
            return ROLES.get(role_id)

        result = await run_batch("user-1", ["cancelled", "frontend"], USER_SKILLS, provider)
        assert len(result.role_scores) == 1
        assert result.errors[0].role_id == "cancelled"
        assert result.errors[0].error_code == MatchErrorCode.PROCESSING_ERROR

    @pytest.mark.asyncio
    async def test_cancelling_the_batch_propagates(self):
        started = asyncio.Event()

        async def provider(role_id):
            started.set()
            await asyncio.sleep(5)
            return ROLES.get(role_id)

        task = asyncio.create_task(run_batch("user-1", ["frontend"], USER_SKILLS, provider))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        active = 0
        peak = 0

        async def provider(role_id):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return ROLES["frontend"]

        role_ids = [f"role-{i}" for i in range(10)]
        result = await run_batch("user-1", role_ids, USER_SKILLS, provider, max_concurrency=3)
        assert len(result.role_scores) == 10
        assert peak == 3

    @pytest.mark.asyncio
    async def test_output_follows_input_order(self):
        role_ids = ["culture", "frontend", "backend"]
        result = await run_batch("user-1", role_ids, USER_SKILLS, _async_provider)
        assert [s.role_id for s in result.role_scores] == role_ids

    @pytest.mark.asyncio
    async def test_role_data_objects_accepted(self):
        async def provider(role_id):
            return RoleData(ai_key_skills=["Docker"])

        result = await run_batch("user-1", ["r1"], USER_SKILLS, provider)
        assert result.role_scores[0].role_id == "r1"
        assert result.role_scores[0].overall_score == 20

    @pytest.mark.asyncio
    async def test_config_is_applied(self):
        config = MatchingConfig(skills_weight=0.5)
        result = await run_batch("user-1", ["frontend"], USER_SKILLS, _async_provider, config)
        assert result.role_scores[0].overall_score == 30

    @pytest.mark.asyncio
    async def test_processing_time_measured(self):
        async def provider(role_id):
            await asyncio.sleep(0.02)
            return ROLES.get(role_id)

        result = await run_batch("user-1", ["frontend"], USER_SKILLS, provider)
        assert result.processing_time_ms >= 15

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        result = await run_batch("user-1", [], USER_SKILLS, _async_provider)
        assert result.total_processed == 0
        assert result.role_scores == []
        assert result.errors == []


class TestBatchRequest:
    @pytest.mark.asyncio
    async def test_run_batch_request(self):
        request = BatchMatchRequest(
            user_id="user-2",
            role_ids=["frontend", "missing"],
            user_skills=[{"name": "React"}, {"name": "Vue"}],
        )
        result = await run_batch_request(request, _async_provider)
        assert result.user_id == "user-2"
        assert result.role_scores[0].overall_score == 50
        assert result.errors[0].error_code == MatchErrorCode.ROLE_NOT_FOUND

    def test_request_requires_role_ids(self):
        with pytest.raises(ValueError):
            BatchMatchRequest(user_id="user-2", role_ids=[], user_skills=[])

    def test_request_requires_user_id(self):
        with pytest.raises(ValueError):
            BatchMatchRequest(user_id="", role_ids=["frontend"], user_skills=[])

    def test_request_batch_size_limit(self):
        with pytest.raises(ValueError, match="Too many roles"):
            BatchMatchRequest(
                user_id="user-2",
                role_ids=[f"r{i}" for i in range(101)],
                user_skills=[],
            )


def test_run_batch_sync():
    def provider(role_id):
        time.sleep(0.001)
        return ROLES.get(role_id)

    result = run_batch_sync("user-3", ["frontend", "nope"], USER_SKILLS, provider)
    assert result.total_processed == 2
    assert result.role_scores[0].overall_score == 60
    assert result.errors[0].role_id == "nope"
