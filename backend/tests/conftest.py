"""Shared test fixtures."""

import pytest

from services.pipeline import role_skill_selector


@pytest.fixture(autouse=True)
def _reset_default_selector():
    """Clear the cached default selector before and after each test."""
    role_skill_selector._default_selector = None
    yield
    role_skill_selector._default_selector = None
