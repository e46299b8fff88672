from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Matching
    fuzzy_match_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    bonus_for_high_level_skills: float = Field(default=1.2, gt=0.0)
    beginner_multiplier: float = Field(default=0.8, gt=0.0)
    skills_weight: float = Field(default=1.0, ge=0.0, le=1.0)
    minimum_score_threshold: int = Field(default=0, ge=0, le=100)

    # "merged" unions the structured sources; "priority" takes the first non-empty one
    skill_source_strategy: Literal["merged", "priority"] = "merged"

    # Batch settings
    batch_max_concurrency: int = Field(default=8, ge=1)
    provider_timeout_seconds: float | None = None
    max_batch_size: int = Field(default=100, ge=1)

    trace_matching: bool = False  # emit DEBUG traces from the scoring path

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
