from pydantic import BaseModel, Field, model_validator

from config import settings
from models.schemas.skill import UserSkill


class BatchMatchRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="Owner of the skill profile")
    role_ids: list[str] = Field(..., min_length=1, description="Roles to score")
    user_skills: list[UserSkill] = Field(default_factory=list, description="Declared skill profile")

    @model_validator(mode="after")
    def _check_batch_size(self) -> "BatchMatchRequest":
        if len(self.role_ids) > settings.max_batch_size:
            raise ValueError(
                f"Too many roles in one batch: {len(self.role_ids)} (max {settings.max_batch_size})"
            )
        return self
