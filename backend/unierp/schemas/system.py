"""System Schemas — key/value settings."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SettingUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    value: str = Field(max_length=1000)
    updated_by: UUID | None = None


class SettingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    value: str
    updated_at: datetime
    updated_by: UUID | None = None
