"""Pydantic schemas for the features API."""

from __future__ import annotations

import uuid  # noqa: TC003 - pydantic needs runtime access
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kanban_platform.exceptions import ValidationFailedError


def _require_text(value: str) -> str:
    if not value.strip():
        msg = "name must not be blank"
        raise ValidationFailedError(msg)
    return value


class CreateFeature(BaseModel):
    """POST /api/features — create a feature inside a project."""

    project_id: uuid.UUID
    name: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        return _require_text(value)


class UpdateFeature(BaseModel):
    """PUT /api/features/{id} — partial update; ``None`` keeps the stored value."""

    name: str | None = Field(default=None, min_length=1)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str | None) -> str | None:
        return None if value is None else _require_text(value)


class Feature(BaseModel):
    """Feature as returned to API clients."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    project_id: uuid.UUID
    name: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes for timezone-aware columns.
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
