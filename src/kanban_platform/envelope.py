"""Uniform success envelope wrapped around every API payload."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):  # noqa: UP046
    """``{"success": true, "data": ..., "message": null}``.

    Failures never use this model; they are rendered by
    :mod:`kanban_platform.middleware.errors` with ``success`` set to false.
    """

    success: bool = True
    data: T | None = None
    message: str | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> ApiResponse[T]:
        return cls(success=True, data=data)
