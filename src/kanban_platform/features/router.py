"""REST API for features — /api/features/*."""

from __future__ import annotations

import uuid  # noqa: TC003 - FastAPI needs runtime access
from typing import Annotated

from fastapi import APIRouter, Query

from kanban_platform.deps import StoreDep, TrackerDep  # noqa: TC001
from kanban_platform.envelope import ApiResponse
from kanban_platform.exceptions import NotFoundError
from kanban_platform.features.loader import LoadedFeature  # noqa: TC001
from kanban_platform.features.schemas import (  # noqa: TC001
    CreateFeature,
    Feature,
    UpdateFeature,
)

router = APIRouter(prefix="/api/features", tags=["features"])


# ------------------------------------------------------------------
# Collection
# ------------------------------------------------------------------


@router.get("")
async def list_features(
    store: StoreDep,
    project_id: Annotated[uuid.UUID, Query()],
) -> ApiResponse[list[Feature]]:
    """List the features of a project, ordered by name."""
    records = await store.find_all_by_project(str(project_id))
    return ApiResponse[list[Feature]].ok([Feature.model_validate(r) for r in records])


@router.post("", status_code=201)
async def create_feature(
    body: CreateFeature,
    store: StoreDep,
    tracker: TrackerDep,
) -> ApiResponse[Feature]:
    """Create a feature inside a project."""
    record = await store.create(body)
    tracker.track(
        "feature_created",
        {
            "feature_id": record.id,
            "project_id": record.project_id,
            "feature_name": record.name,
        },
    )
    return ApiResponse[Feature].ok(Feature.model_validate(record))


# ------------------------------------------------------------------
# Single feature (resolved by the loader)
# ------------------------------------------------------------------


@router.get("/{feature_id}")
async def get_feature(feature: LoadedFeature) -> ApiResponse[Feature]:
    """Get feature details."""
    return ApiResponse[Feature].ok(Feature.model_validate(feature))


@router.put("/{feature_id}")
async def update_feature(
    feature: LoadedFeature,
    body: UpdateFeature,
    store: StoreDep,
    tracker: TrackerDep,
) -> ApiResponse[Feature]:
    """Apply a partial update; omitted fields keep their stored value."""
    previous_name = feature.name
    updated = await store.update(feature.id, body)
    tracker.track(
        "feature_updated",
        {
            "feature_id": feature.id,
            "feature_name": updated.name,
            "previous_feature_name": previous_name,
        },
    )
    return ApiResponse[Feature].ok(Feature.model_validate(updated))


@router.delete("/{feature_id}")
async def delete_feature(
    feature: LoadedFeature,
    store: StoreDep,
    tracker: TrackerDep,
) -> ApiResponse[None]:
    """Delete a feature."""
    rows = await store.delete(feature.id)
    if rows == 0:
        msg = f"Feature not found: {feature.id}"
        raise NotFoundError(msg, details={"feature_id": feature.id})
    tracker.track(
        "feature_deleted",
        {"feature_id": feature.id, "project_id": feature.project_id},
    )
    return ApiResponse[None].ok()
