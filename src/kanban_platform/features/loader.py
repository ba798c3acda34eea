"""Resolve the ``{feature_id}`` path segment before a handler runs.

Handlers that need an existing feature declare a :data:`LoadedFeature`
parameter.  FastAPI resolves it first; a miss ends the request with
``404`` and the handler body never executes.  The resolved record is a
snapshot taken at resolution time, not a lock.
"""

from __future__ import annotations

import uuid  # noqa: TC003 - FastAPI needs runtime access
from typing import Annotated

from fastapi import Depends

from kanban_platform.db.models import FeatureRecord  # noqa: TC001
from kanban_platform.deps import StoreDep  # noqa: TC001
from kanban_platform.exceptions import NotFoundError


async def load_feature(feature_id: uuid.UUID, store: StoreDep) -> FeatureRecord:
    """Return the feature named by the path or raise :class:`NotFoundError`."""
    record = await store.find_by_id(str(feature_id))
    if record is None:
        msg = f"Feature not found: {feature_id}"
        raise NotFoundError(msg, details={"feature_id": str(feature_id)})
    return record


LoadedFeature = Annotated[FeatureRecord, Depends(load_feature)]
