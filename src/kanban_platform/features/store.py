"""Feature store — persistence for project-scoped features.

The store owns every SQL statement touching the ``features`` table and
nothing else: no HTTP concerns, no analytics.  Lookups report absence
as ``None``; storage problems surface as :class:`StorageFailureError`.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from kanban_platform.db.models import FeatureRecord
from kanban_platform.exceptions import (
    NotFoundError,
    StorageConstraintError,
    StorageFailureError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncSession

    from kanban_platform.features.schemas import CreateFeature, UpdateFeature

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class FeatureStore:
    """CRUD over :class:`FeatureRecord` bound to one session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_all_by_project(self, project_id: str) -> list[FeatureRecord]:
        """Return every feature of *project_id* ordered by name ascending."""
        stmt = (
            select(FeatureRecord)
            .where(FeatureRecord.project_id == project_id)
            .order_by(self._name_ordering())
        )
        async with self._guard("list features"):
            result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_id(self, feature_id: str) -> FeatureRecord | None:
        """Get a feature by primary key, or ``None`` when absent."""
        async with self._guard("load feature"):
            result = await self._session.execute(
                select(FeatureRecord).where(FeatureRecord.id == feature_id)
            )
        return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, data: CreateFeature) -> FeatureRecord:
        """Insert a new feature with a fresh id and identical timestamps."""
        now = _utcnow()
        record = FeatureRecord(
            id=str(uuid.uuid4()),
            project_id=str(data.project_id),
            name=data.name,
            created_at=now,
            updated_at=now,
        )
        async with self._guard("create feature"):
            self._session.add(record)
            await self._session.commit()
            await self._session.refresh(record)
        logger.info(
            "Created feature %s in project %s",
            record.id,
            record.project_id,
            extra={"feature_id": record.id, "project_id": record.project_id},
        )
        return record

    async def update(self, feature_id: str, data: UpdateFeature) -> FeatureRecord:
        """Merge *data* onto the stored row and bump ``updated_at``.

        The merge reads the current row and then writes the merged
        values; a concurrent update landing in between is overwritten.
        """
        existing = await self.find_by_id(feature_id)
        if existing is None:
            msg = f"Feature not found: {feature_id}"
            raise NotFoundError(msg, details={"feature_id": feature_id})

        name = data.name if data.name is not None else existing.name
        stmt = (
            update(FeatureRecord)
            .where(FeatureRecord.id == feature_id)
            .values(name=name, updated_at=_utcnow())
            .returning(FeatureRecord)
        )
        async with self._guard("update feature"):
            result = await self._session.execute(stmt)
            record = result.scalar_one_or_none()
            await self._session.commit()
            if record is not None:
                await self._session.refresh(record)

        if record is None:
            msg = f"Feature not found: {feature_id}"
            raise NotFoundError(msg, details={"feature_id": feature_id})
        logger.info("Updated feature %s", feature_id, extra={"feature_id": feature_id})
        return record

    async def delete(self, feature_id: str) -> int:
        """Hard-delete a feature and return the number of rows removed."""
        async with self._guard("delete feature"):
            result = await self._session.execute(
                delete(FeatureRecord).where(FeatureRecord.id == feature_id)
            )
            await self._session.commit()
        rows: int = result.rowcount  # type: ignore[attr-defined]
        if rows:
            logger.info("Deleted feature %s", feature_id, extra={"feature_id": feature_id})
        return rows

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _name_ordering(self) -> Any:
        # Names sort by codepoint; PostgreSQL needs the C collation for that.
        bind = self._session.bind
        if bind is not None and bind.dialect.name == "postgresql":
            return FeatureRecord.name.collate("C").asc()
        return FeatureRecord.name.asc()

    @asynccontextmanager
    async def _guard(self, action: str) -> AsyncGenerator[None, None]:
        """Translate SQLAlchemy errors raised inside the block.

        The session is rolled back first so it stays usable for the
        rest of the request.
        """
        try:
            yield
        except IntegrityError as exc:
            await self._session.rollback()
            logger.warning("Constraint violation during %s: %s", action, exc.orig)
            msg = f"Could not {action}: constraint violation"
            raise StorageConstraintError(
                msg, details={"action": action, "reason": type(exc).__name__}
            ) from exc
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.exception("Storage failure during %s", action)
            msg = f"Could not {action}: storage failure"
            raise StorageFailureError(
                msg, details={"action": action, "reason": type(exc).__name__}
            ) from exc
