"""SQLAlchemy 2.0 ORM models for the Kanban platform."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - SQLAlchemy needs runtime access

from sqlalchemy import (
    DateTime,
    ForeignKey,
    String,
    Text,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)


class Base(DeclarativeBase):
    """Declarative base for all Kanban platform models."""


# ------------------------------------------------------------------
# ProjectRecord  (owned by the projects subsystem, referenced by FK)
# ------------------------------------------------------------------


class ProjectRecord(Base):
    """Parent project that features are scoped to."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
    )
    name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )


# ------------------------------------------------------------------
# FeatureRecord
# ------------------------------------------------------------------


class FeatureRecord(Base):
    """Named item scoped to a project.

    ``id``, ``project_id`` and ``created_at`` never change after insert;
    ``updated_at`` is refreshed by every successful mutation.
    """

    __tablename__ = "features"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
    )
    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id"),
        index=True,
    )
    name: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
    )
