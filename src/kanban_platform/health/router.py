"""Liveness and readiness endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from kanban_platform import __version__
from kanban_platform.db.models import FeatureRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def liveness() -> dict[str, str]:
    return {"status": "healthy", "version": __version__}


@router.get("/ready")
async def readiness(request: Request) -> JSONResponse:
    """Ready once the features table answers a query."""
    state = request.app.state
    try:
        async with state.session_factory() as session:
            await session.execute(select(FeatureRecord.id).limit(1))
    except (SQLAlchemyError, OSError):
        logger.warning("Readiness check failed", exc_info=True)
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "database": "disconnected"},
        )
    return JSONResponse(
        content={
            "status": "ready",
            "database": "connected",
            "analytics": "on" if state.analytics.enabled else "off",
        },
    )
