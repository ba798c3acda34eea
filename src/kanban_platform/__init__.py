"""Kanban Platform — project-scoped feature management API."""

from __future__ import annotations

__version__ = "0.1.0"

from kanban_platform.app import create_app
from kanban_platform.settings import PlatformSettings

__all__ = [
    "PlatformSettings",
    "__version__",
    "create_app",
]
