# dependencies/repository.py
"""
Repository dependency for FastAPI routers.

Uses lazy initialization so importing the app never opens a Mongo
connection; tests replace get_repo through app.dependency_overrides.
"""
from typing import Optional
import logging

from fastapi import HTTPException

from ..config import Settings
from ..workflows.workflow_repository import WorkflowRepository

logger = logging.getLogger(__name__)


# Module-level cache for the repository
_repo: Optional[WorkflowRepository] = None


def get_repo() -> WorkflowRepository:
    """
    Get the workflow repository, creating it on first call.

    Raises:
        HTTPException: 503 if the database configuration is missing
    """
    global _repo

    if _repo is not None:
        return _repo

    try:
        settings = Settings.load()
    except RuntimeError as e:
        logger.error(f"Workflow database not configured: {e}")
        raise HTTPException(status_code=503, detail="Workflow database unavailable (configuration missing)")

    _repo = WorkflowRepository.from_settings(settings)
    return _repo


async def close_repo() -> None:
    """Close and forget the cached repository (app shutdown)"""
    global _repo
    if _repo is not None:
        await _repo.close()
        _repo = None
