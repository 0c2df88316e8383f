"""Workflow persistence"""

from .workflow_repository import WorkflowRepository, UtcClock

__all__ = [
    "WorkflowRepository",
    "UtcClock",
]
