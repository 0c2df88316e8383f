"""Data models shared by the API and the client"""

from .workflow import (
    DEFAULT_HUMAN,
    HUMAN_ASSIGNEES,
    PLAYBOOK_SECTIONS,
    PlaybookSection,
    PlaybookSubmission,
    StatusUpdateRequest,
    Step,
    Submission,
    WorkflowPayload,
    WorkflowRecord,
    WorkflowSubmission,
    get_section,
    isoformat_utc,
)

__all__ = [
    "DEFAULT_HUMAN",
    "HUMAN_ASSIGNEES",
    "PLAYBOOK_SECTIONS",
    "PlaybookSection",
    "PlaybookSubmission",
    "StatusUpdateRequest",
    "Step",
    "Submission",
    "WorkflowPayload",
    "WorkflowRecord",
    "WorkflowSubmission",
    "get_section",
    "isoformat_utc",
]
