# src/playbook_studio/models/workflow.py
"""Pydantic models for workflows, playbooks and their steps"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, StrictBool, model_validator

logger = logging.getLogger(__name__)


Executor = Literal["ai", "human"]
HumanAssignee = Literal["Femi Ibrahim", "Jason Mao"]
PlaybookSectionId = Literal["failing-to-close", "deals-drop-off", "not-moving-forward", "acv-off-whack"]

HUMAN_ASSIGNEES: tuple = ("Femi Ibrahim", "Jason Mao")
DEFAULT_HUMAN = HUMAN_ASSIGNEES[0]


@dataclass(frozen=True)
class PlaybookSection:
    """One of the fixed categories playbooks are grouped under"""
    id: str
    title: str
    description: str


PLAYBOOK_SECTIONS: tuple = (
    PlaybookSection(
        id="failing-to-close",
        title="Rep is failing to close deals",
        description=(
            "Comprehensive playbooks designed to help sales reps overcome common obstacles in the deal "
            "closure process, including objection handling, pricing negotiations, and timing issues."
        ),
    ),
    PlaybookSection(
        id="deals-drop-off",
        title="Deals drop off in negotiation",
        description=(
            "Strategic approaches to prevent deal abandonment during critical negotiation phases, with "
            "focus on maintaining momentum and addressing buyer concerns."
        ),
    ),
    PlaybookSection(
        id="not-moving-forward",
        title="Rep is not moving deals forward in earlier stages",
        description=(
            "Tactical workflows to accelerate deal progression through discovery, qualification, and "
            "proposal stages with systematic follow-up strategies."
        ),
    ),
    PlaybookSection(
        id="acv-off-whack",
        title="ACV optimization strategies",
        description=(
            "Data-driven approaches to optimize Annual Contract Value through upselling, cross-selling, "
            "and strategic pricing adjustments."
        ),
    ),
)


def get_section(section_id: Optional[str]) -> Optional[PlaybookSection]:
    for section in PLAYBOOK_SECTIONS:
        if section.id == section_id:
            return section
    return None


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    """Serialize a timestamp the way browsers do (millisecond precision, 'Z' suffix)"""
    if value is None:
        return None
    if value.tzinfo is None:
        # BSON dates come back naive, always UTC
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ===== Step =====

class Step(BaseModel):
    """One instruction in a workflow, executed by the AI or by a named human"""
    model_config = ConfigDict(frozen=True)

    id: Union[int, str]
    instruction: str = ""
    executor: Executor = "ai"
    assignedHuman: Optional[HumanAssignee] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_assignee(cls, data: Any) -> Any:
        # assignedHuman exists iff executor == "human"
        if isinstance(data, dict):
            data = dict(data)
            if data.get("executor", "ai") == "ai":
                data.pop("assignedHuman", None)
            elif not data.get("assignedHuman"):
                data["assignedHuman"] = DEFAULT_HUMAN
        return data

    def to_doc(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


# ===== Stored record =====

class WorkflowRecord(BaseModel):
    """Workflow document; isPlaybook marks reusable playbook templates"""
    id: str
    title: str
    steps: List[Step] = []
    isRunning: bool = False
    isPlaybook: bool = False
    playbookSection: Optional[PlaybookSectionId] = None
    playbook_description: str = ""
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "WorkflowRecord":
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return cls(**doc)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with ISO-8601 timestamps"""
        return {
            "id": self.id,
            "title": self.title,
            "steps": [step.to_doc() for step in self.steps],
            "isRunning": self.isRunning,
            "isPlaybook": self.isPlaybook,
            "playbookSection": self.playbookSection,
            "playbook_description": self.playbook_description,
            "createdAt": isoformat_utc(self.createdAt),
            "updatedAt": isoformat_utc(self.updatedAt),
        }


# ===== Request models =====

class WorkflowPayload(BaseModel):
    """Body of create and update requests.

    Only title and steps are required; on update the optional playbook
    fields are written only when the caller sent them (see model_fields_set).
    """
    title: str
    steps: List[Step]
    isPlaybook: StrictBool = False
    playbook_description: str = ""
    playbookSection: Optional[PlaybookSectionId] = None


class StatusUpdateRequest(BaseModel):
    isRunning: StrictBool


# ===== Client submissions =====

class _SubmissionBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    steps: List[Step]
    playbook_description: str = ""

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", exclude={"steps"})
        payload["steps"] = [step.to_doc() for step in self.steps]
        return payload


class WorkflowSubmission(_SubmissionBase):
    """A plain workflow; never carries a playbook section"""
    isPlaybook: Literal[False] = False
    playbookSection: None = None


class PlaybookSubmission(_SubmissionBase):
    """A playbook template; the section is mandatory"""
    isPlaybook: Literal[True] = True
    playbookSection: PlaybookSectionId


Submission = Union[WorkflowSubmission, PlaybookSubmission]
