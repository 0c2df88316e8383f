"""View state for the dashboard, editor and login gate.

Each view is an immutable snapshot; every user action is a pure function
from one snapshot to the next. Only the record fields are ever sent to the
API. Tabs, expanded sections and in-flight markers stay here.
"""
from __future__ import annotations
import secrets
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from ..errors import ValidationError
from ..models.workflow import (
    PlaybookSubmission,
    Step,
    Submission,
    WorkflowRecord,
    WorkflowSubmission,
    get_section,
)
from .result import Result

TABS = ("workflows", "playbooks")
ACTIONS = ("status", "delete")


# ===== Display helpers =====

def steps_summary(steps: Iterable[Step]) -> str:
    steps = list(steps or [])
    if not steps:
        return "No steps"
    ai_steps = sum(1 for step in steps if step.executor == "ai")
    human_steps = sum(1 for step in steps if step.executor == "human")
    parts = []
    if ai_steps:
        parts.append(f"{ai_steps} AI")
    if human_steps:
        parts.append(f"{human_steps} Human")
    return ", ".join(parts)


def format_date(value: Optional[datetime]) -> str:
    if value is None:
        return "Unknown"
    return f"{value:%b} {value.day}, {value.year}"


# ===== Dashboard =====

@dataclass(frozen=True)
class DashboardState:
    records: Tuple[WorkflowRecord, ...] = ()
    is_loading: bool = True
    active_tab: str = "workflows"
    expanded_section: Optional[str] = None
    updating_status: FrozenSet[str] = frozenset()
    deleting: FrozenSet[str] = frozenset()


def loaded(state: DashboardState, records: Iterable[WorkflowRecord]) -> DashboardState:
    return replace(state, records=tuple(records), is_loading=False)


def load_failed(state: DashboardState) -> DashboardState:
    return replace(state, is_loading=False)


def _action_field(kind: str) -> str:
    if kind not in ACTIONS:
        raise ValueError(f"Unknown action '{kind}'")
    return "updating_status" if kind == "status" else "deleting"


def begin_action(state: DashboardState, kind: str, record_id: str) -> DashboardState:
    """Mark a record as busy for one kind of action (disables that control for that row only)"""
    field_name = _action_field(kind)
    return replace(state, **{field_name: getattr(state, field_name) | {record_id}})


def end_action(state: DashboardState, kind: str, record_id: str) -> DashboardState:
    field_name = _action_field(kind)
    return replace(state, **{field_name: getattr(state, field_name) - {record_id}})


def is_busy(state: DashboardState, kind: str, record_id: str) -> bool:
    return record_id in getattr(state, _action_field(kind))


def find_record(state: DashboardState, record_id: str) -> Optional[WorkflowRecord]:
    for record in state.records:
        if record.id == record_id:
            return record
    return None


def apply_status_toggled(state: DashboardState, record_id: str, is_running: bool) -> DashboardState:
    records = tuple(
        record.model_copy(update={"isRunning": is_running}) if record.id == record_id else record
        for record in state.records
    )
    return replace(state, records=records)


def apply_deleted(state: DashboardState, record_id: str) -> DashboardState:
    return replace(state, records=tuple(r for r in state.records if r.id != record_id))


def select_tab(state: DashboardState, tab: str) -> DashboardState:
    if tab not in TABS:
        raise ValueError(f"Unknown tab '{tab}'")
    return replace(state, active_tab=tab)


def toggle_section(state: DashboardState, section_id: str) -> DashboardState:
    """Expand a playbook section, or collapse it when it is already open"""
    if get_section(section_id) is None:
        raise ValueError(f"Unknown playbook section '{section_id}'")
    expanded = None if state.expanded_section == section_id else section_id
    return replace(state, expanded_section=expanded)


def visible_records(state: DashboardState) -> List[WorkflowRecord]:
    if state.active_tab == "playbooks":
        return [r for r in state.records if r.isPlaybook]
    return [r for r in state.records if not r.isPlaybook]


def records_for_section(state: DashboardState, section_id: str) -> List[WorkflowRecord]:
    return [r for r in state.records if r.isPlaybook and r.playbookSection == section_id]


def tab_counts(state: DashboardState) -> Dict[str, int]:
    playbooks = sum(1 for r in state.records if r.isPlaybook)
    return {"workflows": len(state.records) - playbooks, "playbooks": playbooks}


# ===== Editor =====

@dataclass(frozen=True)
class EditorState:
    workflow_id: Optional[str] = None
    title: str = ""
    steps: Tuple[Step, ...] = ()
    is_playbook: bool = False
    playbook_description: str = ""
    playbook_section: Optional[str] = None
    is_saving: bool = False


def blank_editor() -> EditorState:
    return EditorState(steps=(Step(id=1),))


def editor_from_record(record: WorkflowRecord) -> EditorState:
    return EditorState(
        workflow_id=record.id,
        title=record.title,
        steps=tuple(record.steps),
        is_playbook=record.isPlaybook,
        playbook_description=record.playbook_description or "",
        playbook_section=record.playbookSection,
    )


def _next_step_id(state: EditorState) -> int:
    numeric = [step.id for step in state.steps if isinstance(step.id, int)]
    return max(numeric, default=0) + 1


def _index_of(state: EditorState, step_id: Union[int, str]) -> int:
    for index, step in enumerate(state.steps):
        if step.id == step_id:
            return index
    raise KeyError(step_id)


def _replace_step(state: EditorState, step_id: Union[int, str], **changes) -> EditorState:
    index = _index_of(state, step_id)
    # Re-validate so the executor/assignee rule is applied on every change
    step = Step.model_validate({**state.steps[index].to_doc(), **changes})
    steps = state.steps[:index] + (step,) + state.steps[index + 1:]
    return replace(state, steps=steps)


def set_title(state: EditorState, title: str) -> EditorState:
    return replace(state, title=title)


def set_playbook(state: EditorState, is_playbook: bool) -> EditorState:
    return replace(state, is_playbook=is_playbook)


def set_section(state: EditorState, section_id: Optional[str]) -> EditorState:
    if section_id is not None and get_section(section_id) is None:
        raise ValueError(f"Unknown playbook section '{section_id}'")
    return replace(state, playbook_section=section_id)


def set_description(state: EditorState, description: str) -> EditorState:
    return replace(state, playbook_description=description)


def add_step(state: EditorState, step_id: Optional[Union[int, str]] = None) -> EditorState:
    step = Step(id=step_id if step_id is not None else _next_step_id(state))
    return replace(state, steps=state.steps + (step,))


def delete_step(state: EditorState, step_id: Union[int, str]) -> EditorState:
    """Remove a step; the last remaining step cannot be removed"""
    if len(state.steps) <= 1:
        return state
    return replace(state, steps=tuple(s for s in state.steps if s.id != step_id))


def update_instruction(state: EditorState, step_id: Union[int, str], instruction: str) -> EditorState:
    return _replace_step(state, step_id, instruction=instruction)


def set_executor(state: EditorState, step_id: Union[int, str], executor: str) -> EditorState:
    """Switching to AI drops the assignee; switching to human keeps or defaults it"""
    return _replace_step(state, step_id, executor=executor)


def assign_human(state: EditorState, step_id: Union[int, str], name: str) -> EditorState:
    return _replace_step(state, step_id, assignedHuman=name)


def _swap(state: EditorState, first: int, second: int) -> EditorState:
    steps = list(state.steps)
    steps[first], steps[second] = steps[second], steps[first]
    return replace(state, steps=tuple(steps))


def move_step_up(state: EditorState, step_id: Union[int, str]) -> EditorState:
    index = _index_of(state, step_id)
    if index == 0:
        return state
    return _swap(state, index - 1, index)


def move_step_down(state: EditorState, step_id: Union[int, str]) -> EditorState:
    index = _index_of(state, step_id)
    if index == len(state.steps) - 1:
        return state
    return _swap(state, index, index + 1)


def bind_id(state: EditorState, workflow_id: str) -> EditorState:
    return replace(state, workflow_id=workflow_id)


def set_saving(state: EditorState, is_saving: bool) -> EditorState:
    return replace(state, is_saving=is_saving)


def build_submission(state: EditorState) -> Result[Submission]:
    """Validate the draft and build what gets sent; failures never reach the network"""
    if not state.title.strip():
        return Result.failure(ValidationError("Please enter a workflow title"))
    if not state.steps:
        return Result.failure(ValidationError("Please add at least one step"))
    if any(not step.instruction.strip() for step in state.steps):
        return Result.failure(ValidationError("Please fill in all step instructions"))
    if state.is_playbook and not state.playbook_section:
        return Result.failure(ValidationError("Please select a section for this playbook"))

    if state.is_playbook:
        submission = PlaybookSubmission(
            title=state.title,
            steps=list(state.steps),
            playbook_description=state.playbook_description,
            playbookSection=state.playbook_section,
        )
    else:
        submission = WorkflowSubmission(
            title=state.title,
            steps=list(state.steps),
            playbook_description=state.playbook_description,
        )
    return Result.success(submission)


# ===== Login =====

@dataclass(frozen=True)
class LoginState:
    password: str = ""
    error: str = ""
    authenticated: bool = False


def type_password(state: LoginState, password: str) -> LoginState:
    return replace(state, password=password, error="")


def attempt_login(state: LoginState, expected_password: str) -> LoginState:
    """Compare with the shared password; a miss clears the field and shows an error"""
    if secrets.compare_digest(state.password.encode(), expected_password.encode()):
        return replace(state, password="", error="", authenticated=True)
    return replace(state, password="", error="Incorrect password", authenticated=False)

