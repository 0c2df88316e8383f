"""Controllers for the three client views.

A controller owns the current snapshot of its view. Every remote operation
follows the same two phases: send the request, then apply the pure state
transition only when the request succeeded. Failures are reported through
the blocking notify callback and leave the snapshot as it was.
"""
from __future__ import annotations
import logging
from typing import Callable, Optional, Union

from ..errors import StudioError
from . import state as st
from .api_client import StudioClient
from .result import Result
from .view_config import ViewConfig

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]
Confirm = Callable[[str], bool]


class DashboardController:
    def __init__(self, client: StudioClient, notify: Notify, confirm: Confirm, config: Optional[ViewConfig] = None):
        self.client = client
        self.notify = notify
        self.confirm = confirm
        self.config = config or ViewConfig()
        self.state = st.DashboardState()

    def load(self) -> st.DashboardState:
        """Fetch workflows and playbooks into one list"""
        workflows = self.client.list_workflows()
        if not workflows.ok:
            self.notify(f"Error loading workflows: {workflows.message}")
            self.state = st.load_failed(self.state)
            return self.state
        playbooks = self.client.list_playbooks()
        if not playbooks.ok:
            self.notify(f"Error loading playbooks: {playbooks.message}")
            self.state = st.load_failed(self.state)
            return self.state
        self.state = st.loaded(self.state, list(workflows.value) + list(playbooks.value))
        return self.state

    def select_tab(self, tab: str) -> st.DashboardState:
        self.state = st.select_tab(self.state, tab)
        return self.state

    def toggle_section(self, section_id: str) -> st.DashboardState:
        self.state = st.toggle_section(self.state, section_id)
        return self.state

    def toggle_status(self, record_id: str) -> Result[None]:
        """Run a paused record or pause a running one"""
        record = st.find_record(self.state, record_id)
        if record is None:
            return Result.failure(StudioError(f"Unknown workflow {record_id}"))
        if st.is_busy(self.state, "status", record_id):
            return Result.failure(StudioError("Status update already in progress"))

        target = not record.isRunning
        self.state = st.begin_action(self.state, "status", record_id)
        result = self.client.set_status(record_id, target)
        if result.ok:
            self.state = st.apply_status_toggled(self.state, record_id, target)
        else:
            self.notify(f"Error updating workflow status: {result.message}")
        self.state = st.end_action(self.state, "status", record_id)
        return result

    def delete(self, record_id: str) -> Result[None]:
        """Delete after confirmation; the row disappears only once the server agreed"""
        record = st.find_record(self.state, record_id)
        if record is None:
            return Result.failure(StudioError(f"Unknown workflow {record_id}"))
        if record.isPlaybook and not self.config.allow_playbook_delete:
            refusal = StudioError("Playbooks cannot be deleted from the dashboard")
            self.notify(str(refusal))
            return Result.failure(refusal)
        if st.is_busy(self.state, "delete", record_id):
            return Result.failure(StudioError("Delete already in progress"))
        if not self.confirm(f'Are you sure you want to delete "{record.title}"? This action cannot be undone.'):
            return Result.failure(StudioError("Cancelled"))

        self.state = st.begin_action(self.state, "delete", record_id)
        result = self.client.delete_workflow(record_id)
        if result.ok:
            self.state = st.apply_deleted(self.state, record_id)
        else:
            self.notify(f"Error deleting workflow: {result.message}")
        self.state = st.end_action(self.state, "delete", record_id)
        return result


class EditorController:
    def __init__(self, client: StudioClient, notify: Notify, config: Optional[ViewConfig] = None):
        self.client = client
        self.notify = notify
        self.config = config or ViewConfig()
        self.state = st.blank_editor()

    def open(self, workflow_id: Optional[str] = None) -> st.EditorState:
        """Load a record by id; without one open a blank draft (or the newest workflow when configured)"""
        if workflow_id:
            result = self.client.get_workflow(workflow_id)
            if result.ok:
                self.state = st.editor_from_record(result.value)
            else:
                self.notify(f"Error loading workflow: {result.message}")
                self.state = st.blank_editor()
            return self.state

        self.state = st.blank_editor()
        if self.config.load_latest_when_no_id:
            result = self.client.list_workflows()
            if result.ok and result.value:
                self.state = st.editor_from_record(result.value[0])
            elif not result.ok:
                self.notify(f"Error loading workflows: {result.message}")
        return self.state

    def apply(self, transition: Callable[..., st.EditorState], *args) -> st.EditorState:
        """Run one of the pure editor transitions against the current draft"""
        self.state = transition(self.state, *args)
        return self.state

    def save(self) -> Result[Union[str, None]]:
        """Validate, then update when an id is bound or create and bind the new id"""
        built = st.build_submission(self.state)
        if not built.ok:
            self.notify(built.message)
            return Result(ok=False, error=built.error)

        self.state = st.set_saving(self.state, True)
        if self.state.workflow_id:
            result = self.client.update_workflow(self.state.workflow_id, built.value)
        else:
            result = self.client.create_workflow(built.value)
            if result.ok:
                self.state = st.bind_id(self.state, result.value)
        self.state = st.set_saving(self.state, False)

        if result.ok:
            logger.info(f"Saved workflow {self.state.workflow_id}")
            self.notify("Workflow saved successfully!")
        else:
            self.notify(f"Error saving workflow: {result.message}")
        return result


class LoginGate:
    """Shared-password gate for the lifetime of the client process"""

    def __init__(self, password: str):
        self._password = password
        self.state = st.LoginState()

    @property
    def authenticated(self) -> bool:
        return self.state.authenticated

    def submit(self, password: str) -> bool:
        self.state = st.type_password(self.state, password)
        self.state = st.attempt_login(self.state, self._password)
        return self.state.authenticated
