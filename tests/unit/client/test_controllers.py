"""Tests for the dashboard/editor controllers with a mocked API client"""
from unittest.mock import MagicMock

import pytest

from playbook_studio.client import state as st
from playbook_studio.client.controllers import DashboardController, EditorController, LoginGate
from playbook_studio.client.result import Result
from playbook_studio.client.view_config import ViewConfig
from playbook_studio.errors import NotFoundError, PersistenceError
from playbook_studio.models.workflow import PlaybookSubmission, WorkflowRecord, WorkflowSubmission


def record(record_id, **fields):
    return WorkflowRecord(id=record_id, title=fields.pop("title", f"Record {record_id}"), **fields)


@pytest.fixture
def client():
    mock = MagicMock()
    mock.list_workflows.return_value = Result.success([record("w1"), record("w2", isRunning=True)])
    mock.list_playbooks.return_value = Result.success(
        [record("p1", isPlaybook=True, playbookSection="deals-drop-off")]
    )
    mock.set_status.return_value = Result.success()
    mock.delete_workflow.return_value = Result.success()
    return mock


@pytest.fixture
def notices():
    return []


@pytest.fixture
def dashboard(client, notices):
    controller = DashboardController(client, notices.append, confirm=lambda _: True)
    controller.load()
    return controller


class TestDashboardLoad:
    def test_load_merges_both_lists(self, dashboard):
        assert dashboard.state.is_loading is False
        assert [r.id for r in dashboard.state.records] == ["w1", "w2", "p1"]

    def test_workflow_load_failure_notifies(self, client, notices):
        client.list_workflows.return_value = Result.failure(PersistenceError("Failed to fetch workflows"))
        controller = DashboardController(client, notices.append, confirm=lambda _: True)

        state = controller.load()

        assert state.is_loading is False
        assert state.records == ()
        assert notices == ["Error loading workflows: Failed to fetch workflows"]

    def test_playbook_load_failure_notifies(self, client, notices):
        client.list_playbooks.return_value = Result.failure(PersistenceError("boom"))
        controller = DashboardController(client, notices.append, confirm=lambda _: True)

        controller.load()

        assert notices == ["Error loading playbooks: boom"]


class TestToggleStatus:
    def test_success_flips_flag_and_clears_busy(self, dashboard, client):
        result = dashboard.toggle_status("w1")

        assert result.ok
        client.set_status.assert_called_once_with("w1", True)
        assert st.find_record(dashboard.state, "w1").isRunning is True
        assert not st.is_busy(dashboard.state, "status", "w1")

    def test_running_record_is_paused(self, dashboard, client):
        dashboard.toggle_status("w2")
        client.set_status.assert_called_once_with("w2", False)

    def test_failure_leaves_record_unchanged(self, dashboard, client, notices):
        client.set_status.return_value = Result.failure(PersistenceError("write rejected"))

        result = dashboard.toggle_status("w1")

        assert not result.ok
        assert st.find_record(dashboard.state, "w1").isRunning is False
        assert notices == ["Error updating workflow status: write rejected"]
        assert not st.is_busy(dashboard.state, "status", "w1")

    def test_busy_row_is_not_resent(self, dashboard, client):
        dashboard.state = st.begin_action(dashboard.state, "status", "w1")

        result = dashboard.toggle_status("w1")

        assert not result.ok
        client.set_status.assert_not_called()

    def test_unknown_record(self, dashboard, client):
        assert not dashboard.toggle_status("missing").ok
        client.set_status.assert_not_called()


class TestDelete:
    def test_confirmed_delete_removes_row(self, dashboard, client):
        assert dashboard.delete("w1").ok
        client.delete_workflow.assert_called_once_with("w1")
        assert st.find_record(dashboard.state, "w1") is None

    def test_confirmation_names_the_record(self, client, notices):
        questions = []
        controller = DashboardController(client, notices.append, confirm=lambda q: questions.append(q) or False)
        controller.load()

        result = controller.delete("w1")

        assert result.message == "Cancelled"
        assert questions == ['Are you sure you want to delete "Record w1"? This action cannot be undone.']
        client.delete_workflow.assert_not_called()
        assert st.find_record(controller.state, "w1") is not None

    def test_server_failure_keeps_row(self, dashboard, client, notices):
        client.delete_workflow.return_value = Result.failure(NotFoundError("Workflow not found"))

        dashboard.delete("w1")

        assert st.find_record(dashboard.state, "w1") is not None
        assert notices == ["Error deleting workflow: Workflow not found"]
        assert not st.is_busy(dashboard.state, "delete", "w1")

    def test_playbooks_are_protected_by_default(self, dashboard, client, notices):
        assert not dashboard.delete("p1").ok
        client.delete_workflow.assert_not_called()
        assert notices == ["Playbooks cannot be deleted from the dashboard"]

    def test_playbook_delete_when_enabled(self, client, notices):
        controller = DashboardController(
            client, notices.append, confirm=lambda _: True, config=ViewConfig(allow_playbook_delete=True)
        )
        controller.load()

        assert controller.delete("p1").ok
        client.delete_workflow.assert_called_once_with("p1")


class TestEditor:
    @pytest.fixture
    def editor(self, client, notices):
        client.create_workflow.return_value = Result.success("new-id")
        client.update_workflow.return_value = Result.success()
        return EditorController(client, notices.append)

    def test_open_without_id_is_blank(self, editor, client):
        state = editor.open()
        assert state.workflow_id is None
        assert len(state.steps) == 1
        client.list_workflows.assert_not_called()

    def test_open_latest_when_configured(self, client, notices):
        editor = EditorController(client, notices.append, ViewConfig(load_latest_when_no_id=True))
        assert editor.open().workflow_id == "w1"

    def test_open_by_id(self, editor, client):
        client.get_workflow.return_value = Result.success(record("w7", title="Seven"))

        state = editor.open("w7")

        assert state.workflow_id == "w7"
        assert state.title == "Seven"

    def test_open_failure_falls_back_to_blank(self, editor, client, notices):
        client.get_workflow.return_value = Result.failure(NotFoundError("Workflow not found"))

        state = editor.open("gone")

        assert state.workflow_id is None
        assert notices == ["Error loading workflow: Workflow not found"]

    def test_invalid_draft_is_not_sent(self, editor, client, notices):
        editor.open()

        result = editor.save()

        assert not result.ok
        assert notices == ["Please enter a workflow title"]
        client.create_workflow.assert_not_called()
        client.update_workflow.assert_not_called()

    def test_first_save_creates_then_updates(self, editor, client, notices):
        editor.open()
        editor.apply(st.set_title, "My flow")
        editor.apply(st.update_instruction, 1, "Pull recordings")

        assert editor.save().ok
        assert editor.state.workflow_id == "new-id"
        assert isinstance(client.create_workflow.call_args.args[0], WorkflowSubmission)

        editor.apply(st.set_title, "My flow v2")
        assert editor.save().ok
        client.update_workflow.assert_called_once()
        assert client.update_workflow.call_args.args[0] == "new-id"
        assert notices == ["Workflow saved successfully!", "Workflow saved successfully!"]
        assert editor.state.is_saving is False

    def test_playbook_draft_submits_playbook(self, editor, client):
        editor.open()
        editor.apply(st.set_title, "Book")
        editor.apply(st.update_instruction, 1, "Step")
        editor.apply(st.set_playbook, True)
        editor.apply(st.set_section, "not-moving-forward")

        editor.save()

        submission = client.create_workflow.call_args.args[0]
        assert isinstance(submission, PlaybookSubmission)
        assert submission.playbookSection == "not-moving-forward"

    def test_save_failure_keeps_draft_unbound(self, editor, client, notices):
        client.create_workflow.return_value = Result.failure(PersistenceError("database unavailable"))
        editor.open()
        editor.apply(st.set_title, "T")
        editor.apply(st.update_instruction, 1, "x")

        assert not editor.save().ok
        assert editor.state.workflow_id is None
        assert editor.state.title == "T"
        assert notices == ["Error saving workflow: database unavailable"]


class TestLoginGate:
    def test_gate(self):
        gate = LoginGate("secret")
        assert gate.authenticated is False
        assert gate.submit("nope") is False
        assert gate.state.error == "Incorrect password"
        assert gate.submit("secret") is True
        assert gate.authenticated is True
