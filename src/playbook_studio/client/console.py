"""Terminal front-end: renders the login gate, dashboard and editor and maps
typed commands onto the controllers."""
from __future__ import annotations
import logging
from typing import Callable, List, Optional

from ..models.workflow import HUMAN_ASSIGNEES, PLAYBOOK_SECTIONS, WorkflowRecord, get_section
from . import state as st
from .api_client import StudioClient
from .controllers import DashboardController, EditorController, LoginGate
from .view_config import ViewConfig

logger = logging.getLogger(__name__)

DASHBOARD_HELP = (
    "Commands: w (workflows) | p (playbooks) | s <section#> | r <row#> run/pause | "
    "e <row#> edit | d <row#> delete | n new | l reload | q quit"
)
EDITOR_HELP = (
    "Commands: t <title> | a add step | i <step#> <text> | x <step#> ai/human | h <step#> <person#> | "
    "u <step#> up | m <step#> down | del <step#> | pb toggle playbook | sec <section#> | "
    "desc <text> | s save | b back"
)


# ===== Rendering =====

def render_login(state: st.LoginState) -> str:
    lines = ["Welcome back", "Enter your password to continue"]
    if state.error:
        lines.append(f"! {state.error}")
    return "\n".join(lines)


def _status_label(record: WorkflowRecord, config: ViewConfig) -> str:
    if record.isRunning:
        return config.paint("active", "Active")
    return config.paint("paused", "Paused")


def _action_label(state: st.DashboardState, record: WorkflowRecord) -> str:
    if st.is_busy(state, "status", record.id):
        return "Updating..."
    if st.is_busy(state, "delete", record.id):
        return "Deleting..."
    return "Pause" if record.isRunning else "Run"


def _render_rows(state: st.DashboardState, records: List[WorkflowRecord], config: ViewConfig) -> List[str]:
    lines = []
    for number, record in enumerate(records, start=1):
        first = record.steps[0].instruction if record.steps else ""
        if config.layout == "card":
            lines.append(f"[{number}] {record.title}")
            lines.append(f"    {_status_label(record, config)} | {st.steps_summary(record.steps)} | "
                         f"Updated {st.format_date(record.updatedAt)} | {_action_label(state, record)}")
            if first:
                lines.append(f"    {first}")
        else:
            lines.append(
                f"{number:>3}  {record.title[:40]:<40}  {_status_label(record, config)}  "
                f"{st.steps_summary(record.steps):<16}  {st.format_date(record.updatedAt):<13}  "
                f"{_action_label(state, record)}"
            )
    return lines


def dashboard_rows(state: st.DashboardState) -> List[WorkflowRecord]:
    """Rows addressable by number: the workflows tab, or the expanded playbook section"""
    if state.active_tab == "playbooks":
        if state.expanded_section is None:
            return []
        return st.records_for_section(state, state.expanded_section)
    return st.visible_records(state)


def render_dashboard(state: st.DashboardState, config: ViewConfig) -> str:
    if state.is_loading:
        return "Loading workflows..."

    counts = st.tab_counts(state)
    marker = {tab: "*" if state.active_tab == tab else " " for tab in st.TABS}
    lines = [
        config.paint("heading", "Workflows"),
        f"{marker['workflows']}Workflows ({counts['workflows']})   {marker['playbooks']}Playbooks ({counts['playbooks']})",
        "",
    ]

    if state.active_tab == "workflows":
        rows = st.visible_records(state)
        if not rows:
            lines += ["No workflows yet", "Your workflows will appear here when created"]
        else:
            lines += _render_rows(state, rows, config)
        return "\n".join(lines)

    for number, section in enumerate(PLAYBOOK_SECTIONS, start=1):
        playbooks = st.records_for_section(state, section.id)
        expanded = state.expanded_section == section.id
        count = len(playbooks)
        lines.append(f"{'v' if expanded else '>'} {number}. {section.title} ({count} playbook{'s' if count != 1 else ''})")
        if expanded:
            lines.append(f"    {section.description}")
            if playbooks:
                lines += ["    " + row for row in _render_rows(state, playbooks, config)]
            else:
                lines.append("    No playbooks in this section yet")
    return "\n".join(lines)


def render_editor(state: st.EditorState) -> str:
    heading = "Edit Workflow" if state.workflow_id else "Create Workflow"
    lines = [heading, f"Title: {state.title or '(untitled)'}"]
    lines.append(f"Playbook: {'yes' if state.is_playbook else 'no'}")
    if state.is_playbook:
        section = get_section(state.playbook_section)
        lines.append(f"Section: {section.title if section else '(select a section)'}")
        lines.append(f"Description: {state.playbook_description}")
    lines.append("Steps:")
    for number, step in enumerate(state.steps, start=1):
        who = "AI" if step.executor == "ai" else f"Human ({step.assignedHuman})"
        lines.append(f"  {number}. [{who}] {step.instruction or '(no instructions)'}")
    if state.is_saving:
        lines.append("Saving...")
    if state.workflow_id:
        lines.append(f"ID: {state.workflow_id[:8]}...")
    return "\n".join(lines)


# ===== Interactive loop =====

class Console:
    def __init__(
        self,
        client: StudioClient,
        password: str,
        config: Optional[ViewConfig] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.config = config or ViewConfig()
        self.input = input_fn
        self.output = output_fn
        self.gate = LoginGate(password)
        self.dashboard = DashboardController(client, self.alert, self.ask, self.config)
        self.editor = EditorController(client, self.alert, self.config)

    def alert(self, message: str) -> None:
        self.output(self.config.paint("error", f"!! {message}") if message.startswith("Error") else f"!! {message}")

    def ask(self, question: str) -> bool:
        return self.input(f"{question} [y/N] ").strip().lower() in {"y", "yes"}

    def login(self) -> bool:
        while not self.gate.authenticated:
            self.output(render_login(self.gate.state))
            try:
                typed = self.input("Password: ")
            except EOFError:
                return False
            self.gate.submit(typed)
        return True

    def run(self) -> None:
        if not self.login():
            return
        self.dashboard.load()
        while True:
            self.output(render_dashboard(self.dashboard.state, self.config))
            self.output(DASHBOARD_HELP)
            try:
                line = self.input("> ").strip()
            except EOFError:
                return
            if line == "q":
                return
            self.handle_dashboard(line)

    def _row(self, arg: str) -> Optional[WorkflowRecord]:
        rows = dashboard_rows(self.dashboard.state)
        if arg.isdigit() and 1 <= int(arg) <= len(rows):
            return rows[int(arg) - 1]
        self.output(f"No row {arg}")
        return None

    def handle_dashboard(self, line: str) -> None:
        command, _, arg = line.partition(" ")
        if command == "w":
            self.dashboard.select_tab("workflows")
        elif command == "p":
            self.dashboard.select_tab("playbooks")
        elif command == "s" and arg.isdigit() and 1 <= int(arg) <= len(PLAYBOOK_SECTIONS):
            self.dashboard.toggle_section(PLAYBOOK_SECTIONS[int(arg) - 1].id)
        elif command == "l":
            self.dashboard.load()
        elif command == "n":
            self.edit(None)
        elif command in {"r", "e", "d"}:
            record = self._row(arg)
            if record is None:
                return
            if command == "r":
                self.dashboard.toggle_status(record.id)
            elif command == "e":
                self.edit(record.id)
            else:
                self.dashboard.delete(record.id)
        else:
            self.output(DASHBOARD_HELP)

    def edit(self, workflow_id: Optional[str]) -> None:
        self.editor.open(workflow_id)
        while True:
            self.output(render_editor(self.editor.state))
            self.output(EDITOR_HELP)
            try:
                line = self.input("edit> ").strip()
            except EOFError:
                return
            if line == "b":
                break
            if line == "s":
                result = self.editor.save()
                if result.ok and workflow_id is None:
                    # a freshly created workflow returns to the dashboard
                    break
                continue
            self.handle_editor(line)
        self.dashboard.load()

    def _step_id(self, arg: str):
        steps = self.editor.state.steps
        if arg.isdigit() and 1 <= int(arg) <= len(steps):
            return steps[int(arg) - 1].id
        self.output(f"No step {arg}")
        return None

    def handle_editor(self, line: str) -> None:
        command, _, rest = line.partition(" ")
        number, _, text = rest.partition(" ")
        if command == "t":
            self.editor.apply(st.set_title, rest)
        elif command == "a":
            self.editor.apply(st.add_step)
        elif command == "pb":
            self.editor.apply(st.set_playbook, not self.editor.state.is_playbook)
        elif command == "desc":
            self.editor.apply(st.set_description, rest)
        elif command == "sec" and number.isdigit() and 1 <= int(number) <= len(PLAYBOOK_SECTIONS):
            self.editor.apply(st.set_section, PLAYBOOK_SECTIONS[int(number) - 1].id)
        elif command in {"i", "x", "h", "u", "m", "del"}:
            step_id = self._step_id(number)
            if step_id is None:
                return
            if command == "i":
                self.editor.apply(st.update_instruction, step_id, text)
            elif command == "x":
                self.editor.apply(st.set_executor, step_id, "human" if text == "human" else "ai")
            elif command == "h":
                if text.isdigit() and 1 <= int(text) <= len(HUMAN_ASSIGNEES):
                    self.editor.apply(st.assign_human, step_id, HUMAN_ASSIGNEES[int(text) - 1])
                else:
                    self.output("Assign to: " + ", ".join(f"{n}. {name}" for n, name in enumerate(HUMAN_ASSIGNEES, 1)))
            elif command == "u":
                self.editor.apply(st.move_step_up, step_id)
            elif command == "m":
                self.editor.apply(st.move_step_down, step_id)
            else:
                self.editor.apply(st.delete_step, step_id)
        else:
            self.output(EDITOR_HELP)
