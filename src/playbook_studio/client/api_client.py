"""HTTP client for the Playbook Studio API.

Every method returns a Result instead of raising, so callers can apply the
state change on success and leave everything untouched on failure.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import requests

from ..errors import BadRequestError, NotFoundError, PersistenceError, StudioError
from ..models.workflow import Submission, WorkflowRecord
from .result import Result

logger = logging.getLogger(__name__)


def _error_for_status(status_code: int, message: str) -> StudioError:
    if status_code == 400:
        return BadRequestError(message)
    if status_code == 404:
        return NotFoundError(message)
    return PersistenceError(message)


def _records(items: List[dict]) -> List[WorkflowRecord]:
    return [WorkflowRecord.model_validate(item) for item in items]


class StudioClient:
    """Talks to the REST API through a requests.Session (or anything with the same request())."""

    def __init__(self, base_url: str = "", session: Optional[Any] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> Result[Dict[str, Any]]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            return Result.failure(StudioError(str(e)))

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code >= 400 or body.get("success") is False:
            message = body.get("error") or body.get("detail") or f"HTTP {response.status_code}"
            logger.warning(f"{method} {url} -> {response.status_code}: {message}")
            return Result.failure(_error_for_status(response.status_code, str(message)))
        return Result.success(body)

    # ===== Workflows =====

    def list_workflows(self) -> Result[List[WorkflowRecord]]:
        return self._request("GET", "/workflows").map(lambda body: _records(body.get("workflows", [])))

    def get_workflow(self, workflow_id: str) -> Result[WorkflowRecord]:
        return self._request("GET", f"/workflows/{workflow_id}").map(
            lambda body: WorkflowRecord.model_validate(body["workflow"])
        )

    def create_workflow(self, submission: Submission) -> Result[str]:
        return self._request("POST", "/workflows", submission.to_payload()).map(lambda body: body["id"])

    def update_workflow(self, workflow_id: str, submission: Submission) -> Result[None]:
        return self._request("PUT", f"/workflows/{workflow_id}", submission.to_payload()).map(lambda _: None)

    def delete_workflow(self, workflow_id: str) -> Result[None]:
        return self._request("DELETE", f"/workflows/{workflow_id}").map(lambda _: None)

    def set_status(self, workflow_id: str, is_running: bool) -> Result[None]:
        return self._request("PATCH", f"/workflows/{workflow_id}/status", {"isRunning": is_running}).map(
            lambda _: None
        )

    # ===== Playbooks =====

    def list_playbooks(self) -> Result[List[WorkflowRecord]]:
        return self._request("GET", "/playbooks").map(lambda body: _records(body.get("playbooks", [])))

    def get_playbook(self, playbook_id: str) -> Result[WorkflowRecord]:
        return self._request("GET", f"/playbooks/{playbook_id}").map(
            lambda body: WorkflowRecord.model_validate(body["playbook"])
        )

    def create_playbook(self, submission: Submission) -> Result[str]:
        return self._request("POST", "/playbooks", submission.to_payload()).map(lambda body: body["id"])

    def update_playbook(self, playbook_id: str, submission: Submission) -> Result[None]:
        return self._request("PUT", f"/playbooks/{playbook_id}", submission.to_payload()).map(lambda _: None)
