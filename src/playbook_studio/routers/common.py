"""Handlers shared by the workflow and playbook routers.

Each one calls exactly one repository method and turns the outcome into the
JSON envelope the client expects.
"""
from __future__ import annotations
import logging

from fastapi.responses import JSONResponse

from ..models.workflow import WorkflowPayload
from ..workflows.workflow_repository import WorkflowRepository

logger = logging.getLogger(__name__)


def failure(status_code: int, error: str) -> JSONResponse:
    return JSONResponse({"success": False, "error": error}, status_code=status_code)


async def list_records(repo: WorkflowRepository, key: str):
    try:
        if key == "playbooks":
            records = await repo.list_playbooks()
        else:
            records = await repo.list_workflows()
    except Exception as e:
        logger.exception("[%s/list] Failed: %s", key, e)
        return JSONResponse({"error": f"Failed to fetch {key}"}, status_code=500)
    return {key: [record.to_dict() for record in records]}


async def create_record(repo: WorkflowRepository, payload: WorkflowPayload):
    try:
        workflow_id = await repo.create_workflow(payload)
    except Exception as e:
        logger.exception("[create] Failed to save '%s': %s", payload.title, e)
        return failure(500, str(e))
    return {"success": True, "id": workflow_id}


async def fetch_record(repo: WorkflowRepository, workflow_id: str, key: str, label: str):
    try:
        record = await repo.get_workflow(workflow_id)
    except Exception as e:
        logger.exception("[%s/get] Failed to fetch %s: %s", key, workflow_id, e)
        return JSONResponse({"error": f"Failed to fetch {label.lower()}"}, status_code=500)
    if record is None:
        return JSONResponse({"error": f"{label} not found"}, status_code=404)
    return {key: record.to_dict()}


async def update_record(repo: WorkflowRepository, workflow_id: str, payload: WorkflowPayload, label: str):
    try:
        updated = await repo.update_workflow(workflow_id, payload)
    except Exception as e:
        logger.exception("[update] Failed to update %s: %s", workflow_id, e)
        return failure(500, str(e))
    if not updated:
        return failure(404, f"{label} not found")
    return {"success": True}
