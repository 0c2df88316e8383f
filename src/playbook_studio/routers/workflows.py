from fastapi import APIRouter, Depends
import logging

from ..dependencies.repository import get_repo
from ..models.workflow import StatusUpdateRequest, WorkflowPayload
from ..workflows.workflow_repository import WorkflowRepository
from .common import create_record, failure, fetch_record, list_records, update_record

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workflows", tags=["workflows"])


@router.get("")
async def list_workflows(repo: WorkflowRepository = Depends(get_repo)):
    """List non-playbook workflows, newest first."""
    return await list_records(repo, "workflows")


@router.post("")
async def create_workflow(payload: WorkflowPayload, repo: WorkflowRepository = Depends(get_repo)):
    """Create a workflow (or a playbook when isPlaybook is set)."""
    return await create_record(repo, payload)


@router.get("/{workflow_id}")
async def get_workflow(workflow_id: str, repo: WorkflowRepository = Depends(get_repo)):
    return await fetch_record(repo, workflow_id, "workflow", "Workflow")


@router.put("/{workflow_id}")
async def update_workflow(workflow_id: str, payload: WorkflowPayload, repo: WorkflowRepository = Depends(get_repo)):
    """Overwrite title and steps; playbook fields only when present in the body."""
    return await update_record(repo, workflow_id, payload, "Workflow")


@router.delete("/{workflow_id}")
async def delete_workflow(workflow_id: str, repo: WorkflowRepository = Depends(get_repo)):
    """Delete permanently. Unknown ids answer 404."""
    try:
        deleted = await repo.delete_workflow(workflow_id)
    except Exception as e:
        logger.exception("[workflows/delete] Failed to delete %s: %s", workflow_id, e)
        return failure(500, str(e))
    if not deleted:
        return failure(404, "Workflow not found")
    return {"success": True}


@router.patch("/{workflow_id}/status")
async def update_workflow_status(
    workflow_id: str,
    request: StatusUpdateRequest,
    repo: WorkflowRepository = Depends(get_repo),
):
    """Run or pause a workflow; only isRunning and updatedAt change."""
    try:
        updated = await repo.update_status(workflow_id, request.isRunning)
    except Exception as e:
        logger.exception("[workflows/status] Failed to update %s: %s", workflow_id, e)
        return failure(500, str(e))
    if not updated:
        return failure(404, "Workflow not found")
    return {"success": True}
