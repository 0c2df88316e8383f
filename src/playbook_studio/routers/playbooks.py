from fastapi import APIRouter, Depends

from ..dependencies.repository import get_repo
from ..models.workflow import WorkflowPayload
from ..workflows.workflow_repository import WorkflowRepository
from .common import create_record, fetch_record, list_records, update_record

router = APIRouter(prefix="/playbooks", tags=["playbooks"])


@router.get("")
async def list_playbooks(repo: WorkflowRepository = Depends(get_repo)):
    return await list_records(repo, "playbooks")


@router.post("")
async def create_playbook(payload: WorkflowPayload, repo: WorkflowRepository = Depends(get_repo)):
    """Create a playbook. The section is optional here; the editor enforces it."""
    return await create_record(repo, payload.model_copy(update={"isPlaybook": True}))


@router.get("/{playbook_id}")
async def get_playbook(playbook_id: str, repo: WorkflowRepository = Depends(get_repo)):
    return await fetch_record(repo, playbook_id, "playbook", "Playbook")


@router.put("/{playbook_id}")
async def update_playbook(playbook_id: str, payload: WorkflowPayload, repo: WorkflowRepository = Depends(get_repo)):
    return await update_record(repo, playbook_id, payload, "Playbook")
