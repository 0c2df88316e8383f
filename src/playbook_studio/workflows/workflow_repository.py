"""MongoDB repository for the workflows collection (workflows and playbooks)"""
from __future__ import annotations
import logging
from typing import List, Optional
from datetime import datetime, timedelta, timezone
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from ..config import Settings
from ..errors import PersistenceError
from ..models.workflow import WorkflowPayload, WorkflowRecord

logger = logging.getLogger(__name__)

# Fields an update only writes when the caller actually sent them
OPTIONAL_UPDATE_FIELDS = ("isPlaybook", "playbook_description", "playbookSection")


class UtcClock:
    """Strictly increasing UTC timestamps at BSON (millisecond) resolution"""

    def __init__(self):
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        now = datetime.now(timezone.utc)
        now = now.replace(microsecond=(now.microsecond // 1000) * 1000)
        if self._last is not None and now <= self._last:
            now = self._last + timedelta(milliseconds=1)
        self._last = now
        return now


def _to_object_id(workflow_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(workflow_id)
    except (InvalidId, TypeError):
        return None


class WorkflowRepository:
    """Repository for workflow records (MongoDB async)"""

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        client: Optional[AsyncIOMotorClient] = None,
        clock: Optional[UtcClock] = None,
    ):
        """
        Args:
            collection: Collection holding both workflows and playbooks
            client: Owning client, closed by close() when given
            clock: Timestamp source for createdAt/updatedAt
        """
        self.client = client
        self.workflows = collection
        self.clock = clock or UtcClock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "WorkflowRepository":
        client: AsyncIOMotorClient = AsyncIOMotorClient(settings.mongo_workflow_url)
        collection = client[settings.mongo_workflow_db][settings.mongo_workflow_collection]
        logger.info(
            f"Workflow repository initialized (db: {settings.mongo_workflow_db}, "
            f"collection: {settings.mongo_workflow_collection})"
        )
        return cls(collection, client=client)

    async def close(self):
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            logger.info("Workflow repository connection closed")

    # ===== Create =====

    async def create_workflow(self, data: WorkflowPayload) -> str:
        """Insert a new record and return its id"""
        now = self.clock.now()
        doc = {
            "title": data.title,
            "steps": [step.to_doc() for step in data.steps],
            "isRunning": False,
            "isPlaybook": data.isPlaybook,
            "playbook_description": data.playbook_description,
            "playbookSection": data.playbookSection if data.isPlaybook else None,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await self.workflows.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Failed to create workflow '{data.title}': {e}")
            raise PersistenceError(str(e)) from e
        workflow_id = str(result.inserted_id)
        logger.info(f"Created {'playbook' if data.isPlaybook else 'workflow'} {workflow_id}")
        return workflow_id

    # ===== Read =====

    async def _list(self, is_playbook: bool) -> List[WorkflowRecord]:
        try:
            cursor = self.workflows.find({"isPlaybook": is_playbook}).sort("createdAt", -1)
            records = []
            async for doc in cursor:
                records.append(WorkflowRecord.from_doc(doc))
            return records
        except PyMongoError as e:
            logger.error(f"Failed to list {'playbooks' if is_playbook else 'workflows'}: {e}")
            raise PersistenceError(str(e)) from e

    async def list_workflows(self) -> List[WorkflowRecord]:
        """Non-playbook records, newest first"""
        return await self._list(is_playbook=False)

    async def list_playbooks(self) -> List[WorkflowRecord]:
        """Playbook records, newest first"""
        return await self._list(is_playbook=True)

    async def get_workflow(self, workflow_id: str) -> Optional[WorkflowRecord]:
        """Point lookup; None when the id is unknown or malformed"""
        oid = _to_object_id(workflow_id)
        if oid is None:
            return None
        try:
            doc = await self.workflows.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Failed to get workflow {workflow_id}: {e}")
            raise PersistenceError(str(e)) from e
        if not doc:
            return None
        return WorkflowRecord.from_doc(doc)

    # ===== Update =====

    async def _set(self, workflow_id: str, updates: dict) -> bool:
        oid = _to_object_id(workflow_id)
        if oid is None:
            return False
        # Pipeline update: updatedAt never drops below the stored value plus 1ms,
        # whichever process or clock wrote it last
        stage = {name: {"$literal": value} for name, value in updates.items()}
        stage["updatedAt"] = {"$max": [self.clock.now(), {"$add": ["$updatedAt", 1]}]}
        try:
            result = await self.workflows.update_one({"_id": oid}, [{"$set": stage}])
        except PyMongoError as e:
            logger.error(f"Failed to update workflow {workflow_id}: {e}")
            raise PersistenceError(str(e)) from e
        return result.matched_count > 0

    async def update_workflow(self, workflow_id: str, data: WorkflowPayload) -> bool:
        """Overwrite title, steps and whichever playbook fields were sent"""
        updates = {
            "title": data.title,
            "steps": [step.to_doc() for step in data.steps],
        }
        for field_name in OPTIONAL_UPDATE_FIELDS:
            if field_name in data.model_fields_set:
                updates[field_name] = getattr(data, field_name)
        if updates.get("isPlaybook") is False:
            # only playbooks carry a section
            updates["playbookSection"] = None
        updated = await self._set(workflow_id, updates)
        if updated:
            logger.info(f"Updated workflow {workflow_id} ({', '.join(sorted(updates))})")
        return updated

    async def update_status(self, workflow_id: str, is_running: bool) -> bool:
        """Toggle isRunning; no other field is touched"""
        updated = await self._set(workflow_id, {"isRunning": is_running})
        if updated:
            logger.info(f"Workflow {workflow_id} is now {'running' if is_running else 'paused'}")
        return updated

    # ===== Delete =====

    async def delete_workflow(self, workflow_id: str) -> bool:
        """Delete permanently; False when nothing matched"""
        oid = _to_object_id(workflow_id)
        if oid is None:
            return False
        try:
            result = await self.workflows.delete_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Failed to delete workflow {workflow_id}: {e}")
            raise PersistenceError(str(e)) from e
        if result.deleted_count > 0:
            logger.info(f"Deleted workflow {workflow_id}")
            return True
        return False
