"""Workflow Repository - Persistence of workflow definitions"""
from typing import Any, Dict, List, Optional
from pymongo.collection import Collection
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError
from pydantic import ValidationError

from .mongo_client import get_collection, WORKFLOW_DEFINITIONS
from ..domain.models import WorkflowDefinition
from ..domain.errors import WorkflowNotFoundError, ConcurrencyError
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class WorkflowRepository:
    """
    Repository for workflow definitions, one document per process type

    Saves use optimistic concurrency on the version field: the stored
    version must equal the caller's, and every successful save increments it.
    """

    def __init__(self, collection: Optional[Collection] = None):
        self._definitions: Collection = (
            collection if collection is not None else get_collection(WORKFLOW_DEFINITIONS)
        )

    def _to_model(self, doc: Dict[str, Any]) -> Optional[WorkflowDefinition]:
        doc.pop("_id", None)
        try:
            return WorkflowDefinition.model_validate(doc)
        except ValidationError as e:
            logger.error(
                f"Corrupted workflow definition {doc.get('type')}: {str(e)[:500]}",
                extra={"workflow_type": doc.get("type"), "error_count": len(e.errors())}
            )
            return None

    def get_definition(self, workflow_type: str) -> Optional[WorkflowDefinition]:
        """Get definition by process type"""
        doc = self._definitions.find_one({"type": workflow_type})
        if doc:
            return self._to_model(doc)
        return None

    def load_definition(self, workflow_type: str) -> WorkflowDefinition:
        """Get definition by process type or raise error"""
        definition = self.get_definition(workflow_type)
        if not definition:
            raise WorkflowNotFoundError(
                f"Workflow definition {workflow_type} not found",
                details={"workflow_type": workflow_type}
            )
        return definition

    def list_definitions(self, active_only: bool = False) -> List[WorkflowDefinition]:
        query: Dict[str, Any] = {"is_active": True} if active_only else {}
        cursor = self._definitions.find(query).sort("type", ASCENDING)
        definitions = []
        for doc in cursor:
            definition = self._to_model(doc)
            if definition:
                definitions.append(definition)
        return definitions

    def save_definition(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        """
        Save definition with optimistic concurrency

        Inserts when the type is not stored yet, otherwise updates only if the
        stored version equals definition.version. The saved copy carries the
        incremented version, a fresh modified_at and recomputed metadata.

        Raises:
            ConcurrencyError: If the stored version differs
        """
        now = utc_now()
        expected_version = definition.version
        metadata = definition.metadata.model_copy(update={
            "total_estimated_days": sum(s.estimated_duration_days for s in definition.steps),
            "supports_branching": any(s.branches for s in definition.steps),
        })
        saved = definition.model_copy(update={
            "version": expected_version + 1,
            "modified_at": now,
            "created_at": definition.created_at or now,
            "metadata": metadata,
        })
        doc = saved.model_dump(mode="json")

        existing = self._definitions.find_one({"type": definition.type}, {"version": 1})
        if existing is None:
            try:
                self._definitions.insert_one({**doc, "_id": definition.type})
            except DuplicateKeyError:
                raise ConcurrencyError(
                    f"Workflow {definition.type} was created concurrently. Please refresh and try again.",
                    details={"expected_version": expected_version}
                )
            logger.info(
                f"Created workflow definition: {definition.type}",
                extra={"workflow_type": definition.type, "version": saved.version}
            )
            return saved

        result = self._definitions.find_one_and_replace(
            {"type": definition.type, "version": expected_version},
            {**doc, "_id": definition.type},
            return_document=ReturnDocument.AFTER
        )
        if result is None:
            raise ConcurrencyError(
                f"Workflow {definition.type} was modified. Please refresh and try again.",
                details={"expected_version": expected_version, "current_version": existing.get("version")}
            )

        logger.info(
            f"Saved workflow definition: {definition.type}",
            extra={"workflow_type": definition.type, "version": saved.version}
        )
        return saved

    def set_active(self, workflow_type: str, is_active: bool, expected_version: int) -> WorkflowDefinition:
        """Flip is_active, counted as a save (version increments)"""
        result = self._definitions.find_one_and_update(
            {"type": workflow_type, "version": expected_version},
            {"$set": {"is_active": is_active, "modified_at": utc_now()}, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER
        )
        if result is None:
            exists = self._definitions.find_one({"type": workflow_type}, {"version": 1})
            if exists:
                raise ConcurrencyError(
                    f"Workflow {workflow_type} was modified. Please refresh and try again.",
                    details={"expected_version": expected_version}
                )
            raise WorkflowNotFoundError(f"Workflow definition {workflow_type} not found")

        definition = self._to_model(result)
        if definition is None:
            raise WorkflowNotFoundError(f"Workflow definition {workflow_type} could not be read")
        logger.info(
            f"{'Activated' if is_active else 'Deactivated'} workflow definition: {workflow_type}",
            extra={"workflow_type": workflow_type, "version": definition.version}
        )
        return definition
