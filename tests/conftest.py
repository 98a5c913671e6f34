"""
Pytest Configuration and Fixtures

Shared builders for steps and definitions, an engine with the built-in
condition tags, an in-memory repository and an API client wired to both.
"""
import os
import tempfile

os.environ.setdefault("LOGS_PATH", os.path.join(tempfile.gettempdir(), "reqflow-test-logs"))
os.environ.setdefault("SEED_DEFAULT_WORKFLOWS", "false")

from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from reqflow.domain.models import WorkflowDefinition, Step, Branch, PermissionSpec
from reqflow.domain.defaults import small_change_workflow
from reqflow.domain.errors import WorkflowNotFoundError, ConcurrencyError
from reqflow.engine import WorkflowEngine, create_default_registry
from reqflow.services.workflow_service import WorkflowService


ADMIN_HEADERS = {"X-User-Roles": "Administrator"}


def make_step(
    step_id: str,
    order: int,
    branches: Optional[List[Branch]] = None,
    roles: Optional[List[str]] = None,
    **kwargs
) -> Step:
    """Step with a permission on the given roles (Requester by default)"""
    return Step(
        id=step_id,
        title=kwargs.pop("title", f"Step {step_id}"),
        order=order,
        branches=branches or [],
        permission_spec=kwargs.pop(
            "permission_spec", PermissionSpec(allowed_roles=roles or ["Requester"])
        ),
        **kwargs
    )


def make_definition(steps: List[Step], **kwargs) -> WorkflowDefinition:
    return WorkflowDefinition(
        id=kwargs.pop("id", "wf-test"),
        type=kwargs.pop("type", "test"),
        name=kwargs.pop("name", "Test workflow"),
        steps=steps,
        **kwargs
    )


class InMemoryWorkflowRepository:
    """Dict-backed stand-in for WorkflowRepository with the same version rules"""

    def __init__(self):
        self.docs: Dict[str, WorkflowDefinition] = {}

    def get_definition(self, workflow_type: str) -> Optional[WorkflowDefinition]:
        return self.docs.get(workflow_type)

    def load_definition(self, workflow_type: str) -> WorkflowDefinition:
        definition = self.get_definition(workflow_type)
        if definition is None:
            raise WorkflowNotFoundError(f"Workflow definition {workflow_type} not found")
        return definition

    def list_definitions(self, active_only: bool = False) -> List[WorkflowDefinition]:
        return [
            d for _, d in sorted(self.docs.items())
            if d.is_active or not active_only
        ]

    def save_definition(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        existing = self.docs.get(definition.type)
        if existing is not None and existing.version != definition.version:
            raise ConcurrencyError(f"Workflow {definition.type} was modified")
        saved = definition.model_copy(update={"version": definition.version + 1})
        self.docs[definition.type] = saved
        return saved

    def set_active(self, workflow_type: str, is_active: bool, expected_version: int) -> WorkflowDefinition:
        existing = self.load_definition(workflow_type)
        if existing.version != expected_version:
            raise ConcurrencyError(f"Workflow {workflow_type} was modified")
        saved = existing.model_copy(update={"is_active": is_active, "version": existing.version + 1})
        self.docs[workflow_type] = saved
        return saved


@pytest.fixture
def registry():
    return create_default_registry(5000)


@pytest.fixture
def engine(registry):
    return WorkflowEngine(registry=registry)


@pytest.fixture
def small_change():
    return small_change_workflow()


@pytest.fixture
def repo():
    return InMemoryWorkflowRepository()


@pytest.fixture
def service(repo, engine):
    return WorkflowService(repo, engine)


@pytest.fixture
def client(service, engine):
    """
    API client backed by the in-memory repository

    Not entered as a context manager, so the lifespan (Mongo indexes,
    seeding) does not run.
    """
    from reqflow.main import app
    from reqflow.api.deps import get_workflow_service_dep, get_engine_dep

    app.dependency_overrides[get_workflow_service_dep] = lambda: service
    app.dependency_overrides[get_engine_dep] = lambda: engine
    yield TestClient(app)
    app.dependency_overrides.clear()
