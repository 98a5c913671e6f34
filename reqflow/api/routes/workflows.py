"""Workflow API Routes - Definition view, validation, activation and transitions"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ..deps import (
    get_caller_roles_dep, get_correlation_id_dep, get_workflow_service_dep, get_engine_dep
)
from ...domain.models import WorkflowDefinition, ValidationResult, NextStep
from ...domain.errors import DomainError, PermissionDeniedError, ValidationError
from ...engine import WorkflowEngine
from ...services.workflow_service import WorkflowService
from ...utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================

class WorkflowListResponse(BaseModel):
    """Response for workflow list"""
    items: List[WorkflowDefinition]
    total: int


class SaveDefinitionResponse(BaseModel):
    """Response after saving a definition"""
    definition: WorkflowDefinition
    validation: ValidationResult


class ActivateRequest(BaseModel):
    """Request to activate a definition"""
    expected_version: Optional[int] = Field(None, description="Version the caller last saw")
    acknowledge_warnings: bool = Field(default=False, description="Activate despite warnings such as orphaned steps")


class DeactivateRequest(BaseModel):
    """Request to deactivate a definition"""
    expected_version: Optional[int] = None


class NextStepsRequest(BaseModel):
    """Request to resolve successor steps"""
    current_step_id: str = Field(..., min_length=1)
    form_data: Dict[str, Any] = Field(default_factory=dict)


class NextStepsResponse(BaseModel):
    """Viable successors; empty with blocked=true when nothing matches"""
    current_step_id: str
    next_steps: List[NextStep]
    blocked: bool


def _require_admin(roles: List[str], engine: WorkflowEngine, action: str) -> None:
    if engine.admin_role not in roles:
        raise PermissionDeniedError(
            f"Only {engine.admin_role} may {action} workflow definitions",
            details={"action": action}
        )


# ============================================================================
# Routes
# ============================================================================

@router.get("", response_model=WorkflowListResponse)
async def list_workflows(
    active_only: bool = Query(False),
    roles: List[str] = Depends(get_caller_roles_dep),
    service: WorkflowService = Depends(get_workflow_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    List workflow definitions

    Steps the caller may not see are redacted.
    """
    try:
        items = service.list_definitions_for_roles(roles, active_only=active_only)
        return WorkflowListResponse(items=items, total=len(items))
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/validate", response_model=ValidationResult)
async def validate_definition(
    definition: WorkflowDefinition,
    service: WorkflowService = Depends(get_workflow_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Validate a definition without storing it"""
    return service.validate_definition(definition)


@router.get("/{workflow_type}", response_model=WorkflowDefinition)
async def get_workflow(
    workflow_type: str,
    roles: List[str] = Depends(get_caller_roles_dep),
    service: WorkflowService = Depends(get_workflow_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Get the role-appropriate view of a workflow definition"""
    try:
        return service.get_definition_for_roles(workflow_type, roles)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.put("/{workflow_type}", response_model=SaveDefinitionResponse)
async def save_workflow(
    workflow_type: str,
    definition: WorkflowDefinition,
    roles: List[str] = Depends(get_caller_roles_dep),
    engine: WorkflowEngine = Depends(get_engine_dep),
    service: WorkflowService = Depends(get_workflow_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Save a workflow definition

    Validation is returned alongside the saved copy; warnings and
    structural errors do not block saving.
    """
    try:
        _require_admin(roles, engine, "save")
        if definition.type != workflow_type:
            raise ValidationError(
                f"Definition type {definition.type} does not match path {workflow_type}",
                details={"path_type": workflow_type, "body_type": definition.type}
            )

        result = service.save_definition(definition)

        logger.info(
            f"Saved workflow: {workflow_type}",
            extra={"workflow_type": workflow_type, "version": result["definition"].version}
        )
        return SaveDefinitionResponse(**result)

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/{workflow_type}/validate", response_model=ValidationResult)
async def validate_workflow(
    workflow_type: str,
    service: WorkflowService = Depends(get_workflow_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Validate the stored definition"""
    try:
        return service.validate_stored(workflow_type)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/{workflow_type}/activate", response_model=WorkflowDefinition)
async def activate_workflow(
    workflow_type: str,
    request: ActivateRequest,
    roles: List[str] = Depends(get_caller_roles_dep),
    engine: WorkflowEngine = Depends(get_engine_dep),
    service: WorkflowService = Depends(get_workflow_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Activate a workflow definition

    Fails on structural errors, and on warnings unless acknowledged.
    """
    try:
        _require_admin(roles, engine, "activate")
        return service.activate(
            workflow_type,
            expected_version=request.expected_version,
            acknowledge_warnings=request.acknowledge_warnings
        )
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/{workflow_type}/deactivate", response_model=WorkflowDefinition)
async def deactivate_workflow(
    workflow_type: str,
    request: DeactivateRequest,
    roles: List[str] = Depends(get_caller_roles_dep),
    engine: WorkflowEngine = Depends(get_engine_dep),
    service: WorkflowService = Depends(get_workflow_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Deactivate a workflow definition"""
    try:
        _require_admin(roles, engine, "deactivate")
        return service.deactivate(workflow_type, expected_version=request.expected_version)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/{workflow_type}/next-steps", response_model=NextStepsResponse)
async def resolve_next_steps(
    workflow_type: str,
    request: NextStepsRequest,
    service: WorkflowService = Depends(get_workflow_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Resolve the viable successors of a step for the submitted form data

    An empty list means no automatic transition is available.
    """
    try:
        next_steps = service.resolve_next_steps(
            workflow_type, request.current_step_id, request.form_data
        )
        return NextStepsResponse(
            current_step_id=request.current_step_id,
            next_steps=next_steps,
            blocked=not next_steps
        )
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
