"""Decision API Routes - Permission checks and registered conditions"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_caller_roles_dep, get_correlation_id_dep, get_engine_dep
from ...domain.models import PermissionSpec, RESERVED_CONDITION_TAGS
from ...domain.enums import PermissionRule
from ...engine import WorkflowEngine

router = APIRouter()


class PermissionCheckRequest(BaseModel):
    """Permission spec plus the roles to check; header roles are used when omitted"""
    permission_spec: PermissionSpec
    roles: Optional[List[str]] = None


class PermissionCheckResponse(BaseModel):
    allowed: bool
    rule: PermissionRule


class ConditionListResponse(BaseModel):
    tags: List[str] = Field(default_factory=list)
    reserved: List[str] = Field(default_factory=list)


@router.post("/permissions/check", response_model=PermissionCheckResponse)
async def check_permission(
    request: PermissionCheckRequest,
    caller_roles: List[str] = Depends(get_caller_roles_dep),
    engine: WorkflowEngine = Depends(get_engine_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Evaluate a step or field permission spec"""
    roles = request.roles if request.roles is not None else caller_roles
    decision = engine.explain_permission(request.permission_spec, roles)
    return PermissionCheckResponse(allowed=decision.allowed, rule=decision.rule)


@router.get("/conditions", response_model=ConditionListResponse)
async def list_conditions(
    engine: WorkflowEngine = Depends(get_engine_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """List registered condition tags"""
    return ConditionListResponse(tags=engine.registry.tags(), reserved=sorted(RESERVED_CONDITION_TAGS))
