"""API Dependencies - Common dependencies for routes"""
from functools import lru_cache
from typing import List, Optional
from fastapi import Depends, Header

from ..config.settings import settings
from ..engine import WorkflowEngine
from ..repositories.workflow_repo import WorkflowRepository
from ..services.workflow_service import WorkflowService
from ..utils.logger import set_correlation_id
from ..utils.idgen import generate_correlation_id


async def get_correlation_id_dep(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id")
) -> str:
    """
    Get or generate correlation ID for request tracing

    If client provides X-Correlation-Id, use it.
    Otherwise generate a new one.
    """
    correlation_id = x_correlation_id or generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


async def get_caller_roles_dep(
    x_user_roles: Optional[str] = Header(None, alias="X-User-Roles")
) -> List[str]:
    """
    Caller roles resolved by the upstream identity layer

    Comma-separated list; a missing header means no roles.
    """
    if not x_user_roles:
        return []
    return [role.strip() for role in x_user_roles.split(",") if role.strip()]


@lru_cache()
def get_engine() -> WorkflowEngine:
    """Process-wide engine with the built-in condition tags"""
    return WorkflowEngine.from_settings(settings)


def get_engine_dep() -> WorkflowEngine:
    return get_engine()


def get_workflow_service_dep(
    engine: WorkflowEngine = Depends(get_engine_dep)
) -> WorkflowService:
    return WorkflowService(WorkflowRepository(), engine)
