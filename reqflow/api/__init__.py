"""API module - Routes and dependencies"""
from .deps import get_caller_roles_dep, get_correlation_id_dep, get_workflow_service_dep

__all__ = ["get_caller_roles_dep", "get_correlation_id_dep", "get_workflow_service_dep"]
