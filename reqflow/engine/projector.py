"""Workflow Projector - Role-redacted read-only view of a definition"""
from typing import Iterable

from ..domain.models import (
    WorkflowDefinition, Step, ADMIN_ROLE, RESTRICTED_TITLE, RESTRICTED_DESCRIPTION
)
from .permission_evaluator import PermissionEvaluator, to_role_set


class WorkflowProjector:
    """
    Produce the view of a definition a caller may see

    Administrators get the definition unchanged. For everyone else, steps
    the caller may not see keep id, order, branches and every other
    structural field; only title and description are replaced.
    """

    def __init__(self, permission_evaluator: PermissionEvaluator, admin_role: str = ADMIN_ROLE):
        self.permission_evaluator = permission_evaluator
        self.admin_role = admin_role

    def project(self, definition: WorkflowDefinition, roles: Iterable[str]) -> WorkflowDefinition:
        role_set = to_role_set(roles)
        if self.admin_role in role_set:
            return definition

        steps = [self._project_step(step, role_set) for step in definition.steps]
        return definition.model_copy(update={"steps": steps})

    def _project_step(self, step: Step, roles: frozenset) -> Step:
        if self.permission_evaluator.check_permission(step.permission_spec, roles):
            return step
        return step.model_copy(update={
            "title": RESTRICTED_TITLE,
            "description": RESTRICTED_DESCRIPTION,
        })
