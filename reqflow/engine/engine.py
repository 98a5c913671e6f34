"""
Workflow Engine - Decision service for workflow definitions

The WorkflowEngine composes the analysis components and exposes the
operations used by services and routes:

    validate            -> WorkflowValidator (graph + reachability + registry)
    project_for_roles   -> WorkflowProjector (permission evaluator + admin bypass)
    resolve_next_steps  -> NextStepResolver (graph + condition evaluator)
    check_permission    -> PermissionEvaluator
    register_condition  -> ConditionRegistry (startup-time extension point)

Every operation takes the definition explicitly and returns a new value.
The engine holds no per-call state, so one instance can be shared across
threads once startup registration is done.
"""
from typing import Any, Iterable, List, Mapping, Optional

from ..domain.models import (
    WorkflowDefinition, PermissionSpec, PermissionDecision, NextStep, ValidationResult,
    TERMINAL_STEP_ID, ADMIN_ROLE
)
from .condition_registry import ConditionRegistry, ConditionEvaluator, Predicate, create_default_registry
from .permission_evaluator import PermissionEvaluator
from .validator import WorkflowValidator
from .next_step_resolver import NextStepResolver
from .projector import WorkflowProjector
from .graph import WorkflowGraph
from ..utils.logger import get_logger

logger = get_logger(__name__)


class WorkflowEngine:
    """Facade over graph, permission, condition, reachability and projection logic"""

    def __init__(
        self,
        registry: Optional[ConditionRegistry] = None,
        terminal_step_id: str = TERMINAL_STEP_ID,
        admin_role: str = ADMIN_ROLE,
        require_default_branch: bool = False
    ):
        self.registry = registry if registry is not None else ConditionRegistry()
        self.terminal_step_id = terminal_step_id
        self.admin_role = admin_role

        self.permission_evaluator = PermissionEvaluator()
        self.condition_evaluator = ConditionEvaluator(self.registry)
        self.validator = WorkflowValidator(
            registry=self.registry,
            terminal_step_id=terminal_step_id,
            require_default_branch=require_default_branch,
        )
        self.resolver = NextStepResolver(self.condition_evaluator, terminal_step_id)
        self.projector = WorkflowProjector(self.permission_evaluator, admin_role)

    @classmethod
    def from_settings(cls, settings) -> "WorkflowEngine":
        """Build an engine with the built-in condition tags and configured reserved ids"""
        return cls(
            registry=create_default_registry(settings.budget_threshold),
            terminal_step_id=settings.terminal_step_id,
            admin_role=settings.admin_role,
            require_default_branch=settings.require_default_branch,
        )

    def build_graph(self, definition: WorkflowDefinition) -> WorkflowGraph:
        return WorkflowGraph.from_definition(definition, self.terminal_step_id)

    def validate(self, definition: WorkflowDefinition) -> ValidationResult:
        """Report structural errors, orphaned steps and configuration warnings"""
        return self.validator.validate(definition)

    def project_for_roles(self, definition: WorkflowDefinition, roles: Iterable[str]) -> WorkflowDefinition:
        """Role-redacted copy of the definition (unchanged for administrators)"""
        return self.projector.project(definition, roles)

    def resolve_next_steps(
        self,
        definition: WorkflowDefinition,
        current_step_id: str,
        form_data: Optional[Mapping[str, Any]] = None
    ) -> List[NextStep]:
        """Viable successors of current_step_id; empty means blocked"""
        return self.resolver.resolve(definition, current_step_id, form_data)

    def check_permission(self, spec: PermissionSpec, roles: Iterable[str]) -> bool:
        return self.permission_evaluator.check_permission(spec, roles)

    def explain_permission(self, spec: PermissionSpec, roles: Iterable[str]) -> PermissionDecision:
        return self.permission_evaluator.evaluate(spec, roles)

    def register_condition(self, tag: str, predicate: Predicate, replace: bool = False) -> None:
        self.registry.register(tag, predicate, replace=replace)
        logger.info(f"Registered condition tag: {tag}", extra={"condition_tag": tag})
