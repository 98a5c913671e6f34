"""Workflow Validator - Structural checks and soft warnings for a definition"""
from collections import Counter
from typing import List, Optional, Set

from ..domain.models import (
    WorkflowDefinition, ValidationResult, WorkflowStatistics, TERMINAL_STEP_ID, DEFAULT_CONDITION_TAG
)
from ..domain.enums import StepType
from .graph import WorkflowGraph
from .reachability import ReachabilityValidator
from .condition_registry import ConditionRegistry
from ..utils.logger import get_logger

logger = get_logger(__name__)


class WorkflowValidator:
    """
    Validate a workflow definition before it is saved or activated

    Structural errors (malformed definition) make the result invalid.
    Warnings (orphaned steps, unregistered condition tags, unrestricted
    steps, missing default branches when required) are reported but do not.
    Nothing here raises for a malformed definition.
    """

    def __init__(
        self,
        registry: Optional[ConditionRegistry] = None,
        terminal_step_id: str = TERMINAL_STEP_ID,
        require_default_branch: bool = False
    ):
        self.registry = registry
        self.terminal_step_id = terminal_step_id
        self.require_default_branch = require_default_branch
        self.reachability = ReachabilityValidator()

    def validate(self, definition: WorkflowDefinition) -> ValidationResult:
        graph = WorkflowGraph.from_definition(definition, self.terminal_step_id)

        errors: List[str] = []
        warnings: List[str] = []

        if not definition.name or not definition.name.strip():
            errors.append("Workflow name is required")

        if not definition.steps:
            errors.append("Workflow must have at least one step")

        errors.extend(graph.structural_errors)

        for position, step in enumerate(definition.steps, start=1):
            if step.permission_spec.is_unrestricted:
                warnings.append(f"Step {position} ({step.id}): no permissions defined")

            seen_tags = set()
            for branch in step.branches:
                tag = branch.condition_tag
                if tag in seen_tags:
                    continue
                seen_tags.add(tag)
                if self.registry is not None and not self.registry.is_registered(tag):
                    warnings.append(
                        f"Step {step.id}: condition tag '{tag}' is not registered and will never match"
                    )

            if (
                self.require_default_branch
                and step.branches
                and DEFAULT_CONDITION_TAG not in seen_tags
            ):
                warnings.append(
                    f"Step {step.id}: no '{DEFAULT_CONDITION_TAG}' branch, process may block here"
                )

        orphaned = self.reachability.find_orphans(graph)
        if orphaned:
            entry = graph.entry_step()
            entry_id = entry.id if entry else None
            for step_id in orphaned:
                warnings.append(f"Step {step_id} is not reachable from entry step {entry_id}")

        result = ValidationResult(
            is_valid=not errors,
            orphaned_step_ids=orphaned,
            structural_errors=errors,
            warnings=warnings,
            statistics=self.statistics(definition),
        )

        logger.info(
            f"Validated workflow {definition.id}: "
            f"{len(errors)} error(s), {len(warnings)} warning(s)",
            extra={"workflow_id": definition.id, "workflow_type": definition.type}
        )
        return result

    def statistics(self, definition: WorkflowDefinition) -> WorkflowStatistics:
        """
        Summarize step types, responsible parties and the roles that grant access

        required_roles collects allowed, required and any-of roles; denied
        roles only block and are not listed.
        """
        roles: Set[str] = set()
        for step in definition.steps:
            spec = step.permission_spec
            roles.update(spec.allowed_roles)
            roles.update(spec.requires_all_roles or [])
            roles.update(spec.requires_any_roles or [])
            if spec.requires_role is not None:
                roles.add(spec.requires_role)

        return WorkflowStatistics(
            total_steps=len(definition.steps),
            total_estimated_days=sum(s.estimated_duration_days for s in definition.steps),
            steps_by_type=dict(Counter(s.step_type.value for s in definition.steps)),
            steps_by_responsible=dict(Counter(s.responsible_party.value for s in definition.steps)),
            required_roles=sorted(roles),
            has_approval_steps=any(s.step_type == StepType.APPROVAL for s in definition.steps),
            has_conditional_steps=any(s.branches for s in definition.steps),
        )
