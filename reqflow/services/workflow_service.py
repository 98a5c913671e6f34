"""Workflow Service - Workflow definition business logic"""
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..domain.models import WorkflowDefinition, ValidationResult, NextStep
from ..domain.defaults import default_workflows
from ..domain.errors import WorkflowValidationError
from ..engine import WorkflowEngine, to_role_set
from ..repositories.workflow_repo import WorkflowRepository
from ..utils.logger import get_logger

logger = get_logger(__name__)


class WorkflowService:
    """Service for workflow definition operations"""

    def __init__(self, repo: WorkflowRepository, engine: WorkflowEngine):
        self.repo = repo
        self.engine = engine

    # =========================================================================
    # Read
    # =========================================================================

    def get_definition_for_roles(self, workflow_type: str, roles: Iterable[str]) -> WorkflowDefinition:
        """Load a definition and redact the steps the caller may not see"""
        definition = self.repo.load_definition(workflow_type)
        return self.engine.project_for_roles(definition, roles)

    def list_definitions_for_roles(
        self,
        roles: Iterable[str],
        active_only: bool = False
    ) -> List[WorkflowDefinition]:
        role_set = to_role_set(roles)
        return [
            self.engine.project_for_roles(definition, role_set)
            for definition in self.repo.list_definitions(active_only=active_only)
        ]

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_definition(self, definition: WorkflowDefinition) -> ValidationResult:
        return self.engine.validate(definition)

    def validate_stored(self, workflow_type: str) -> ValidationResult:
        return self.engine.validate(self.repo.load_definition(workflow_type))

    # =========================================================================
    # Write
    # =========================================================================

    def save_definition(self, definition: WorkflowDefinition) -> Dict[str, Any]:
        """
        Save a definition and report its validation

        Saving is never blocked by validation: malformed or orphan-carrying
        definitions can be stored as drafts. An active definition that no
        longer validates is saved inactive.
        """
        validation = self.engine.validate(definition)
        if definition.is_active and not validation.is_valid:
            logger.warning(
                f"Saving invalid workflow {definition.type} as inactive",
                extra={"workflow_type": definition.type}
            )
            definition = definition.model_copy(update={"is_active": False})

        saved = self.repo.save_definition(definition)
        return {"definition": saved, "validation": validation}

    def activate(
        self,
        workflow_type: str,
        expected_version: Optional[int] = None,
        acknowledge_warnings: bool = False
    ) -> WorkflowDefinition:
        """
        Mark a definition active

        Raises:
            WorkflowValidationError: If the definition has structural errors,
                or has warnings (e.g. orphaned steps) that were not acknowledged
        """
        definition = self.repo.load_definition(workflow_type)
        validation = self.engine.validate(definition)

        if not validation.is_valid:
            raise WorkflowValidationError(
                f"Workflow {workflow_type} has structural errors",
                details={"structural_errors": validation.structural_errors}
            )

        if validation.has_warnings and not acknowledge_warnings:
            raise WorkflowValidationError(
                f"Workflow {workflow_type} has warnings that must be acknowledged",
                details={
                    "warnings": validation.warnings,
                    "orphaned_step_ids": validation.orphaned_step_ids,
                }
            )

        version = definition.version if expected_version is None else expected_version
        return self.repo.set_active(workflow_type, True, version)

    def deactivate(self, workflow_type: str, expected_version: Optional[int] = None) -> WorkflowDefinition:
        definition = self.repo.load_definition(workflow_type)
        version = definition.version if expected_version is None else expected_version
        return self.repo.set_active(workflow_type, False, version)

    # =========================================================================
    # Execution decisions
    # =========================================================================

    def resolve_next_steps(
        self,
        workflow_type: str,
        current_step_id: str,
        form_data: Optional[Mapping[str, Any]] = None
    ) -> List[NextStep]:
        definition = self.repo.load_definition(workflow_type)
        return self.engine.resolve_next_steps(definition, current_step_id, form_data)

    def list_condition_tags(self) -> List[str]:
        return self.engine.registry.tags()

    # =========================================================================
    # Seeding
    # =========================================================================

    def seed_default_workflows(self) -> List[str]:
        """
        Store built-in definitions whose type is not stored yet

        Definitions end at the engine's terminal id and go through
        save_definition, so one that does not validate is stored inactive.
        """
        seeded = []
        for definition in default_workflows(self.engine.terminal_step_id):
            if self.repo.get_definition(definition.type) is None:
                self.save_definition(definition)
                seeded.append(definition.type)
        if seeded:
            logger.info(f"Seeded default workflows: {', '.join(seeded)}")
        return seeded
