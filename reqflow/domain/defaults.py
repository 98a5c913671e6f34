"""Built-in workflow definitions seeded into an empty store"""
from typing import List

from .models import (
    WorkflowDefinition, WorkflowMetadata, Step, Branch, PermissionSpec, TERMINAL_STEP_ID
)
from .enums import ResponsibleParty, StepType

SMALL_CHANGE_TYPE = "small_change"


def small_change_workflow(terminal_step_id: str = TERMINAL_STEP_ID) -> WorkflowDefinition:
    """
    Small change request

    request -> budget check -> (manager approval) -> implementation -> acceptance
    Manager approval can loop back to the request; acceptance can send the
    work back to implementation.
    """
    steps = [
        Step(
            id="step-1",
            title="Create request",
            description="Requester submits a new change requirement",
            step_type=StepType.TASK,
            responsible_party=ResponsibleParty.REQUESTER,
            order=1,
            estimated_duration_days=1,
            permission_spec=PermissionSpec(allowed_roles=["Requester"], denied_roles=["External"]),
            form_binding_id="form-small-change-001",
        ),
        Step(
            id="step-2",
            title="Budget check",
            description="Automatic routing on the requested budget",
            step_type=StepType.DECISION,
            responsible_party=ResponsibleParty.PROVIDER,
            order=2,
            permission_spec=PermissionSpec(allowed_roles=["SYSTEM"]),
            branches=[
                Branch(
                    condition_tag="budget_high",
                    target_step_id="step-3",
                    label="Budget > 5000 -> manager approval",
                ),
                Branch(
                    condition_tag="budget_low",
                    target_step_id="step-4",
                    label="Budget <= 5000 -> implementation",
                ),
            ],
        ),
        Step(
            id="step-3",
            title="Manager approval",
            description="Approval by a manager for larger budgets",
            step_type=StepType.APPROVAL,
            responsible_party=ResponsibleParty.PROVIDER,
            order=3,
            estimated_duration_days=2,
            permission_spec=PermissionSpec(allowed_roles=["Manager", "Approver"], requires_role="Manager"),
            branches=[
                Branch(condition_tag="approved", target_step_id="step-4", label="Approved -> implementation"),
                Branch(condition_tag="rejected", target_step_id=terminal_step_id, label="Rejected -> end workflow"),
                Branch(condition_tag="needsInfo", target_step_id="step-1", label="More information -> back to request"),
            ],
        ),
        Step(
            id="step-4",
            title="Technical implementation",
            description="Implementation of the requirement",
            step_type=StepType.TASK,
            responsible_party=ResponsibleParty.PROVIDER,
            order=4,
            estimated_duration_days=5,
            permission_spec=PermissionSpec(
                allowed_roles=["TechnicalLead", "Developer"],
                requires_any_roles=["TechnicalLead", "Developer"],
            ),
        ),
        Step(
            id="step-5",
            title="Acceptance",
            description="Requester accepts the delivered change",
            step_type=StepType.APPROVAL,
            responsible_party=ResponsibleParty.REQUESTER,
            order=5,
            estimated_duration_days=2,
            permission_spec=PermissionSpec(
                allowed_roles=["Requester", "BusinessUser"],
                requires_any_roles=["Requester", "BusinessUser"],
            ),
            branches=[
                Branch(condition_tag="accepted", target_step_id=terminal_step_id, label="Accepted -> workflow complete"),
                Branch(condition_tag="rejected", target_step_id="step-4", label="Rework -> back to implementation"),
            ],
        ),
    ]

    return WorkflowDefinition(
        id="wf-small-change-001",
        type=SMALL_CHANGE_TYPE,
        name="Small change request workflow",
        description="Workflow with permissions and branching",
        steps=steps,
        version=0,
        is_active=True,
        metadata=WorkflowMetadata(
            total_estimated_days=sum(s.estimated_duration_days for s in steps),
            supports_branching=True,
            created_by="System",
        ),
    )


def default_workflows(terminal_step_id: str = TERMINAL_STEP_ID) -> List[WorkflowDefinition]:
    return [small_change_workflow(terminal_step_id)]
