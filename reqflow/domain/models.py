"""Domain Models - Pydantic schemas for workflow definitions and engine results"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .enums import ResponsibleParty, StepType, ConditionOperator, PermissionRule


# ============================================================================
# Reserved identifiers
# ============================================================================

TERMINAL_STEP_ID = "step-end"
DEFAULT_CONDITION_TAG = "default"  # Catch-all branch, always fires
NEXT_CONDITION_TAG = "next"        # Implicit "next by order" edge, always fires
RESERVED_CONDITION_TAGS = frozenset({DEFAULT_CONDITION_TAG, NEXT_CONDITION_TAG})
ADMIN_ROLE = "Administrator"

RESTRICTED_TITLE = "Restricted access"
RESTRICTED_DESCRIPTION = "You do not have permission to view this step"


# ============================================================================
# Permissions
# ============================================================================

class PermissionSpec(BaseModel):
    """
    Access-control rule attached to a step or form field

    Role collections are treated as sets. For the requires_* rules None means
    "not configured"; an empty list is configured (see PermissionEvaluator).
    """
    model_config = ConfigDict(extra="forbid")

    allowed_roles: List[str] = Field(default_factory=list, description="Any of these roles grants access")
    denied_roles: Optional[List[str]] = Field(None, description="Any of these roles blocks access")
    requires_role: Optional[str] = Field(None, description="This exact role is mandatory")
    requires_all_roles: Optional[List[str]] = Field(None, description="Every one of these roles is mandatory")
    requires_any_roles: Optional[List[str]] = Field(None, description="At least one of these roles is mandatory")

    @property
    def is_unrestricted(self) -> bool:
        """True when no rule is configured and everyone is allowed"""
        return (
            not self.allowed_roles
            and not self.denied_roles
            and self.requires_role is None
            and self.requires_all_roles is None
            and self.requires_any_roles is None
        )


class PermissionDecision(BaseModel):
    """Outcome of a permission check and the rule that decided it"""
    allowed: bool
    rule: PermissionRule


# ============================================================================
# Conditions
# ============================================================================

class FieldCondition(BaseModel):
    """Declarative predicate over a single form field"""
    model_config = ConfigDict(extra="forbid")

    field: str = Field(..., description="Field path, dot notation for nested values")
    operator: ConditionOperator = Field(..., description="Comparison operator")
    value: Any = Field(None, description="Value to compare against")


# ============================================================================
# Workflow Definition
# ============================================================================

class Branch(BaseModel):
    """Conditional outgoing transition of a step"""
    model_config = ConfigDict(extra="forbid")

    condition_tag: str = Field(..., description="Registered condition tag or 'default'")
    target_step_id: str = Field(..., description="Target step ID or the terminal sentinel")
    label: str = Field(default="", description="Display/audit label")
    description: Optional[str] = None


class Step(BaseModel):
    """One node of the workflow graph"""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Step ID, unique within a definition")
    title: str = Field(..., description="Display name")
    description: Optional[str] = None
    step_type: StepType = Field(default=StepType.TASK)
    responsible_party: ResponsibleParty = Field(default=ResponsibleParty.PROVIDER)
    order: int = Field(default=0, description="Fallback successor ordering")
    estimated_duration_days: float = Field(default=0, ge=0)
    required: bool = Field(default=True)
    permission_spec: PermissionSpec = Field(default_factory=PermissionSpec)
    branches: List[Branch] = Field(default_factory=list, description="Ordered outgoing branches")
    form_binding_id: Optional[str] = Field(None, description="External form reference")


class WorkflowMetadata(BaseModel):
    """Derived/descriptive information about a definition"""
    model_config = ConfigDict(extra="ignore")

    total_estimated_days: float = 0
    supports_branching: bool = False
    created_by: Optional[str] = None


class WorkflowDefinition(BaseModel):
    """Complete workflow definition for one process type"""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Definition ID")
    type: str = Field(..., description="Process category key")
    name: str = Field(..., description="Workflow name")
    description: Optional[str] = None
    steps: List[Step] = Field(default_factory=list)
    version: int = Field(default=0, description="Optimistic concurrency version")
    is_active: bool = Field(default=False)
    entry_step_id: Optional[str] = Field(None, description="Explicit entry step, defaults to lowest order")
    metadata: WorkflowMetadata = Field(default_factory=WorkflowMetadata)
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None


# ============================================================================
# Engine results
# ============================================================================

class NextStep(BaseModel):
    """A viable successor of the current step"""
    step_id: str
    condition_tag: str
    label: str = ""


class WorkflowStatistics(BaseModel):
    """Shape summary of a definition, reported with its validation"""
    total_steps: int = 0
    total_estimated_days: float = 0
    steps_by_type: Dict[str, int] = Field(default_factory=dict)
    steps_by_responsible: Dict[str, int] = Field(default_factory=dict)
    required_roles: List[str] = Field(default_factory=list, description="Every role named by a step permission, sorted")
    has_approval_steps: bool = False
    has_conditional_steps: bool = False


class ValidationResult(BaseModel):
    """Validation outcome; is_valid only reflects structural errors"""
    is_valid: bool
    orphaned_step_ids: List[str] = Field(default_factory=list)
    structural_errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    statistics: WorkflowStatistics = Field(default_factory=WorkflowStatistics)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)
