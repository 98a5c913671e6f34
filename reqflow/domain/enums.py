"""Domain Enumerations - All status and type definitions"""
from enum import Enum


class ResponsibleParty(str, Enum):
    """Which side of the engagement owns a step"""
    REQUESTER = "REQUESTER"  # Requesting business unit
    PROVIDER = "PROVIDER"    # Delivering IT unit
    SYSTEM = "SYSTEM"
    BOTH = "BOTH"
    DYNAMIC = "DYNAMIC"      # Determined at runtime


class StepType(str, Enum):
    """Display category of a workflow step"""
    TASK = "TASK"
    DECISION = "DECISION"
    APPROVAL = "APPROVAL"
    NOTIFICATION = "NOTIFICATION"
    WAIT = "WAIT"
    PARALLEL = "PARALLEL"
    MERGE = "MERGE"


class ConditionOperator(str, Enum):
    """Operators for declarative field conditions"""
    EQUALS = "EQUALS"
    NOT_EQUALS = "NOT_EQUALS"
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"
    GREATER_THAN_OR_EQUALS = "GREATER_THAN_OR_EQUALS"
    LESS_THAN_OR_EQUALS = "LESS_THAN_OR_EQUALS"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"
    IN = "IN"
    NOT_IN = "NOT_IN"
    IS_EMPTY = "IS_EMPTY"
    IS_NOT_EMPTY = "IS_NOT_EMPTY"
    EXISTS = "EXISTS"


class PermissionRule(str, Enum):
    """
    Permission checks in evaluation order

    The first rule that decides the outcome wins; DEFAULT applies when no
    restriction is configured.
    """
    DENIED_ROLES = "DENIED_ROLES"
    REQUIRES_ROLE = "REQUIRES_ROLE"
    REQUIRES_ALL_ROLES = "REQUIRES_ALL_ROLES"
    REQUIRES_ANY_ROLES = "REQUIRES_ANY_ROLES"
    ALLOWED_ROLES = "ALLOWED_ROLES"
    DEFAULT = "DEFAULT"
