"""Workflow Engine - Graph, permissions, conditions, reachability and projection"""
from .engine import WorkflowEngine
from .graph import WorkflowGraph, Edge
from .permission_evaluator import PermissionEvaluator, check_permission, to_role_set
from .condition_registry import (
    ConditionRegistry, ConditionEvaluator, FieldPredicate, create_default_registry
)
from .reachability import ReachabilityValidator
from .validator import WorkflowValidator
from .next_step_resolver import NextStepResolver
from .projector import WorkflowProjector

__all__ = [
    "WorkflowEngine",
    "WorkflowGraph",
    "Edge",
    "PermissionEvaluator",
    "check_permission",
    "to_role_set",
    "ConditionRegistry",
    "ConditionEvaluator",
    "FieldPredicate",
    "create_default_registry",
    "ReachabilityValidator",
    "WorkflowValidator",
    "NextStepResolver",
    "WorkflowProjector",
]
