"""Script to validate a workflow definition

Usage:
    python scripts/validate_workflow.py small_change          # stored definition
    python scripts/validate_workflow.py --file workflow.json  # definition file
"""
import argparse
import json
import sys

sys.path.insert(0, ".")

from reqflow.config.settings import settings
from reqflow.domain.models import WorkflowDefinition
from reqflow.engine import WorkflowEngine


def load_definition(args) -> WorkflowDefinition:
    if args.file:
        with open(args.file, encoding="utf-8") as fh:
            return WorkflowDefinition.model_validate(json.load(fh))

    from reqflow.repositories.workflow_repo import WorkflowRepository
    return WorkflowRepository().load_definition(args.workflow_type)


def print_report(definition: WorkflowDefinition, engine: WorkflowEngine) -> bool:
    graph = engine.build_graph(definition)
    entry = graph.entry_step()

    print(f"Workflow: {definition.name} ({definition.type})")
    print(f"   Version: {definition.version}   Active: {definition.is_active}")
    print(f"   Entry step: {entry.id if entry else None}")
    print()

    print("=" * 60)
    print("TRANSITION FLOW")
    print("=" * 60)
    for step in sorted(definition.steps, key=lambda s: s.order):
        print(f"\n[{step.order}] {step.title} ({step.id}, {step.step_type.value})")
        for edge in graph.outgoing_edges(step):
            print(f"   --[{edge.condition_tag}]--> {edge.target_step_id}  {edge.label}")

    result = engine.validate(definition)
    stats = result.statistics

    print("\n" + "=" * 60)
    print("VALIDATION RESULTS")
    print("=" * 60)

    print(f"\nSteps: {stats.total_steps}   Estimated days: {stats.total_estimated_days}")
    print(f"   By type: {stats.steps_by_type}")
    print(f"   By responsible party: {stats.steps_by_responsible}")
    print(f"   Roles: {', '.join(stats.required_roles) or '(none)'}")

    if result.structural_errors:
        print("\nERRORS:")
        for e in result.structural_errors:
            print(f"   - {e}")

    if result.warnings:
        print("\nWARNINGS:")
        for w in result.warnings:
            print(f"   - {w}")

    if result.is_valid and not result.warnings:
        print("\nWORKFLOW IS VALID")
    elif result.is_valid:
        print("\nWORKFLOW IS VALID (with warnings)")
    else:
        print("\nWORKFLOW HAS ERRORS")

    return result.is_valid


def main():
    parser = argparse.ArgumentParser(description="Validate a workflow definition")
    parser.add_argument("workflow_type", nargs="?", help="Stored workflow type to validate")
    parser.add_argument("--file", help="Validate a JSON definition file instead")
    args = parser.parse_args()

    if not args.file and not args.workflow_type:
        parser.error("either workflow_type or --file is required")

    engine = WorkflowEngine.from_settings(settings)
    ok = print_report(load_definition(args), engine)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
