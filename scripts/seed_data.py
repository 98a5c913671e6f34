"""
Seed Data Script - Stores the built-in workflow definitions
Run: python -m scripts.seed_data
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reqflow.config.settings import settings
from reqflow.engine import WorkflowEngine
from reqflow.repositories.mongo_client import create_indexes
from reqflow.repositories.workflow_repo import WorkflowRepository
from reqflow.services.workflow_service import WorkflowService


def seed():
    """Create indexes and store built-in definitions that are missing"""
    create_indexes()

    repo = WorkflowRepository()
    service = WorkflowService(repo, WorkflowEngine.from_settings(settings))

    seeded = service.seed_default_workflows()
    if not seeded:
        print("All built-in workflows already stored. Skipping seed.")
        return

    for workflow_type in seeded:
        definition = repo.load_definition(workflow_type)
        validation = service.validate_definition(definition)
        print(f"Seeded {definition.name} ({workflow_type}) v{definition.version}")
        print(f"   Steps: {len(definition.steps)}   Active: {definition.is_active}")
        for warning in validation.warnings:
            print(f"   Warning: {warning}")


if __name__ == "__main__":
    seed()
