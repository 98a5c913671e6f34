"""Repository modules - Data access layer"""
from .mongo_client import get_database, get_collection
from .workflow_repo import WorkflowRepository

__all__ = [
    "get_database",
    "get_collection",
    "WorkflowRepository",
]
