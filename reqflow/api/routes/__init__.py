"""API Routes module"""
from fastapi import APIRouter

from .workflows import router as workflows_router
from .decisions import router as decisions_router

# Main API router
api_router = APIRouter()

api_router.include_router(workflows_router, prefix="/workflows", tags=["Workflows"])
api_router.include_router(decisions_router, tags=["Decisions"])

__all__ = ["api_router"]
