"""
Request pipeline for the reqflow API

    correlation     - X-Correlation-Id propagation and per-request access log
    error_handlers  - DomainError / request validation / unexpected errors as JSON envelopes
"""

from .correlation import CorrelationIdMiddleware
from .error_handlers import register_error_handlers

__all__ = ["CorrelationIdMiddleware", "register_error_handlers"]
