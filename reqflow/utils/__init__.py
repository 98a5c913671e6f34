"""Utility modules"""
from .logger import get_logger, setup_logging
from .idgen import generate_correlation_id
from .time import utc_now

__all__ = [
    "get_logger",
    "setup_logging",
    "generate_correlation_id",
    "utc_now",
]
