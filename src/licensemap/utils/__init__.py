"""Utility helpers shared across licensemap modules."""

from .fingerprint import fingerprint
from .logging import configure_logging, get_logger, logging_context
from .status import STATUS_VOCABULARY, classify_status, is_available

__all__ = [
    "configure_logging",
    "get_logger",
    "logging_context",
    "fingerprint",
    "STATUS_VOCABULARY",
    "classify_status",
    "is_available",
]
