# Area: Shared
"""Shared infrastructure: logging setup."""

from .logging_config import log_rejection, setup_logging

__all__ = ["log_rejection", "setup_logging"]
