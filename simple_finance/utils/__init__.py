# simple_finance/utils/__init__.py
"""
Cross-cutting utilities for Simple Finance.

- logging: Logging setup with correlation ID support
- context: Request context (correlation IDs)
- date_utils: Day counting and month bucketing helpers

Usage:
    from simple_finance.utils import setup_logging, get_logger
    from simple_finance.utils.date_utils import elapsed_days
"""

from simple_finance.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from simple_finance.utils.logging import setup_logging, get_logger

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
]
