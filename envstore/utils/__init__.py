"""
Utilities Module
================

Logging setup and helpers.
"""

from .logger import setup_logging, get_logger, with_debug_logging, with_quiet_logging

__all__ = [
    'setup_logging',
    'get_logger',
    'with_debug_logging',
    'with_quiet_logging',
]
