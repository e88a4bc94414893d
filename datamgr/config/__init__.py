"""
datamgr Configuration

Environment-driven process settings.
"""

from .schemas import DEFAULT_MAX_FORM_MEMORY, AppSettings, parse_listen

__all__ = [
    "AppSettings",
    "DEFAULT_MAX_FORM_MEMORY",
    "parse_listen",
]
