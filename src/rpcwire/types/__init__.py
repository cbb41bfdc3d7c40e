"""Shared types for rpcwire.

Import from here rather than submodules:
    from rpcwire.types import LogLevel, ValidationResult
"""

from .enums import CallKind, LogFormat, LogLevel
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "CallKind",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
