"""Core domain types and utilities.

This package contains the buffer, span and error types shared by the
attribute store, run builder and resolver.
"""

from .buffer import TextBuffer
from .errors import (
    AttributedTextError,
    ErrorCode,
    InputError,
    InvalidSpan,
    InvariantViolation,
    NotFound,
    ResolverFrozen,
    StyleSheetError,
)
from .ranges import TextSpan, collect_breakpoints, validate_partition

__all__ = [
    "AttributedTextError",
    "ErrorCode",
    "InputError",
    "InvalidSpan",
    "InvariantViolation",
    "NotFound",
    "ResolverFrozen",
    "StyleSheetError",
    "TextBuffer",
    "TextSpan",
    "collect_breakpoints",
    "validate_partition",
]
