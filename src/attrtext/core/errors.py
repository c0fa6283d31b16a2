"""Standardized error types for the attributed text engine.

Input errors (``InvalidSpan``, ``NotFound``) are recoverable and raised at the
mutating call. ``InvariantViolation`` signals a defect in the engine itself and
is deliberately kept outside the input-error branch of the hierarchy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


# -----------------------------------------------------------------------------
# Error Code Constants
# -----------------------------------------------------------------------------

class ErrorCode:
    """Constants for error codes used in serialized error payloads."""

    # Input errors
    INVALID_SPAN = "invalid_span"
    NOT_FOUND = "not_found"

    # Configuration errors
    RESOLVER_FROZEN = "resolver_frozen"
    INVALID_STYLESHEET = "invalid_stylesheet"

    # Engine faults
    INVARIANT_VIOLATION = "invariant_violation"


# -----------------------------------------------------------------------------
# Base Error Class
# -----------------------------------------------------------------------------

@dataclass
class AttributedTextError(Exception):
    """Base exception class for all engine errors.

    Attributes:
        error_code: Machine-readable error identifier.
        message: Human-readable error description.
        details: Additional structured error information.
    """

    error_code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    severity: ClassVar[str] = "error"

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary for diagnostics payloads."""
        result: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


@dataclass
class InputError(AttributedTextError):
    """Base for errors caused by caller input; the store is left unchanged."""


# -----------------------------------------------------------------------------
# Input Errors
# -----------------------------------------------------------------------------

@dataclass
class InvalidSpan(InputError):
    """Raised when a span is empty, out of bounds, or splits a character."""

    error_code: str = field(default=ErrorCode.INVALID_SPAN)
    message: str = field(default="Span is not valid for this buffer")
    details: dict[str, Any] = field(default_factory=dict)

    start: int | None = field(default=None)
    end: int | None = field(default=None)
    reason: str = field(default="invalid")

    def __post_init__(self) -> None:
        if self.start is not None:
            self.details.setdefault("start", self.start)
        if self.end is not None:
            self.details.setdefault("end", self.end)
        self.details.setdefault("reason", self.reason)
        super().__post_init__()


@dataclass
class NotFound(InputError):
    """Raised when removal references an assertion id that does not exist."""

    error_code: str = field(default=ErrorCode.NOT_FOUND)
    message: str = field(default="Assertion not found")
    details: dict[str, Any] = field(default_factory=dict)

    sequence: int | None = field(default=None)

    def __post_init__(self) -> None:
        if self.sequence is not None:
            self.details.setdefault("sequence", self.sequence)
        super().__post_init__()


# -----------------------------------------------------------------------------
# Configuration Errors
# -----------------------------------------------------------------------------

@dataclass
class ResolverFrozen(AttributedTextError):
    """Raised when a rule is registered on a frozen resolver."""

    error_code: str = field(default=ErrorCode.RESOLVER_FROZEN)
    message: str = field(default="Resolver rules are frozen")
    details: dict[str, Any] = field(default_factory=dict)

    kind: str | None = field(default=None)

    def __post_init__(self) -> None:
        if self.kind is not None:
            self.details.setdefault("kind", self.kind)
        super().__post_init__()


@dataclass
class StyleSheetError(AttributedTextError):
    """Raised when a style sheet payload cannot be interpreted."""

    error_code: str = field(default=ErrorCode.INVALID_STYLESHEET)
    message: str = field(default="Style sheet payload is invalid")
    details: dict[str, Any] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# Engine Faults
# -----------------------------------------------------------------------------

@dataclass
class InvariantViolation(AttributedTextError):
    """Raised when the run builder produces a result that breaks its invariants.

    This indicates a defect in the engine rather than bad input, so it never
    derives from :class:`InputError`.
    """

    error_code: str = field(default=ErrorCode.INVARIANT_VIOLATION)
    message: str = field(default="Run partition invariant violated")
    details: dict[str, Any] = field(default_factory=dict)

    severity: ClassVar[str] = "fatal"


__all__ = [
    "AttributedTextError",
    "ErrorCode",
    "InputError",
    "InvalidSpan",
    "InvariantViolation",
    "NotFound",
    "ResolverFrozen",
    "StyleSheetError",
]
