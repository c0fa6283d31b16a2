"""Tests for the engine error hierarchy."""

from __future__ import annotations

import pytest

from attrtext.core.errors import (
    AttributedTextError,
    ErrorCode,
    InputError,
    InvalidSpan,
    InvariantViolation,
    NotFound,
    ResolverFrozen,
    StyleSheetError,
)


class TestErrorHierarchy:
    """Input errors and engine faults live on separate branches."""

    @pytest.mark.parametrize("error_type", [InvalidSpan, NotFound])
    def test_input_errors(self, error_type) -> None:
        error = error_type()
        assert isinstance(error, InputError)
        assert isinstance(error, AttributedTextError)
        assert error.severity == "error"

    @pytest.mark.parametrize("error_type", [InvariantViolation, ResolverFrozen, StyleSheetError])
    def test_non_input_errors(self, error_type) -> None:
        assert not isinstance(error_type(), InputError)

    def test_invariant_violation_is_fatal(self) -> None:
        assert InvariantViolation.severity == "fatal"


class TestSerialization:
    def test_invalid_span_details(self) -> None:
        error = InvalidSpan(message="Span splits a character", start=1, end=2, reason="misaligned")

        assert str(error) == "[invalid_span] Span splits a character"
        assert error.to_dict() == {
            "error": ErrorCode.INVALID_SPAN,
            "message": "Span splits a character",
            "details": {"start": 1, "end": 2, "reason": "misaligned"},
        }

    def test_explicit_details_are_not_overwritten(self) -> None:
        error = NotFound(details={"sequence": 3, "hint": "removed twice"}, sequence=9)

        assert error.details == {"sequence": 3, "hint": "removed twice"}

    def test_empty_details_are_omitted(self) -> None:
        error = StyleSheetError(message="bad sheet")

        assert error.to_dict() == {"error": "invalid_stylesheet", "message": "bad sheet"}

    def test_errors_can_be_raised_and_caught(self) -> None:
        with pytest.raises(AttributedTextError) as excinfo:
            raise ResolverFrozen(kind="weight")

        assert excinfo.value.error_code == ErrorCode.RESOLVER_FROZEN
        assert excinfo.value.details == {"kind": "weight"}
        assert excinfo.value.args == ("Resolver rules are frozen",)
