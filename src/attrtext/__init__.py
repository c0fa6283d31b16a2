"""Ranged text attributes resolved into non-overlapping styled runs."""

from .attributes import AttributeAssertion, AttributeStore, SpanEditAction
from .core import (
    AttributedTextError,
    InvalidSpan,
    InvariantViolation,
    NotFound,
    TextBuffer,
    TextSpan,
)
from .resolver import ResolutionRule, Resolver, StyledRun, flag_rule, property_rule
from .runs import ABSENT, Combine, FirstWriterWins, LastWriterWins, OverlapPolicy, Run, RunBuilder
from .text import AttributedText, TextSnapshot

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
    "AttributeAssertion",
    "AttributeStore",
    "AttributedText",
    "AttributedTextError",
    "Combine",
    "FirstWriterWins",
    "InvalidSpan",
    "InvariantViolation",
    "LastWriterWins",
    "NotFound",
    "OverlapPolicy",
    "ResolutionRule",
    "Resolver",
    "Run",
    "RunBuilder",
    "SpanEditAction",
    "StyledRun",
    "TextBuffer",
    "TextSnapshot",
    "TextSpan",
    "flag_rule",
    "property_rule",
]
