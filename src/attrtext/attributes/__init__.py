"""Attribute store and edit policies."""

from .edit_behavior import SpanEditAction
from .store import AttributeAssertion, AttributeKind, AttributeStore, normalize_kind

__all__ = ["AttributeAssertion", "AttributeKind", "AttributeStore", "SpanEditAction", "normalize_kind"]
