"""Resolution rules and the resolver producing styled runs."""

from .resolver import Resolver, StyledRun
from .rules import ResolutionRule, RuleFunction, flag_rule, property_rule

__all__ = ["ResolutionRule", "Resolver", "RuleFunction", "StyledRun", "flag_rule", "property_rule"]
