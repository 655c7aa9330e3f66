"""
Rules package.

Defines the rule model and the matching helpers used by the permission
matcher. A rule is an ordered mapping of field keys to values; it is
compiled once into typed fields so evaluation never re-inspects raw
values.

Modules of interest:
- models: Field kinds, compiled rules, and match results.
- matching: Wildcard/list matching, camelizing, dotted-path lookup.
- delegates: Rule interface, callable adapter, and the owner rule.
- context: Request snapshot handed to delegates.
"""

from .context import RequestContext
from .delegates import AbstractRule, CallableRule, OwnerRule, Rule
from .models import FieldKind, MatchResult, PermissionRule, RuleField

__all__ = [
    "AbstractRule",
    "CallableRule",
    "FieldKind",
    "MatchResult",
    "OwnerRule",
    "PermissionRule",
    "RequestContext",
    "Rule",
    "RuleField",
]
