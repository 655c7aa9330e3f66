"""
Rule data models for the RBAC permission matcher.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from .delegates import CallableRule, Rule
from .matching import WILDCARD, as_list

NEGATION_PREFIX = "*"

KEY_ALLOWED = "allowed"
KEY_BYPASS_AUTH = "bypassAuth"
KEY_CONTROLLER = "controller"
KEY_ACTION = "action"
KEY_USER = "user"

RESERVED_KEYS = ("prefix", "plugin", "extension", "controller", "action", "role")
SPECIAL_KEYS = (KEY_ALLOWED, KEY_BYPASS_AUTH)


class FieldKind(str, Enum):
    """Kinds of rule field values."""
    SCALAR = "scalar"
    LIST = "list"
    WILDCARD = "wildcard"
    DELEGATE = "delegate"
    BOOLEAN = "boolean"


class MatchResult(str, Enum):
    """Outcome of evaluating one rule."""
    ALLOW = "allow"
    DENY = "deny"
    INDETERMINATE = "indeterminate"

    @classmethod
    def from_bool(cls, allowed: bool) -> "MatchResult":
        return cls.ALLOW if allowed else cls.DENY


@dataclass(frozen=True)
class RuleField:
    """One condition of a rule, with its value kind resolved."""
    key: str
    kind: FieldKind
    value: Any
    negated: bool = False

    @classmethod
    def from_item(cls, raw_key: Any, value: Any) -> "RuleField":
        raw_key = str(raw_key)
        negated = raw_key.startswith(NEGATION_PREFIX)
        key = raw_key.lstrip(NEGATION_PREFIX)

        if isinstance(value, Rule):
            kind = FieldKind.DELEGATE
        elif callable(value):
            kind, value = FieldKind.DELEGATE, CallableRule(value)
        elif key in SPECIAL_KEYS and isinstance(value, bool):
            kind = FieldKind.BOOLEAN
        elif isinstance(value, str) and value == WILDCARD:
            kind = FieldKind.WILDCARD
        elif value is None or isinstance(value, (list, tuple, set, frozenset)):
            kind, value = FieldKind.LIST, tuple(as_list(value))
        else:
            kind = FieldKind.SCALAR

        return cls(key=key, kind=kind, value=value, negated=negated)

    @property
    def is_reserved(self) -> bool:
        return self.key in RESERVED_KEYS

    @property
    def user_path(self) -> str:
        """Dotted path of this field inside ``{"user": user}``."""
        if self.key.startswith(KEY_USER + "."):
            return self.key
        return f"{KEY_USER}.{self.key}"


@dataclass(frozen=True)
class PermissionRule:
    """A rule definition compiled once into an ordered tuple of fields.

    ``invalid_reason`` is set when the definition cannot be evaluated; such
    rules never produce a decision.
    """
    fields: Tuple[RuleField, ...]
    definition: Mapping[str, Any]
    invalid_reason: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.invalid_reason is None

    @classmethod
    def from_definition(cls, definition: Mapping[str, Any]) -> "PermissionRule":
        """Compile a raw rule definition."""
        if not isinstance(definition, Mapping):
            return cls(
                fields=(),
                definition=definition,
                invalid_reason="Permission must be a mapping of field keys to values"
            )

        if not _has_key(definition, KEY_CONTROLLER) or not _has_key(definition, KEY_ACTION):
            return cls(
                fields=(),
                definition=definition,
                invalid_reason="Cannot evaluate permission when 'controller' and/or 'action' keys are absent"
            )

        if _has_key(definition, KEY_USER):
            return cls(
                fields=(),
                definition=definition,
                invalid_reason="Permission key 'user' is illegal, cannot evaluate the permission"
            )

        fields = [RuleField.from_item(key, value) for key, value in definition.items()]
        if KEY_ALLOWED not in definition:
            fields.append(RuleField(key=KEY_ALLOWED, kind=FieldKind.BOOLEAN, value=True))

        return cls(fields=tuple(fields), definition=definition)


def _has_key(definition: Mapping[str, Any], key: str) -> bool:
    """True if the key is set, plain or negated, to a non-null value."""
    return any(
        definition.get(candidate) is not None
        for candidate in (key, NEGATION_PREFIX + key)
    )
