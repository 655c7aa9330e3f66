"""
Value matching helpers used by the permission matcher.
"""

from collections.abc import Mapping, Sequence
from typing import Any, List

WILDCARD = "*"

_MISSING = object()


def camelize(value: str, delimiter: str = "_") -> str:
    """Turn a delimited word into its camel-cased form.

    The delimiter and spaces both separate words. Each word gets its first character upper-cased, the remaining characters
    are left untouched: ``camelize("user-add", "-") == "UserAdd"``.
    """
    return "".join(word[:1].upper() + word[1:] for word in value.replace(delimiter, " ").split(" "))


def get_path(data: Any, path: str, default: Any = None) -> Any:
    """Read a dotted path (``user.profile.group``) out of nested mappings.

    Integer segments index into sequences. Missing segments and ``None``
    values resolve to ``default``.
    """
    value = data
    for part in path.split("."):
        if isinstance(value, Mapping):
            value = value.get(part, _MISSING)
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and part.isdigit():
            index = int(part)
            value = value[index] if index < len(value) else _MISSING
        else:
            return default

        if value is _MISSING or value is None:
            return default

    return value


def as_list(value: Any) -> List[Any]:
    """Normalize a field value to a list of accepted values."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def match_or_wildcard(expected: Any, actual: Any, allow_empty: bool = False) -> bool:
    """Check ``actual`` against the accepted values, honouring the ``*`` wildcard.

    The camelized form of ``actual`` (``user-add`` -> ``UserAdd``) is checked
    too, so rules may name dash-cased actions in their camel-cased form.
    When ``allow_empty`` is set, an empty value list matches a missing value.
    """
    possible = as_list(expected)

    if allow_empty and not possible and actual is None:
        return True

    if isinstance(expected, str) and expected == WILDCARD:
        return True

    if actual in possible:
        return True

    if isinstance(actual, str) and camelize(actual, "-") in possible:
        return True

    return False
