"""
Delegate rules: decision objects that can be placed as a rule field value.

A delegate is called with ``(user, role, request)`` and answers whether the
field passes. Plain functions are wrapped in :class:`CallableRule` when the
rule is loaded, so the matcher only ever deals with :class:`Rule` objects.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional

from shared.imports import import_string
from shared.logging import get_logger

from .context import RequestContext
from .matching import get_path


class Rule(ABC):
    """Decision delegate interface."""

    @abstractmethod
    def allowed(self, user: Mapping[str, Any], role: str, request: RequestContext) -> bool:
        """Return True when the field this rule is attached to passes."""


class CallableRule(Rule):
    """Adapter exposing a plain function as a Rule."""

    def __init__(self, func: Callable[[Mapping[str, Any], str, RequestContext], Any]):
        self.func = func

    def allowed(self, user: Mapping[str, Any], role: str, request: RequestContext) -> bool:
        return bool(self.func(user, role, request))

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"CallableRule({name})"


class AbstractRule(Rule):
    """Base class for configurable rules."""

    _default_config: Dict[str, Any] = {}

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = {**self._default_config, **(config or {})}
        self.logger = get_logger(f"rbac.rules.{type(self).__name__.lower()}")

    def get_config(self, key: str, default: Any = None) -> Any:
        value = self.config.get(key)
        return default if value is None else value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config!r})"


class OwnerRule(AbstractRule):
    """Allow when the record addressed by the request belongs to the user.

    Records are looked up through the ``finder`` callable,
    ``finder(table, key_field, key_value) -> Optional[Mapping]``, which keeps
    storage access outside the matcher. ``finder`` may also be a dotted
    import path.

    Config:
        table: table to look up, defaults to the request controller
        id_param: routing parameter carrying the record id, the first
            ``pass`` entry is used when it is absent
        table_key_field: record field matched against the id
        owner_foreign_key: record field holding the owner id
        id_field: dotted path of the id in the user record
    """

    _default_config = {
        "table": None,
        "id_param": "id",
        "table_key_field": "id",
        "owner_foreign_key": "user_id",
        "id_field": "id",
        "finder": None,
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        if isinstance(self.config["finder"], str):
            self.config["finder"] = import_string(self.config["finder"])

    def allowed(self, user: Mapping[str, Any], role: str, request: RequestContext) -> bool:
        finder = self.get_config("finder")
        if finder is None:
            self.logger.warning("Owner rule has no finder configured")
            return False

        user_id = get_path(user, self.get_config("id_field"))
        record_id = self._get_record_id(request)
        if user_id is None or record_id is None:
            return False

        table = self.get_config("table") or request.get_param("controller")
        record = finder(table, self.get_config("table_key_field"), record_id)
        if not record:
            self.logger.debug("Owner rule record not found", table=table, record_id=record_id)
            return False

        return get_path(record, self.get_config("owner_foreign_key")) == user_id

    def _get_record_id(self, request: RequestContext) -> Any:
        record_id = request.get_param(self.get_config("id_param"))
        if record_id is None:
            record_id = request.get_param("pass.0")
        return record_id
