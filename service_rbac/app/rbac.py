"""
Permission matcher: decides whether a request matches any of the RBAC rules.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple, Union

from shared.config import RbacConfig, get_config
from shared.errors import ConfigurationError
from shared.imports import import_string
from shared.logging import get_logger

from .permissions.base import AbstractProvider
from .rules.context import RequestContext
from .rules.matching import get_path, match_or_wildcard
from .rules.models import (
    FieldKind, MatchResult, PermissionRule,
    KEY_ALLOWED, KEY_BYPASS_AUTH
)


class Rbac:
    """Evaluate an ordered permission list against a user and a request.

    Rules are checked in order and the first one producing a definitive
    result decides. When none does, the request is denied.
    """

    def __init__(self, config: Union[RbacConfig, Mapping, None] = None, logger: Any = None):
        if isinstance(config, RbacConfig):
            self.config = config
        else:
            self.config = get_config(**dict(config or {}))
        self.logger = logger or get_logger("rbac.matcher")

        self.permissions: List[Any] = []
        self._rules: Tuple[PermissionRule, ...] = ()

        permissions = self.config.permissions
        if permissions is None:
            provider = self._create_provider()
            permissions = provider.get_permissions()
        self.set_permissions(permissions)

    def _create_provider(self) -> AbstractProvider:
        """Instantiate the configured permissions provider."""
        provider_class = self.config.permissions_provider_class
        if isinstance(provider_class, str):
            provider_class = import_string(provider_class)

        if (not isinstance(provider_class, type)
                or not issubclass(provider_class, AbstractProvider)
                or provider_class is AbstractProvider):
            raise ConfigurationError(
                f'Class "{provider_class}" must extend AbstractProvider',
                details={"permissions_provider_class": str(provider_class)}
            )

        return provider_class({
            "autoload_config": self.config.autoload_config,
            "config_dir": self.config.config_dir,
        })

    def get_config(self, key: str) -> Any:
        return getattr(self.config, key)

    def get_permissions(self) -> List[Any]:
        return list(self.permissions)

    def set_permissions(self, permissions: List[Any]) -> None:
        self.permissions = list(permissions)
        self._rules = tuple(PermissionRule.from_definition(p) for p in self.permissions)

    def check_permissions(self, user: Optional[Mapping], request: Union[RequestContext, Mapping]) -> bool:
        """Match against permissions, return True if a rule allows the request."""
        user = user or {}
        if isinstance(request, Mapping):
            request = RequestContext(params=dict(request))
        role = get_path(user, self.config.role_field, self.config.default_role)
        reserved = self._reserved_attributes(role, request)

        for index, rule in enumerate(self._rules):
            result = self._match_permission(rule, user, role, request, reserved)
            if result is not MatchResult.INDETERMINATE:
                self.logger.debug(
                    "Permission decided",
                    rule_index=index,
                    result=result.value,
                    role=role,
                    controller=reserved["controller"],
                    action=reserved["action"]
                )
                return result is MatchResult.ALLOW

        self.logger.debug(
            "No permission matched, denying",
            role=role,
            controller=reserved["controller"],
            action=reserved["action"]
        )
        return False

    def _reserved_attributes(self, role: Any, request: RequestContext) -> Dict[str, Any]:
        """Snapshot of the request values matchable by reserved keys."""
        return {
            "prefix": request.get_param("prefix"),
            "plugin": request.get_param("plugin"),
            "extension": request.get_param("_ext"),
            "controller": request.get_param("controller"),
            "action": request.get_param("action"),
            "role": role,
        }

    def _match_permission(
        self,
        rule: PermissionRule,
        user: Mapping,
        role: Any,
        request: RequestContext,
        reserved: Dict[str, Any]
    ) -> MatchResult:
        """Match a single rule. INDETERMINATE means the rule is discarded."""
        if not rule.valid:
            self.logger.debug(rule.invalid_reason, permission=repr(rule.definition))
            return MatchResult.INDETERMINATE

        user_data = {"user": user}

        for field in rule.fields:
            if field.kind is FieldKind.DELEGATE:
                result = bool(field.value.allowed(user, role, request))
            elif field.key == KEY_BYPASS_AUTH and field.value is True:
                return MatchResult.ALLOW
            elif field.key == KEY_BYPASS_AUTH and field.value is False:
                result = True
            elif field.key == KEY_ALLOWED:
                result = bool(user) and bool(field.value)
            elif field.is_reserved:
                result = match_or_wildcard(field.value, reserved[field.key], allow_empty=True)
            else:
                result = match_or_wildcard(field.value, get_path(user_data, field.user_path))

            if field.negated:
                result = not result
            if field.key == KEY_ALLOWED:
                return MatchResult.from_bool(result)
            if not result:
                break

        return MatchResult.INDETERMINATE
