"""
Base class for permission providers.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from shared.logging import get_logger


class AbstractProvider(ABC):
    """Produce the ordered permission list used by the matcher."""

    _default_config: Dict[str, Any] = {
        "autoload_config": "permissions",
        "config_dir": None,
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = {**self._default_config, **(config or {})}
        self.logger = get_logger(f"rbac.permissions.{type(self).__name__.lower()}")
        self.default_permissions = self._build_default_permissions()

    def get_config(self, key: str, default: Any = None) -> Any:
        value = self.config.get(key)
        return default if value is None else value

    @abstractmethod
    def get_permissions(self) -> List[Dict[str, Any]]:
        """Return the ordered list of rule definitions."""

    def _build_default_permissions(self) -> List[Dict[str, Any]]:
        return [
            # admin role allowed to all the things
            {
                "role": "admin",
                "prefix": "*",
                "extension": "*",
                "plugin": "*",
                "controller": "*",
                "action": "*",
            },
            # account actions allowed for all roles
            {
                "role": "*",
                "controller": "Users",
                "action": ["profile", "logout"],
            },
            # all roles allowed to Pages/display
            {
                "role": "*",
                "controller": "Pages",
                "action": "display",
            },
        ]
