"""
Permission provider backed by a YAML configuration file.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List

import yaml

from shared.errors import ConfigurationError
from shared.imports import import_string

from ..rules.delegates import CallableRule, Rule
from .base import AbstractProvider

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

YAML_SUFFIXES = (".yaml", ".yml")


class ConfigProvider(AbstractProvider):
    """Load permissions from ``<config_dir>/<autoload_config>.yaml``.

    The file holds either a list of rules or a mapping with the list under
    ``permissions``. Delegate rules are written as ``{rule: dotted.Class,
    <config>...}`` or ``{callable: dotted.function}``. When the file does not
    exist, the default permissions are used.
    """

    def get_permissions(self) -> List[Dict[str, Any]]:
        autoload = self.get_config("autoload_config")
        if not autoload:
            return self.default_permissions

        path = self._resolve_path(autoload)
        if not path.is_file():
            self.logger.error(
                "Missing permissions configuration file, using default permissions",
                autoload_config=autoload,
                path=str(path)
            )
            return self.default_permissions

        permissions = self._read_permissions(path)
        self.logger.info("Permissions loaded", path=str(path), count=len(permissions))
        return [self._load_permission(permission) for permission in permissions]

    def _resolve_path(self, autoload: str) -> Path:
        candidate = Path(autoload)
        if candidate.is_file():
            return candidate

        config_dir = Path(self.get_config("config_dir", DEFAULT_CONFIG_DIR))
        if candidate.suffix in YAML_SUFFIXES:
            return config_dir / candidate

        for suffix in YAML_SUFFIXES:
            path = config_dir / f"{autoload}{suffix}"
            if path.is_file():
                return path
        return config_dir / f"{autoload}{YAML_SUFFIXES[0]}"

    def _read_permissions(self, path: Path) -> List[Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                "Invalid YAML in permissions file",
                details={"path": str(path), "error": str(e)}
            ) from e

        if document is None:
            self.logger.warning("Permissions file is empty", path=str(path))
            return []
        if isinstance(document, Mapping):
            document = document.get("permissions")
        if not isinstance(document, list):
            raise ConfigurationError(
                "Permissions file must hold a list of rules",
                details={"path": str(path)}
            )
        return document

    def _load_permission(self, permission: Any) -> Any:
        # Malformed rules are kept as-is; the matcher skips them
        if not isinstance(permission, Mapping):
            return permission
        return {key: self._load_value(value) for key, value in permission.items()}

    def _load_value(self, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value

        if "rule" in value:
            rule_class = import_string(value["rule"])
            if not isinstance(rule_class, type) or not issubclass(rule_class, Rule):
                raise ConfigurationError(
                    f'Class "{value["rule"]}" must extend Rule',
                    details={"rule": value["rule"]}
                )
            rule_config = {k: v for k, v in value.items() if k != "rule"}
            return rule_class(rule_config) if rule_config else rule_class()

        if "callable" in value:
            func = import_string(value["callable"])
            if not callable(func):
                raise ConfigurationError(
                    f'"{value["callable"]}" is not callable',
                    details={"callable": value["callable"]}
                )
            return CallableRule(func)

        return value
