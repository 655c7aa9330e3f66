"""
Dotted-path import helper used by configuration-driven components.
"""

import importlib
from typing import Any

from shared.errors import ConfigurationError


def import_string(dotted_path: str) -> Any:
    """Import ``package.module.Attribute`` and return the attribute."""
    try:
        module_path, attribute = dotted_path.rsplit(".", 1)
    except ValueError as e:
        raise ConfigurationError(
            f'"{dotted_path}" is not a dotted import path',
            details={"path": dotted_path}
        ) from e

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigurationError(
            f'Cannot import module "{module_path}"',
            details={"path": dotted_path, "error": str(e)}
        ) from e

    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise ConfigurationError(
            f'Module "{module_path}" does not define "{attribute}"',
            details={"path": dotted_path}
        ) from e
