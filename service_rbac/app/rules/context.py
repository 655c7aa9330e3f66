"""
Request view consumed by the permission matcher and delegate rules.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from .matching import get_path


@dataclass
class RequestContext:
    """Snapshot of the request as seen by the matcher.

    ``params`` holds the routing parameters (``prefix``, ``plugin``, ``_ext``,
    ``controller``, ``action``, ``pass``...), ``attributes`` any other value
    the integration layer wants delegate rules to see.
    """
    params: Dict[str, Any] = field(default_factory=dict)
    attributes: Dict[str, Any] = field(default_factory=dict)

    def get_param(self, path: str, default: Any = None) -> Any:
        """Get a routing parameter by dotted path."""
        return get_path(self.params, path, default)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Get a request attribute."""
        return self.attributes.get(name, default)
