"""
RBAC package for the Access Layer.

This package decides whether a user may run a controller action. It
provides:

- app.rbac: the permission matcher (ordered rules, first decision wins).
- app.rules: rule model, value matching, and delegate rules.
- app.permissions: providers producing the ordered rule list.
- app.middleware: FastAPI gate calling the matcher before a route runs.

Guidelines:
- The matcher is stateless between calls; build it once, share it.
- Malformed rules are skipped and logged, never raised.
- Anything not explicitly allowed is denied.
"""

from .rbac import Rbac
from .rules.context import RequestContext

__all__ = [
    "Rbac",
    "RequestContext",
]
