"""
Shared utilities for the RBAC Access Layer.

This package aggregates common building blocks consumed by the RBAC
components:

- config: Matcher configuration via pydantic-settings
- logging: Structured logging with correlation context
- errors: Canonical error types and responses

Any cross-component logic should live here to avoid import cycles.
Do not import from service_* packages into shared/.
"""
