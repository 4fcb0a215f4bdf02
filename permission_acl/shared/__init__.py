"""
Shared utilities for the permission ACL engine.

This package aggregates the ambient building blocks used by the engine:

- config: Engine configuration via pydantic-settings
- logging: Structured logging with correlation context
- metrics: Prometheus decision metrics
- errors: Canonical error types and responses

Do not import from permission_acl.rules into shared/ to avoid import cycles.
"""
