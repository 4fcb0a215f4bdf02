"""
Shared configuration management for the permission ACL engine.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="ACL_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class AclSettings(BaseConfig):
    """Policy and bypass settings.

    ``permission_acl`` stays ``None`` when no policy is configured, which the
    evaluator treats as "allow everything". Complex values are read from the
    environment as JSON, e.g.::

        ACL_PERMISSION_ACL='[{"user": "*", "page": "*", "action": "*", "operation": "deny"}]'
        ACL_SUPERUSERS='["Admin"]'
    """

    permission_acl: Optional[List[Dict[str, Any]]] = Field(default=None)
    superusers: List[str] = Field(default_factory=list)
    read_whitelist: List[str] = Field(default_factory=list)

    # Localised category namespace text used when stripping category keys
    category_namespace: str = Field(default="Category")

    # Opaque message key attached to deny verdicts
    deny_reason: str = Field(default="permissionacl-denied")


def get_settings(**overrides: Any) -> AclSettings:
    """Get engine settings from the environment, with explicit overrides."""
    return AclSettings(**overrides)
