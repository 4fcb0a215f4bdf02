"""
Bypass filters consulted before any rule.
"""

from typing import Optional

from .policy import PolicyConfig
from .rules.models import Action, ResourceInfo


def is_exempt(config: PolicyConfig, resource: ResourceInfo) -> bool:
    """User configuration pages and similar never get extra restrictions."""
    if resource.is_exempt:
        return True
    return config.exempt is not None and bool(config.exempt(resource))


def is_read_whitelisted(config: PolicyConfig, resource: ResourceInfo, action: str) -> bool:
    return action == Action.READ.value and resource.full_path in config.read_whitelist


def is_superuser(config: PolicyConfig, subject: str) -> bool:
    name = subject.lower()
    return any(name == superuser.lower() for superuser in config.superusers)


def find_bypass(config: PolicyConfig, subject: str, resource: ResourceInfo,
                action: str) -> Optional[str]:
    """Return the name of the first applying bypass filter, if any."""
    if is_exempt(config, resource):
        return "exempt"
    if is_read_whitelisted(config, resource, action):
        return "read-whitelist"
    if is_superuser(config, subject):
        return "superuser"
    return None
