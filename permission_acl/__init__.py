"""
Rule-based access control decisions for wiki-style resources.

Given a subject, a resource (namespace, page name, categories) and an
action, ``PolicyEvaluator.evaluate`` scans an ordered policy list and
returns the verdict of the first applicable rule, denying when nothing
matches.
"""

from .policy import PolicyConfig
from .resolvers import GroupResolver, ResourceResolver, InMemoryDirectory, strip_category_prefix
from .rules.engine import PolicyEvaluator, evaluate, DENIED_REASON
from .rules.models import Action, Operation, MatchMode, ResourceInfo, Rule, Selector, Verdict
from .rules.validator import RuleValidator
from .shared.errors import ConfigurationError, ResolutionError

__all__ = [
    "PolicyConfig",
    "PolicyEvaluator",
    "evaluate",
    "DENIED_REASON",
    "GroupResolver",
    "ResourceResolver",
    "InMemoryDirectory",
    "strip_category_prefix",
    "Action",
    "Operation",
    "MatchMode",
    "ResourceInfo",
    "Rule",
    "Selector",
    "Verdict",
    "RuleValidator",
    "ConfigurationError",
    "ResolutionError",
]
