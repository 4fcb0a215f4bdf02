"""
Shared fixtures for permission ACL tests.
"""

import pytest

from permission_acl.resolvers import InMemoryDirectory
from permission_acl.rules.engine import PolicyEvaluator
from permission_acl.shared.metrics import AclMetrics


@pytest.fixture
def directory():
    """Create a small wiki directory."""
    return InMemoryDirectory(
        members={
            "Alice": ["autoconfirmed", "editors"],
            "Bob": ["autoconfirmed"],
            "Carol": ["Sysop"],
        },
        pages={
            "Main Page": {"namespace": 0, "categories": ["Category:Public"]},
            "Project:Sandbox": {"namespace": 4},
            "Talk:Sandbox": {"namespace": 1},
            "Secret": {"namespace": 0, "categories": ["Category:Foo", "Category:Internal"]},
            "User:Alice/common.js": {"namespace": 2, "exempt": True},
        },
    )


@pytest.fixture
def metrics():
    """Create metrics bound to a private registry."""
    return AclMetrics()


@pytest.fixture
def evaluator(directory, metrics):
    """Create PolicyEvaluator over the test directory."""
    return PolicyEvaluator(directory, directory, metrics=metrics)
