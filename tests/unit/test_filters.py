"""
Unit tests for bypass filters.
"""

import pytest

from permission_acl.filters import find_bypass, is_exempt, is_read_whitelisted, is_superuser
from permission_acl.policy import PolicyConfig
from permission_acl.rules.models import ResourceInfo


class TestBypassFilters:
    """Test cases for bypass filters."""

    @pytest.fixture
    def config(self):
        """Create a config with bypass lists."""
        return PolicyConfig(
            rules=[],
            superusers=["WikiAdmin"],
            read_whitelist=["Main Page", "Special:UserLogin"],
        )

    @pytest.fixture
    def page(self):
        """Create an ordinary page."""
        return ResourceInfo(identifier="Main Page", full_path="Main Page")

    def test_exempt_flag(self, config):
        """Test resources flagged exempt bypass rules."""
        resource = ResourceInfo(identifier="User:Bob/common.css", full_path="User:Bob/common.css",
                                namespace_id=2, is_exempt=True)

        assert is_exempt(config, resource) is True

    def test_exempt_predicate(self, page):
        """Test the config predicate can also exempt resources."""
        config = PolicyConfig(rules=[], exempt=lambda r: r.full_path.endswith(".js"))
        script = ResourceInfo(identifier="MediaWiki:Common.js", full_path="MediaWiki:Common.js")

        assert is_exempt(config, script) is True
        assert is_exempt(config, page) is False

    def test_whitelist_only_for_read(self, config, page):
        """Test whitelisted pages only bypass read restrictions."""
        assert is_read_whitelisted(config, page, "read") is True
        assert is_read_whitelisted(config, page, "edit") is False

    def test_whitelist_is_case_sensitive(self, config):
        """Test whitelist entries compare against the exact page name."""
        resource = ResourceInfo(identifier="main page", full_path="main page")

        assert is_read_whitelisted(config, resource, "read") is False

    def test_superuser_ignores_case(self, config):
        """Test superuser names compare case-insensitively."""
        assert is_superuser(config, "wikiadmin") is True
        assert is_superuser(config, "Alice") is False

    def test_find_bypass_order(self, config, page):
        """Test exempt wins over whitelist, whitelist over superuser."""
        exempt_page = ResourceInfo(identifier="Main Page", full_path="Main Page", is_exempt=True)

        assert find_bypass(config, "WikiAdmin", exempt_page, "read") == "exempt"
        assert find_bypass(config, "WikiAdmin", page, "read") == "read-whitelist"
        assert find_bypass(config, "WikiAdmin", page, "edit") == "superuser"
        assert find_bypass(config, "Alice", page, "edit") is None
