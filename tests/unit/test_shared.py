"""
Unit tests for shared configuration, errors, logging and metrics.
"""

import json

import pytest

from permission_acl.shared.config import AclSettings, get_settings
from permission_acl.shared.errors import (
    AccessLayerException, ConfigurationError, ErrorResponse, ResolutionError
)
from permission_acl.shared.logging import (
    add_correlation_context, add_service_context, clear_context, configure_logging,
    get_logger, set_request_id, set_subject_context
)
from permission_acl.shared.metrics import AclMetrics


class TestErrors:
    """Test cases for the exception hierarchy."""

    def test_configuration_error(self):
        """Test ConfigurationError carries its code and details."""
        error = ConfigurationError("Invalid rule", details={"index": 2})

        assert isinstance(error, AccessLayerException)
        assert error.code == "CONFIGURATION_ERROR"
        assert str(error) == "Invalid rule"
        assert error.details == {"index": 2}

    def test_resolution_error_prefixes_resolver(self):
        """Test ResolutionError names the failing resolver."""
        error = ResolutionError("groups", "timeout")

        assert error.message == "groups: timeout"
        assert error.details == {}

    def test_to_response(self):
        """Test exceptions convert to ErrorResponse."""
        response = ConfigurationError(details={"expression": "("}).to_response()

        assert isinstance(response, ErrorResponse)
        assert response.code == "CONFIGURATION_ERROR"
        assert response.message == "Invalid policy configuration"
        assert response.details == {"expression": "("}


class TestSettings:
    """Test cases for AclSettings."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        """Remove ACL_ variables leaking from the environment."""
        for name in ("ACL_PERMISSION_ACL", "ACL_SUPERUSERS", "ACL_READ_WHITELIST",
                     "ACL_LOG_LEVEL", "ACL_DENY_REASON", "ACL_CATEGORY_NAMESPACE"):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        """Test the defaults leave the policy unconfigured."""
        settings = AclSettings()

        assert settings.permission_acl is None
        assert settings.superusers == []
        assert settings.read_whitelist == []
        assert settings.category_namespace == "Category"
        assert settings.deny_reason == "permissionacl-denied"
        assert settings.log_level == "info"

    def test_from_environment(self, monkeypatch):
        """Test complex values are read from JSON environment variables."""
        rules = [{"user": "*", "page": "*", "action": "*", "operation": "deny"}]
        monkeypatch.setenv("ACL_PERMISSION_ACL", json.dumps(rules))
        monkeypatch.setenv("ACL_SUPERUSERS", '["WikiAdmin"]')
        monkeypatch.setenv("ACL_LOG_LEVEL", "debug")

        settings = get_settings()

        assert settings.permission_acl == rules
        assert settings.superusers == ["WikiAdmin"]
        assert settings.log_level == "debug"

    def test_overrides(self):
        """Test explicit overrides win."""
        settings = get_settings(read_whitelist=["Main Page"], deny_reason="custom")

        assert settings.read_whitelist == ["Main Page"]
        assert settings.deny_reason == "custom"


class TestLogging:
    """Test cases for logging helpers."""

    @pytest.fixture(autouse=True)
    def reset_context(self):
        """Clear correlation context around each test."""
        clear_context()
        yield
        clear_context()

    def test_correlation_context(self):
        """Test request and subject ids are added to events."""
        request_id = set_request_id()
        set_subject_context("Alice")

        event = add_correlation_context(None, "info", {"event": "Rule matched"})

        assert event["request_id"] == request_id
        assert event["subject"] == "Alice"

    def test_explicit_request_id(self):
        """Test a supplied request id is kept."""
        assert set_request_id("req-1") == "req-1"

    def test_cleared_context(self):
        """Test nothing is added without context."""
        event = add_correlation_context(None, "info", {"event": "x"})

        assert "request_id" not in event
        assert "subject" not in event

    def test_service_context(self):
        """Test the service name is taken from the logger name."""
        event = add_service_context(None, "info", {"logger": "permission_acl.engine"})

        assert event["service"] == "permission_acl"

    def test_configure_logging(self):
        """Test logging can be configured and used."""
        configure_logging("permission_acl", log_level="debug")

        get_logger("permission_acl.test").info("Configured", value=1)


class TestMetrics:
    """Test cases for AclMetrics."""

    def test_instances_do_not_collide(self):
        """Test each instance registers its own metrics."""
        first = AclMetrics()
        second = AclMetrics()

        first.record_decision(True, "rule")

        assert first.sample("acl_decisions_total", {"decision": "allow", "decided_by": "rule"}) == 1.0
        assert second.sample("acl_decisions_total", {"decision": "allow", "decided_by": "rule"}) is None

    def test_record_duration(self):
        """Test durations are observed."""
        metrics = AclMetrics()

        metrics.record_duration(0.002)

        assert metrics.sample("acl_evaluation_duration_seconds_count") == 1.0
        assert metrics.get_metric("acl_evaluation_duration_seconds") is not None
