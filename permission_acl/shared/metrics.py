"""
Decision metrics for the permission ACL engine.
"""

from typing import Dict, Any, Optional

from prometheus_client import Counter, Histogram, CollectorRegistry


class AclMetrics:
    """Prometheus metrics recorded by the policy evaluator.

    Each instance owns its registry unless one is passed in, so several
    evaluators (or test cases) never collide on metric names.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up decision metrics."""
        self._metrics["acl_decisions_total"] = Counter(
            "acl_decisions_total",
            "Total access decisions",
            ["decision", "decided_by"],
            registry=self.registry
        )

        self._metrics["acl_evaluation_duration_seconds"] = Histogram(
            "acl_evaluation_duration_seconds",
            "Policy evaluation duration in seconds",
            registry=self.registry
        )

        self._metrics["acl_configuration_errors_total"] = Counter(
            "acl_configuration_errors_total",
            "Evaluations aborted by an invalid policy",
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def record_decision(self, allowed: bool, decided_by: str):
        """Record one verdict."""
        self._metrics["acl_decisions_total"].labels(
            decision="allow" if allowed else "deny",
            decided_by=decided_by
        ).inc()

    def record_configuration_error(self):
        """Record an evaluation aborted by a configuration error."""
        self._metrics["acl_configuration_errors_total"].inc()

    def record_duration(self, seconds: float):
        """Record how long one evaluation took."""
        self._metrics["acl_evaluation_duration_seconds"].observe(seconds)

    def sample(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read the current value of a sample from this registry."""
        return self.registry.get_sample_value(name, labels or {})
