"""Prometheus metrics for contract operations.

Counters are registered once per process through :func:`get_registry`; tests
can build an isolated :class:`MetricsRegistry` on their own ``CollectorRegistry``.
"""
from __future__ import annotations

from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter


class MetricsRegistry:
    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or REGISTRY
        self.operations = Counter(
            "certledger_operations_total",
            "Contract operations by outcome",
            ["operation", "outcome"],
            registry=self.registry,
        )
        self.access_denied = Counter(
            "certledger_access_denied_total",
            "Operations rejected by the role gate",
            ["operation"],
            registry=self.registry,
        )

    def observe(self, operation: str, outcome: str = "ok") -> None:
        self.operations.labels(operation=operation, outcome=outcome).inc()

    def observe_denied(self, operation: str) -> None:
        self.access_denied.labels(operation=operation).inc()

    def value(self, operation: str, outcome: str = "ok") -> float:
        sample = self.registry.get_sample_value(
            "certledger_operations_total", {"operation": operation, "outcome": outcome}
        )
        return sample or 0.0


_registry: Optional[MetricsRegistry] = None


def get_registry() -> MetricsRegistry:
    global _registry
    if _registry is None:
        _registry = MetricsRegistry()
    return _registry


__all__ = ["get_registry", "MetricsRegistry"]
