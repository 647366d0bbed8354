"""
Prometheus Metrics
==================
Counters for authentication outcomes and authorization decisions.
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

# Custom registry so hosts can mount it next to their own metrics
OAUTH_REGISTRY = CollectorRegistry()

AUTHENTICATION_OUTCOMES = Counter(
    name="oauth_authentication_outcomes_total",
    documentation="OAuth authentication outcomes",
    labelnames=["outcome", "code"],
    registry=OAUTH_REGISTRY,
)

AUTHORIZATION_DECISIONS = Counter(
    name="oauth_authorization_decisions_total",
    documentation="Authorization gate decisions for authenticated consumers",
    labelnames=["decision"],
    registry=OAUTH_REGISTRY,
)


def record_outcome(outcome: str, code: str = "") -> None:
    AUTHENTICATION_OUTCOMES.labels(outcome=outcome, code=code).inc()


def record_decision(allowed: bool) -> None:
    AUTHORIZATION_DECISIONS.labels(decision="allow" if allowed else "deny").inc()


def get_metrics_text() -> bytes:
    """Metrics in the Prometheus text exposition format."""
    return generate_latest(OAUTH_REGISTRY)


__all__ = [
    "OAUTH_REGISTRY",
    "AUTHENTICATION_OUTCOMES",
    "AUTHORIZATION_DECISIONS",
    "CONTENT_TYPE_LATEST",
    "record_outcome",
    "record_decision",
    "get_metrics_text",
]
