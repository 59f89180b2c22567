"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking-path decisions
cta_decisions = Counter(
    'cta_decisions_total',
    'Primary call-to-action decisions',
    ['kind']  # tickets, rsvp, waitlist, external, coming_soon, event_ended
)

# Reconciliation metrics
ticket_sync_runs = Counter(
    'ticket_sync_runs_total',
    'Ticket type to variation sync runs',
    ['result']  # completed, skipped, failed, locked
)

ticket_sync_latency = Histogram(
    'ticket_sync_latency_seconds',
    'Ticket type sync latency',
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

variation_operations = Counter(
    'variation_operations_total',
    'Commerce variation operations',
    ['operation']  # created, updated, retired, retitled
)

rsvp_products_created = Counter(
    'rsvp_products_created_total',
    'Auto-generated RSVP products'
)

# Collaborator health
collaborator_errors = Counter(
    'collaborator_errors_total',
    'Failures of external collaborators degraded to safe defaults',
    ['collaborator']  # availability, commerce, ticket_type
)

sync_lock_contention = Counter(
    'sync_lock_contention_total',
    'Sync requests that could not obtain the per-event lock',
    ['scope']  # ticket_types, sync_products
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)

redis_circuit_breaker_open = Gauge(
    'redis_circuit_breaker_open',
    'Redis circuit breaker state (1=open, 0=closed)'
)

def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )

# Convenience functions for instrumentation
def record_cta_decision(kind: str):
    """Record which primary CTA was chosen."""
    cta_decisions.labels(kind=kind).inc()

def record_sync_run(result: str):
    """Record ticket sync run. Result: completed, skipped, failed, locked"""
    ticket_sync_runs.labels(result=result).inc()

def record_variation_operation(operation: str):
    """Record variation operation. Operation: created, updated, retired, retitled"""
    variation_operations.labels(operation=operation).inc()

def record_collaborator_error(collaborator: str):
    """Record a degraded collaborator failure."""
    collaborator_errors.labels(collaborator=collaborator).inc()

def record_lock_contention(scope: str):
    """Record a sync that found its lock held."""
    sync_lock_contention.labels(scope=scope).inc()
