# taskboard/lib/monitoring.py
from fastapi import FastAPI
from prometheus_client import Counter
from prometheus_client.registry import CollectorRegistry as Registry
from prometheus_fastapi_instrumentator import Instrumentator

from taskboard.core.logging import log

# Create a separate registry
registry = Registry()

task_transitions = Counter(
    "taskboard_task_transitions_total",
    "Task status and stage transitions",
    ["kind", "value"],
    registry=registry,
)


def record_transition(kind: str, value: str) -> None:
    """Count one status or stage transition."""
    task_transitions.labels(kind=kind, value=value).inc()


def register_monitoring(app: FastAPI) -> None:
    """
    Registers Prometheus monitoring on the FastAPI app.

    Request count and latency come from the instrumentator middleware;
    the /metrics endpoint exposes them together with the transition counter.
    """
    instrumentator = Instrumentator(
        excluded_handlers=["/metrics"],  # Don't monitor the metrics endpoint itself
        registry=registry,
    ).instrument(app)

    instrumentator.expose(app, include_in_schema=False, should_gzip=True)

    log("MONITORING", "Prometheus instrumentation registered at /metrics.")
