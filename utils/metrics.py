# User value: This file exports ClothSwap counters to Prometheus so operators can see how swaps are going.
import logging
import threading
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Histogram, make_asgi_app

logger = logging.getLogger("api.metrics")

REGISTRY = CollectorRegistry()
UNMATCHED_ROUTE = "unmatched"
LATENCY_BUCKETS_MS = (5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000, 60000)

_LOCK = threading.Lock()
_METRICS: dict[str, Any] = {}


def _get_or_create(kind, name: str, labelnames: tuple, **kwargs):
    with _LOCK:
        metric = _METRICS.get(name)
        if metric is None:
            metric = kind(name, name.replace("_", " "), labelnames=labelnames, registry=REGISTRY, **kwargs)
            _METRICS[name] = metric
        return metric


def _labelled(metric, labels: dict[str, Any]):
    if not labels:
        return metric
    return metric.labels(**{k: str(v) for k, v in labels.items()})


# User value: counts request outcomes so failures show up without reading logs.
def incr(name: str, amount: float = 1, **labels: Any) -> None:
    counter = _get_or_create(Counter, name, tuple(sorted(labels)))
    _labelled(counter, labels).inc(amount)


def observe_ms(name: str, value_ms: float, **labels: Any) -> None:
    histogram = _get_or_create(Histogram, name, tuple(sorted(labels)), buckets=LATENCY_BUCKETS_MS)
    _labelled(histogram, labels).observe(float(value_ms))


def route_template(scope: dict) -> str:
    """Matched route path (e.g. ``/api/clothswap``); never the raw URL."""
    route = scope.get("route")
    path = getattr(route, "path", None)
    return path or UNMATCHED_ROUTE


def sample_value(name: str, **labels: Any) -> float | None:
    return REGISTRY.get_sample_value(name, {k: str(v) for k, v in labels.items()})


def metrics_app():
    return make_asgi_app(registry=REGISTRY)
