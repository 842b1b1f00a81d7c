"""
Monitoring module for application metrics
"""

from vetclinic.monitoring.metrics import RequestTimer, get_metrics, metrics_registry

__all__ = [
    "metrics_registry",
    "get_metrics",
    "RequestTimer",
]
