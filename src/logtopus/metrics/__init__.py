from .metrics import DispatchMetrics, MetricsCollector

__all__ = ["DispatchMetrics", "MetricsCollector"]
