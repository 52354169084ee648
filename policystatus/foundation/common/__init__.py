from .metrics_factory import get_metric_value, get_or_create_counter, reset_metrics

__all__ = ["get_metric_value", "get_or_create_counter", "reset_metrics"]
