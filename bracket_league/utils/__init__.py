# Utils module
from .logging import setup_logging
from .observability import Logger, get_metrics, league_context, MetricsRegistry

__all__ = [
    "setup_logging",
    "Logger",
    "get_metrics",
    "league_context",
    "MetricsRegistry",
]
