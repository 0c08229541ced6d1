# bracket_league/utils/observability.py
import logging
import os
import structlog
import contextvars
from contextlib import contextmanager
from prometheus_client import Counter, Histogram, CollectorRegistry

# Correlation ID for tracing one command through scoring and ranking
CORRELATION_ID = contextvars.ContextVar('correlation_id', default=None)

# League the current command operates on
LEAGUE_ID = contextvars.ContextVar('league_id', default=None)


@contextmanager
def league_context(league_id):
    """Tag every structured log emitted inside the block with league_id."""
    token = LEAGUE_ID.set(league_id)
    try:
        yield
    finally:
        LEAGUE_ID.reset(token)


class ObservabilityConfig:
    """Observability settings read straight from the environment."""

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'development')
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        default_format = 'json' if self.environment == 'production' else 'console'
        self.log_format = os.getenv('LOG_FORMAT', default_format)


class MetricsRegistry:
    """Counters and timings for the scoring, visibility and results paths."""

    def __init__(self):
        self.registry = CollectorRegistry()
        self._init_metrics()

    def _init_metrics(self):
        self.scoring_latency = Histogram(
            'scoring_latency_seconds',
            'Time to score a batch of entries',
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
            registry=self.registry
        )

        self.entries_scored = Counter(
            'entries_scored_total',
            'Total number of entries scored',
            labelnames=['game_type'],
            registry=self.registry
        )

        self.ignored_picks = Counter(
            'ignored_picks_total',
            'Picks referencing matchups absent from the bracket',
            registry=self.registry
        )

        self.winners_determined = Counter(
            'winners_determined_total',
            'Winner determinations by outcome',
            labelnames=['status'],  # 'success', 'no_entries', 'incomplete'
            registry=self.registry
        )

        # Fog of war and official results
        self.visibility_denials = Counter(
            'visibility_denials_total',
            'Entries hidden from a viewer by fog of war',
            registry=self.registry
        )

        self.result_corrections = Counter(
            'result_corrections_total',
            'Official results changed after being recorded',
            registry=self.registry
        )

        self.locked_submissions = Counter(
            'locked_submissions_total',
            'Entry submissions rejected after the lock deadline',
            registry=self.registry
        )


class StructlogConfig:
    """Structured logging configuration."""

    @staticmethod
    def configure(env: str = 'development', log_level: str = 'INFO', log_format: str = None):
        """
        Configure structlog for the CLI and library callers.

        JSON output is used in production or when log_format is 'json';
        everything else gets the console renderer.
        """
        shared_processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
        ]

        use_json = log_format == 'json' if log_format else env == 'production'
        if use_json:
            renderers = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
        else:
            renderers = [structlog.dev.ConsoleRenderer()]

        structlog.configure(
            processors=shared_processors + renderers,
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelName(log_level.upper())
            ),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            # PrintLogger binds sys.stdout when created; re-resolve it per call
            cache_logger_on_first_use=False,
        )


class Logger:
    """Structured logger that stamps the correlation and league ids on every event."""

    def __init__(self, module_name: str):
        self.logger = structlog.get_logger(module_name)
        self.module_name = module_name

    def _context(self, fields):
        ctx = {'correlation_id': CORRELATION_ID.get(), 'module': self.module_name}
        league_id = LEAGUE_ID.get()
        if league_id is not None:
            ctx['league_id'] = league_id
        ctx.update(fields)
        return ctx

    def log_debug(self, event: str, **kwargs):
        return self.logger.debug(event, **self._context(kwargs))

    def log_event(self, event: str, **kwargs):
        """Log structured event with automatic context."""
        return self.logger.info(event, **self._context(kwargs))

    def log_warning(self, event: str, **kwargs):
        return self.logger.warning(event, **self._context(kwargs))

    def log_error(self, event: str, exc_info=None, **kwargs):
        """Log error with exception details."""
        return self.logger.error(event, exc_info=exc_info, **self._context(kwargs))


def initialize_observability(environment: str = None):
    """Configure structlog and build a fresh metrics registry."""
    config = ObservabilityConfig()
    env = environment or config.environment
    StructlogConfig.configure(env=env, log_level=config.log_level, log_format=os.getenv('LOG_FORMAT'))
    metrics = MetricsRegistry()

    structlog.get_logger(__name__).debug(
        'observability_initialized',
        environment=env,
        log_format=config.log_format,
    )

    return metrics, config


# Global metrics instance
METRICS = None


def get_metrics() -> MetricsRegistry:
    """Lazy-load metrics singleton."""
    global METRICS
    if METRICS is None:
        METRICS, _ = initialize_observability()
    return METRICS
