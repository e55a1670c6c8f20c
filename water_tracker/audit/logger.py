"""
Activity Logger

DESIGN DECISION: Every tracker mutation and every swallowed adapter
failure is logged. Failures never reach the user, so the local log is
the only place they become visible.

The activity logger:
- Is synchronous (tracker operations never await anything)
- Writes locally only; there is no event history to persist
"""

import logging
import sys

import structlog

from water_tracker.models.events import Severity, TrackerEvent


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output to stderr at the given stdlib level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))


class ActivityLogger:
    """Writes tracker events to the structured local log."""
    
    def __init__(self, logger_name: str = "water_tracker"):
        self._logger = structlog.get_logger(logger_name)
    
    def log(self, event: TrackerEvent) -> None:
        """Log a tracker event at the level matching its severity."""
        log_dict = event.to_log_dict()
        
        if event.severity == Severity.ERROR:
            self._logger.error("tracker_event", **log_dict)
        elif event.severity == Severity.WARNING:
            self._logger.warning("tracker_event", **log_dict)
        elif event.severity == Severity.DEBUG:
            self._logger.debug("tracker_event", **log_dict)
        else:
            self._logger.info("tracker_event", **log_dict)
