import logging
import os
import structlog

_level = getattr(logging, os.environ.get("MSOD_LOG_LEVEL", "INFO").upper(), logging.INFO)

# dedicated logger, the global structlog configuration of the host is untouched
logger = structlog.wrap_logger(
    structlog.PrintLogger(),
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        structlog.dev.ConsoleRenderer(colors=False),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(_level),
)
