from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(log_level: str, service: str = "ewallet_api") -> None:
    """
    JSON logs on stdout. Values bound with `structlog.contextvars` (the request id set by the
    metrics middleware, for instance) are merged into every event logged while they are bound.
    """
    level = log_level.upper()
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    # asyncpg/sqlalchemy chatter goes through stdlib logging; keep it out of the event stream.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.dict_tracebacks,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service)


logger = structlog.get_logger()
