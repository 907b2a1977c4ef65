# src/rendercheck/core/logging.py
"""Logging setup for the fixture viewer.

structlog events and stdlib records (uvicorn runs with ``log_config=None``)
go through one stdout handler, so everything shares a format.

- uvicorn access lines are turned into ``http_request`` events with
  ``client``/``method``/``path``/``status`` fields instead of a
  preformatted string.
- Request context bound with :func:`request_context` (route, resource) is
  merged into every event logged while that request is handled.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

ACCESS_LOGGER = "uvicorn.access"

_ACCESS_FIELDS = ("client", "method", "path", "http_version", "status")


class _AccessRecordFilter(logging.Filter):
    """Unpack uvicorn's positional access-log arguments onto the record.

    uvicorn logs ``'%s - "%s %s HTTP/%s" %d'`` with (client, method, path,
    http_version, status). The fields are copied into the event by
    ``ExtraAdder``; the message becomes a fixed event name.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        args = record.args
        if isinstance(args, tuple) and len(args) == len(_ACCESS_FIELDS):
            for field, value in zip(_ACCESS_FIELDS, args, strict=True):
                setattr(record, field, value)
            record.msg = "http_request"
            record.args = ()
        return True


_access_filter = _AccessRecordFilter()


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
) -> None:
    """Configure structlog and stdlib logging.

    Args:
        json_output: JSON lines if True, otherwise console output
            (colored only when stdout is a terminal).
        level: Root log level (DEBUG, INFO, WARNING, ERROR).
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    final_processors: list[Any] = [ProcessorFormatter.remove_processors_meta]
    if json_output:
        final_processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        final_processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure between cases
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processors=final_processors,
            foreign_pre_chain=[
                *shared_processors,
                structlog.stdlib.ExtraAdder(allow=_ACCESS_FIELDS),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper()))

    # addFilter() ignores an instance that is already installed
    logging.getLogger(ACCESS_LOGGER).addFilter(_access_filter)


@contextmanager
def request_context(**fields: Any) -> Iterator[None]:
    """Bind ``fields`` to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(**fields):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module (typically ``__name__``)."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
