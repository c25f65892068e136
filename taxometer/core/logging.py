"""Structured logging for the tax engine using structlog.

Every event emitted while a return is being computed carries the tax year
and, when the caller supplies one, a scenario id so that what-if runs for
the same household can be told apart in the log stream.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from decimal import Decimal
from typing import Any

import orjson
import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from taxometer.core.config import settings

scenario_id_ctx: ContextVar[str | None] = ContextVar("scenario_id", default=None)
tax_year_ctx: ContextVar[int | None] = ContextVar("tax_year", default=None)


@contextmanager
def calculation_context(
    tax_year: int | None = None, scenario_id: str | None = None
) -> Iterator[None]:
    """Tag log events emitted inside the block with a tax year and scenario.

    Values already set by an outer block are kept when an argument is None.

    Example:
        >>> with calculation_context(tax_year=2025, scenario_id="baseline"):
        ...     result = compute(payer, incomes, deductions)
    """
    year_token = tax_year_ctx.set(tax_year if tax_year is not None else tax_year_ctx.get())
    scenario_token = scenario_id_ctx.set(scenario_id or scenario_id_ctx.get())
    try:
        yield
    finally:
        scenario_id_ctx.reset(scenario_token)
        tax_year_ctx.reset(year_token)


def _add_context_vars(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Copy the calculation context onto the event unless it is already set."""
    if (scenario_id := scenario_id_ctx.get()) and "scenario_id" not in event_dict:
        event_dict["scenario_id"] = scenario_id
    if (tax_year := tax_year_ctx.get()) is not None and "tax_year" not in event_dict:
        event_dict["tax_year"] = tax_year
    return event_dict


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    return repr(obj)


def _orjson_serializer(obj: Any, **kwargs: Any) -> str:
    """Render an event as JSON; Decimal amounts are written as strings."""
    return orjson.dumps(obj, default=_json_default).decode("utf-8")


def _use_json(log_format: str | None) -> bool:
    if log_format is not None:
        return log_format == "json"
    return settings.environment != "development"


def configure_logging(log_format: str | None = None, debug: bool | None = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_format: "json" or "console". Defaults to ``settings.log_format``,
            then to console in development and JSON everywhere else.
        debug: Emit debug events (the per-calculation summaries). Defaults to
            ``settings.debug``.
    """
    log_format = (log_format or settings.log_format or "").lower() or None
    debug = settings.debug if debug is None else debug

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_context_vars,
    ]

    if _use_json(log_format):
        renderer: list[Processor] = [
            structlog.processors.EventRenamer("message"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(serializer=_orjson_serializer),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]

    structlog.configure(
        processors=[*shared_processors, *renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
        force=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)
