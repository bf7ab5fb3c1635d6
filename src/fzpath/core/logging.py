"""Logging setup for fzp.

structlog builds the events and stdlib ``logging`` handlers write them, one
handler per configured output, each with its own renderer and level. A file
output is a plain ``FileHandler`` that gets closed when logging is
reconfigured.

Every event of one invocation carries a short run id. The id is a module
global, not a context variable: the walker and writer threads a sync starts
do not inherit the caller's context, and their events belong to the run too.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from fzpath.config.models import LoggingConfig, LogOutputConfig

_STREAMS = ("stderr", "stdout")

_run_id: str | None = None
_log_file: Path | None = None


def start_run(run_id: str | None = None) -> str:
    """Begin a run; events logged until ``end_run`` carry its id."""
    global _run_id
    _run_id = run_id or uuid4().hex[:12]
    return _run_id


def end_run() -> None:
    global _run_id
    _run_id = None


def current_run_id() -> str | None:
    return _run_id


def log_file() -> Path | None:
    """First file output of the active configuration, if there is one."""
    return _log_file


def _stamp_run(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if _run_id is not None:
        event_dict.setdefault("run_id", _run_id)
    return event_dict


def quiet_during_spinner(record: logging.LogRecord) -> bool:  # noqa: ARG001
    """Handler filter dropping console lines while a spinner is drawn."""
    from fzpath.core.progress import is_console_suppressed

    return not is_console_suppressed()


def _level(name: str | None, fallback: int) -> int:
    if name is None:
        return fallback
    return logging.getLevelNamesMapping().get(name.upper(), fallback)


def _render_steps(output: LogOutputConfig, *, colors: bool) -> list[structlog.types.Processor]:
    if output.format == "json":
        # ConsoleRenderer prints tracebacks itself; JSON needs them as a string
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)]


def _handler(
    output: LogOutputConfig,
    chain: list[structlog.types.Processor],
    level: int,
) -> logging.Handler:
    handler: logging.Handler
    if output.destination in _STREAMS:
        stream = getattr(sys, output.destination)
        handler = logging.StreamHandler(stream)
        handler.addFilter(quiet_during_spinner)
        colors = hasattr(stream, "isatty") and stream.isatty()
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Undecodable path names show up as escapes instead of failing the write
        handler = logging.FileHandler(path, encoding="utf-8", errors="backslashreplace")
        colors = False

    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_steps(output, colors=colors),
            ],
            foreign_pre_chain=chain,
        )
    )
    return handler


def configure_logging(config: LoggingConfig | None = None, *, level: str = "WARNING") -> None:
    """Rebuild the logging pipeline from ``config``.

    Without ``config`` there is one console output on stderr at ``level``;
    the CLI starts that way, before the config file has been read.
    """
    from fzpath.config.models import LoggingConfig

    global _log_file
    if config is None:
        config = LoggingConfig.model_validate({"level": level.upper()})

    base = _level(config.level, logging.WARNING)
    levels = [_level(output.level, base) for output in config.outputs]
    # An output may ask for more detail than the root level
    floor = min([base, *levels])

    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _stamp_run,  # type: ignore[list-item]
    ]
    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(floor),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(floor)
    # SQLAlchemy echoes every statement at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    for output, output_level in zip(config.outputs, levels, strict=True):
        root.addHandler(_handler(output, chain, output_level))

    _log_file = next(
        (Path(o.destination) for o in config.outputs if o.destination not in _STREAMS),
        None,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
