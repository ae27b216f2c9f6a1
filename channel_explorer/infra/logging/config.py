"""Logging configuration setup.

All handlers hang off a QueueListener so that logging from inside the event
loop never blocks on file or terminal I/O. The root logger only carries a
QueueHandler; application loggers propagate up to it.
"""

from __future__ import annotations

import atexit
import logging
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from channel_explorer.infra.logging.context import ContextInjectingFilter
from channel_explorer.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from channel_explorer.core.settings.logs import LoggingSettings

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
_LOGGING_INITIALIZED = False

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def shutdown() -> None:
    """Stop the QueueListener and flush pending records.

    Registered with atexit; safe to call more than once.
    """
    global _log_queue, _listener, _queue_handler

    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
        _listener = None

    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None

    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Configure logging from settings unless an entrypoint already did.

    Args:
        log_settings: Settings to apply; loaded with get_logging_settings()
            when omitted.
        force: Reconfigure even after an earlier call.
        **configure_kwargs: Overrides applied on top of the settings.
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from channel_explorer.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    log_config = {**log_settings.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def _build_handlers(
    formatter: logging.Formatter,
    *,
    console_enabled: bool,
    file_path: str | Path | None,
    file_max_bytes: int,
    file_backup_count: int,
) -> list[logging.Handler]:
    """Sinks drained by the listener thread: stderr and/or a rotating file."""
    handlers: list[logging.Handler] = []
    if console_enabled:
        handlers.append(logging.StreamHandler())
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(path, maxBytes=file_max_bytes, backupCount=file_backup_count, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(
    log_level: str = "INFO",
    file_path: str | Path | None = None,
    json_logs: bool = False,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "channel-explorer",
    **kwargs: Any,
) -> None:
    """Replace any previous setup with a fresh queue, handlers and listener.

    Args:
        log_level: Root logger level.
        file_path: Rotating log file; None disables file output.
        json_logs: JSON Lines instead of the text format.
        console_enabled: Write to stderr.
        include_context: Copy contextvar fields (command, page, generation) onto records.
        capture_warnings: Route ``warnings`` through logging.
        file_max_bytes: Rotation threshold.
        file_backup_count: Rotated files kept.
        service_name: ``service`` field stamped on JSON lines.
        **kwargs: Unknown options; reported at DEBUG and otherwise ignored.
    """
    global _log_queue, _listener, _queue_handler

    shutdown()
    logging.captureWarnings(capture_warnings)

    formatter = (
        JSONFormatter(static={"service": service_name})
        if json_logs
        else logging.Formatter(fmt=TEXT_FORMAT, datefmt=DATE_FORMAT)
    )
    handlers = _build_handlers(
        formatter,
        console_enabled=console_enabled,
        file_path=file_path,
        file_max_bytes=file_max_bytes,
        file_backup_count=file_backup_count,
    )

    _log_queue = Queue()
    _queue_handler = QueueHandler(_log_queue)
    if include_context:
        _queue_handler.addFilter(ContextInjectingFilter())

    root = logging.getLogger()
    root.setLevel(log_level.upper())
    root.addHandler(_queue_handler)

    if handlers:
        _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown)

    if kwargs:
        logger.debug("Ignoring unknown logging options: %s", ", ".join(sorted(kwargs)))
