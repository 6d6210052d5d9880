"""
Diagnostic logging for the monitor.

Records are pushed onto a queue and written by a listener thread, so a
slow terminal or disk never stretches a polling tick. Diagnostics go to
stderr because stdout belongs to the refreshing display; an optional
file receives everything down to DEBUG.
"""

import logging
import sys
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import Queue

from arbwatch.config.constants import LOG_DATE_FORMAT, LOG_FORMAT, MAX_LOG_QUEUE_SIZE


# Loggers of libraries that are chatty at INFO
NOISY_LOGGERS = ("aiohttp", "asyncio")


class MillisecondFormatter(logging.Formatter):
    """Formatter whose timestamps end in milliseconds."""

    default_time_format = LOG_DATE_FORMAT
    default_msec_format = "%s.%03d"


class LogPipeline:
    """
    Queue-backed handler set for one logger tree.

    The logger only ever sees a QueueHandler; the real handlers run in
    the listener thread between `start()` and `stop()`.
    """

    def __init__(
        self,
        name: str,
        level: int = logging.INFO,
        log_file: Path | None = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            name: Logger name the queue handler is attached to.
            level: Console level.
            log_file: Optional file receiving DEBUG and above.
        """
        self._logger = logging.getLogger(name)
        self._level = level
        self._log_file = log_file
        self._queue: Queue[logging.LogRecord] = Queue(maxsize=MAX_LOG_QUEUE_SIZE)
        self._queue_handler: QueueHandler | None = None
        self._listener: QueueListener | None = None

    def _build_handlers(self) -> list[logging.Handler]:
        formatter = MillisecondFormatter(LOG_FORMAT)

        console = logging.StreamHandler(sys.stderr)
        console.setLevel(self._level)
        console.setFormatter(formatter)
        handlers: list[logging.Handler] = [console]

        if self._log_file is not None:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self._log_file, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

        return handlers

    def start(self) -> None:
        """Attach the queue handler and start the listener thread."""
        if self._listener is not None:
            return

        self._queue_handler = QueueHandler(self._queue)
        self._logger.addHandler(self._queue_handler)
        # File output needs DEBUG records even when the console does not
        self._logger.setLevel(logging.DEBUG if self._log_file else self._level)

        self._listener = QueueListener(
            self._queue,
            *self._build_handlers(),
            respect_handler_level=True,
        )
        self._listener.start()

    def stop(self) -> None:
        """Flush queued records and detach from the logger."""
        if self._listener is not None:
            self._listener.stop()
            for handler in self._listener.handlers:
                handler.close()
            self._listener = None
        if self._queue_handler is not None:
            self._logger.removeHandler(self._queue_handler)
            self._queue_handler = None

    @property
    def running(self) -> bool:
        return self._listener is not None

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def __enter__(self) -> "LogPipeline":
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
) -> LogPipeline:
    """
    Route all `arbwatch.*` loggers through a started LogPipeline.

    Args:
        level: Console log level name.
        log_file: Optional diagnostic log file.

    Returns:
        The running pipeline; call `stop()` before exiting.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    # Drop handlers installed by earlier basicConfig calls
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    pipeline = LogPipeline("arbwatch", level=numeric_level, log_file=log_file)
    pipeline.start()
    return pipeline
