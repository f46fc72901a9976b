# Logging_Config.py
# Description: Configuration for logging, including the structured log file the exporter reads back.
#
# Imports
import asyncio
import json
import logging
import logging.handlers
import sys
from typing import Optional
#
# 3rd-Party Imports
from loguru import logger as loguru_logger
from textual.css.query import QueryError
from textual.logging import TextualHandler
from textual.widgets import RichLog
#
# Local Imports
from logexport.config import get_cli_log_file_path, get_cli_setting
#
########################################################################################################################
#
# Functions:

NOISY_LOGGERS = ("asyncio", "markdown_it")


# --- Structured log store ---
class JsonLinesFormatter(logging.Formatter):
    """One JSON object per record, in the shape JsonLinesLogStore reads."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return json.dumps({
            "timestamp": record.created,
            "level": record.levelname,
            "levelno": record.levelno,
            "subsystem": record.name,
            "category": getattr(record, "category", None) or record.funcName,
            "message": message,
            "pid": record.process,
        }, ensure_ascii=False)


class StructuredLogFileHandler(logging.handlers.RotatingFileHandler):
    def __init__(self, filename, max_bytes: int, backup_count: int):
        super().__init__(filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        self.setFormatter(JsonLinesFormatter())


# --- Custom Logging Handler ---
class RichLogHandler(logging.Handler):
    """Mirrors log records into a RichLog widget. Safe to emit from worker threads."""

    def __init__(self, rich_log_widget: RichLog):
        super().__init__()
        self.rich_log_widget = rich_log_widget
        self.log_queue: asyncio.Queue = asyncio.Queue()
        self.setFormatter(logging.Formatter(
            "{asctime} [{levelname:<8}] {name}:{lineno:<4} : {message}",
            style="{", datefmt="%Y-%m-%d %H:%M:%S"
        ))
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue_processor_task: Optional[asyncio.Task] = None

    def start_processor(self) -> None:
        """Starts the queue processing task on the running (app) event loop."""
        if self._queue_processor_task and not self._queue_processor_task.done():
            return
        self._loop = asyncio.get_running_loop()
        self._queue_processor_task = self._loop.create_task(self._process_log_queue(), name="RichLogProcessor")

    async def stop_processor(self) -> None:
        task, self._queue_processor_task = self._queue_processor_task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._loop = None

    async def _process_log_queue(self) -> None:
        while True:
            message = await self.log_queue.get()
            if self.rich_log_widget.is_mounted:
                self.rich_log_widget.write(message)
            self.log_queue.task_done()

    def emit(self, record: logging.LogRecord) -> None:
        if self._loop is None or self._loop.is_closed():
            return
        try:
            message = self.format(record)
            self._loop.call_soon_threadsafe(self.log_queue.put_nowait, message)
        except RuntimeError:
            # Loop closed between the check and the call
            pass
        except Exception:
            self.handleError(record)


def _level_from_setting(section: str, key: str, default: str) -> int:
    level_str = str(get_cli_setting(section, key, default)).upper()
    return getattr(logging, level_str, getattr(logging, default))


def configure_application_logging(app_instance) -> None:
    """Sets up all logging handlers, including Loguru integration and the structured log store."""

    # --- Loguru -> standard logging ---
    loguru_logger.remove()

    level_mapping = {
        "TRACE": logging.DEBUG, "DEBUG": logging.DEBUG, "INFO": logging.INFO,
        "SUCCESS": logging.INFO, "WARNING": logging.WARNING, "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    def sink_to_standard_logging(message):
        record = message.record
        std_level = level_mapping.get(record["level"].name, logging.INFO)
        std_logger = logging.getLogger(record["name"])
        std_logger.log(std_level, record["message"],
                       exc_info=record["exception"] if record["exception"] else None,
                       extra={"category": record["function"]})

    loguru_logger.add(sink_to_standard_logging, format="{message}", level="TRACE")

    # --- Root logger ---
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        try:
            handler.close()
        except Exception:
            pass

    initial_log_level = _level_from_setting("general", "log_level", "INFO")
    root_logger.setLevel(initial_log_level)
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    # --- TextualHandler (dev console) ---
    textual_console_handler = TextualHandler()
    textual_console_handler.setLevel(initial_log_level)
    textual_console_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)-8s] %(name)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root_logger.addHandler(textual_console_handler)

    # --- RichLog display ---
    try:
        log_display_widget = app_instance.query_one("#app-log-display", RichLog)
        if app_instance._rich_log_handler is None:
            app_instance._rich_log_handler = RichLogHandler(log_display_widget)
        app_instance._rich_log_handler.setLevel(_level_from_setting("logging", "rich_log_level", "DEBUG"))
        app_instance._rich_log_handler.start_processor()
        root_logger.addHandler(app_instance._rich_log_handler)
    except QueryError:
        logging.error("Failed to find #app-log-display widget for RichLogHandler setup.")
        app_instance._rich_log_handler = None

    # --- Structured log file (the export log store) ---
    try:
        log_file_path = get_cli_log_file_path()
        file_handler = StructuredLogFileHandler(
            log_file_path,
            max_bytes=int(get_cli_setting("logging", "log_max_bytes", 10485760)),
            backup_count=int(get_cli_setting("logging", "log_backup_count", 5)),
        )
        file_handler.setLevel(_level_from_setting("logging", "file_log_level", "DEBUG"))
        root_logger.addHandler(file_handler)
        logging.info(f"Structured log store: '{log_file_path}' "
                     f"(Level: {logging.getLevelName(file_handler.level)}).")
    except (OSError, ValueError) as e:
        print(f"WARNING: Could not set up structured log file: {e}", file=sys.stderr)

    # The root level must let the most verbose handler see its records
    handler_levels = [h.level for h in root_logger.handlers if h.level > 0]
    if handler_levels and root_logger.level > min(handler_levels):
        root_logger.setLevel(min(handler_levels))

    logging.info(f"Logging setup complete. Root level: {logging.getLevelName(root_logger.level)}")

#
# End of Logging_Config.py
########################################################################################################################
