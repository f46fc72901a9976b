# logexport/Log_Export/models.py
# Description: Value types shared by the log export pipeline.
#
# Imports
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional
#
# 3rd-Party Imports
from pydantic import BaseModel, ConfigDict, field_validator
#
#######################################################################################################################
#
# Classes:

class LookbackWindow(Enum):
    """The fixed set of time windows a user can export."""
    TEN_MINUTES = 10 * 60
    HOUR = 60 * 60
    DAY = 24 * 60 * 60

    @property
    def label(self) -> str:
        return _LOOKBACK_LABELS[self]

    @property
    def delta(self) -> timedelta:
        return timedelta(seconds=self.value)

    @classmethod
    def from_config_key(cls, key: Optional[str], default: "LookbackWindow" = None) -> "LookbackWindow":
        """Maps 'ten_minutes' / 'hour' / 'day' from config.toml onto a window."""
        if key:
            try:
                return cls[str(key).strip().upper()]
            except KeyError:
                pass
        return default if default is not None else cls.TEN_MINUTES


_LOOKBACK_LABELS = {
    LookbackWindow.TEN_MINUTES: "ten minutes",
    LookbackWindow.HOUR: "one hour",
    LookbackWindow.DAY: "one day",
}


class LogLevel(str, Enum):
    NOTICE = "notice"
    DEBUG = "debug"
    INFO = "info"
    ERROR = "error"
    FAULT = "fault"
    UNDEFINED = "undefined"
    UNKNOWN = "unknown"

    @classmethod
    def from_python_level(cls, levelno: Optional[int]) -> "LogLevel":
        if levelno is None:
            return cls.UNDEFINED
        return _PYTHON_LEVELS.get(levelno, cls.UNKNOWN)

    @classmethod
    def from_syslog_priority(cls, priority: Any) -> "LogLevel":
        if priority is None or priority == "":
            return cls.UNDEFINED
        try:
            return _SYSLOG_PRIORITIES.get(int(priority), cls.UNKNOWN)
        except (TypeError, ValueError):
            return cls.UNKNOWN


_PYTHON_LEVELS = {
    logging.NOTSET: LogLevel.UNDEFINED,
    logging.DEBUG: LogLevel.DEBUG,
    logging.INFO: LogLevel.INFO,
    logging.WARNING: LogLevel.NOTICE,
    logging.ERROR: LogLevel.ERROR,
    logging.CRITICAL: LogLevel.FAULT,
}

# 0 emerg, 1 alert, 2 crit, 3 err, 4 warning, 5 notice, 6 info, 7 debug
_SYSLOG_PRIORITIES = {
    0: LogLevel.FAULT, 1: LogLevel.FAULT, 2: LogLevel.FAULT,
    3: LogLevel.ERROR,
    4: LogLevel.NOTICE, 5: LogLevel.NOTICE,
    6: LogLevel.INFO,
    7: LogLevel.DEBUG,
}


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class LogEntry(BaseModel):
    """A single log record as read from a log store."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    level: LogLevel = LogLevel.UNDEFINED
    subsystem: str = ""
    category: str = ""
    message: str = ""

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> datetime:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        if isinstance(value, datetime):
            return _as_utc(value)
        return value

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> LogLevel:
        if isinstance(value, LogLevel):
            return value
        try:
            return LogLevel(str(value).lower())
        except ValueError:
            return LogLevel.UNKNOWN


class ExportOptions(BaseModel):
    """What to export, captured once from the UI selection when an export starts."""
    model_config = ConfigDict(frozen=True)

    since_inclusive: datetime
    include_system_logs: bool = False

    @field_validator("since_inclusive", mode="after")
    @classmethod
    def _since_is_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @classmethod
    def from_selection(cls, window: LookbackWindow, include_system_logs: bool,
                       now: Optional[datetime] = None) -> "ExportOptions":
        now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        return cls(since_inclusive=now - window.delta, include_system_logs=include_system_logs)


@dataclass(frozen=True)
class ExportArtifact:
    """The temporary file produced by one export, held by exactly one sink at a time."""
    location: Path

    def exists(self) -> bool:
        return self.location.exists()


class ExportStatus(Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    ERROR = "error"


@dataclass(frozen=True)
class ExportState:
    status: ExportStatus = ExportStatus.IDLE
    error_message: Optional[str] = None

    @classmethod
    def idle(cls) -> "ExportState":
        return cls(ExportStatus.IDLE)

    @classmethod
    def in_progress(cls) -> "ExportState":
        return cls(ExportStatus.IN_PROGRESS)

    @classmethod
    def error(cls, message: str) -> "ExportState":
        return cls(ExportStatus.ERROR, message)

#
# End of logexport/Log_Export/models.py
########################################################################################################################
