# test_models.py
#
# Imports
import logging
from datetime import datetime, timedelta, timezone
#
# Third-party imports
import pytest
from pydantic import ValidationError
#
# Local imports
from logexport.Log_Export.log_export_errors import CreateFailed, LogExportError, StoreUnavailable
from logexport.Log_Export.models import (
    ExportOptions,
    ExportState,
    ExportStatus,
    LogEntry,
    LogLevel,
    LookbackWindow,
)
#
############################################################################################################################
#
# Tests:

@pytest.mark.parametrize("window, seconds, label", [
    (LookbackWindow.TEN_MINUTES, 600, "ten minutes"),
    (LookbackWindow.HOUR, 3600, "one hour"),
    (LookbackWindow.DAY, 86400, "one day"),
])
def test_lookback_windows(window, seconds, label):
    assert window.delta == timedelta(seconds=seconds)
    assert window.label == label


@pytest.mark.parametrize("key, expected", [
    ("ten_minutes", LookbackWindow.TEN_MINUTES),
    ("hour", LookbackWindow.HOUR),
    (" Day ", LookbackWindow.DAY),
    ("fortnight", LookbackWindow.TEN_MINUTES),
    (None, LookbackWindow.TEN_MINUTES),
])
def test_lookback_from_config_key(key, expected):
    assert LookbackWindow.from_config_key(key) is expected


def test_lookback_from_config_key_with_explicit_default():
    assert LookbackWindow.from_config_key("bogus", LookbackWindow.HOUR) is LookbackWindow.HOUR


@pytest.mark.parametrize("levelno, expected", [
    (logging.DEBUG, LogLevel.DEBUG),
    (logging.INFO, LogLevel.INFO),
    (logging.WARNING, LogLevel.NOTICE),
    (logging.ERROR, LogLevel.ERROR),
    (logging.CRITICAL, LogLevel.FAULT),
    (logging.NOTSET, LogLevel.UNDEFINED),
    (None, LogLevel.UNDEFINED),
    (25, LogLevel.UNKNOWN),
])
def test_python_level_mapping(levelno, expected):
    assert LogLevel.from_python_level(levelno) is expected


def test_options_from_selection_subtracts_window():
    now = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
    options = ExportOptions.from_selection(LookbackWindow.HOUR, True, now=now)
    assert options.since_inclusive == datetime(2024, 6, 1, 11, 0, 0, tzinfo=timezone.utc)
    assert options.include_system_logs is True


def test_options_are_immutable():
    options = ExportOptions.from_selection(LookbackWindow.DAY, False)
    with pytest.raises(ValidationError):
        options.include_system_logs = True


def test_log_entry_normalizes_timestamps_to_utc():
    plus_five = timezone(timedelta(hours=5))
    entry = LogEntry(timestamp=datetime(2024, 1, 1, 5, 0, 0, tzinfo=plus_five))
    assert entry.timestamp == datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
    assert entry.timestamp.utcoffset() == timedelta(0)
    assert LogEntry(timestamp=datetime(2024, 1, 1)).timestamp.tzinfo is not None
    assert entry.level is LogLevel.UNDEFINED


def test_export_state_constructors():
    assert ExportState.idle().status is ExportStatus.IDLE
    assert ExportState.in_progress().status is ExportStatus.IN_PROGRESS
    error = ExportState.error("boom")
    assert (error.status, error.error_message) == (ExportStatus.ERROR, "boom")


def test_error_messages_are_user_facing():
    assert str(StoreUnavailable("Log store access denied")) == "Log store access denied"
    error = CreateFailed("/tmp/x.log", "Permission denied")
    assert isinstance(error, LogExportError)
    assert str(error) == "Failed to create a temporary file at /tmp/x.log: Permission denied"
    assert str(CreateFailed("/tmp/x.log")) == "Failed to create a temporary file at /tmp/x.log"

#
# End of test_models.py
############################################################################################################################
