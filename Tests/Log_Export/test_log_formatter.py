# test_log_formatter.py
#
# Imports
from datetime import datetime, timedelta, timezone
#
# Third-party imports
import pytest
from hypothesis import given, settings, strategies as st
#
# Local imports
from logexport.Log_Export.log_formatter import format_entry, format_timestamp, level_name, parse_line
from logexport.Log_Export.models import LogEntry, LogLevel
#
############################################################################################################################
#
# Unit tests:

def test_format_entry_matches_canonical_line():
    entry = LogEntry(timestamp=100, level=LogLevel.INFO, subsystem="com.app", category="ui",
                     message="button is pressed")
    assert format_entry(entry) == "1970-01-01T00:01:40Z - [info] - com.app - ui - button is pressed\n"


def test_format_entry_with_empty_fields_keeps_every_separator():
    entry = LogEntry(timestamp=0, level=LogLevel.FAULT, subsystem="", category="", message="")
    assert format_entry(entry) == "1970-01-01T00:00:00Z - [fault] -  -  - \n"


@pytest.mark.parametrize("raw_level, expected", [
    (LogLevel.NOTICE, "notice"),
    (LogLevel.DEBUG, "debug"),
    (LogLevel.INFO, "info"),
    (LogLevel.ERROR, "error"),
    (LogLevel.FAULT, "fault"),
    (LogLevel.UNDEFINED, "undefined"),
    ("ERROR", "error"),
    ("verbose", "unknown"),
    (42, "unknown"),
])
def test_level_name(raw_level, expected):
    assert level_name(raw_level) == expected


def test_unrecognized_level_is_formatted_as_unknown():
    entry = LogEntry(timestamp=100, level="trace", subsystem="com.app", category="ui", message="x")
    assert entry.level is LogLevel.UNKNOWN
    assert "[unknown]" in format_entry(entry)


def test_format_timestamp_converts_to_utc():
    plus_two = timezone(timedelta(hours=2))
    assert format_timestamp(datetime(2024, 5, 1, 12, 0, 0, tzinfo=plus_two)) == "2024-05-01T10:00:00Z"


def test_format_timestamp_treats_naive_as_utc():
    assert format_timestamp(datetime(2024, 5, 1, 12, 0, 0)) == "2024-05-01T12:00:00Z"


def test_format_is_deterministic():
    entry = LogEntry(timestamp=1_700_000_000.25, level=LogLevel.ERROR, subsystem="com.app.net",
                     category="http", message="request failed - retrying")
    assert format_entry(entry) == format_entry(entry)


def test_message_may_contain_separator():
    line = "2024-01-02T03:04:05Z - [error] - com.app - net - timeout - retrying in 5s\n"
    entry = parse_line(line)
    assert entry.category == "net"
    assert entry.message == "timeout - retrying in 5s"


def test_multiline_message_is_written_as_one_line():
    message = (
        "operation failed\n"
        "Traceback (most recent call last):\n"
        "  File \"C:\\app\\main.py\", line 3, in <module>\r\n"
        "ValueError: bad value"
    )
    entry = LogEntry(timestamp=100, level=LogLevel.ERROR, subsystem="com.app", category="main", message=message)

    line = format_entry(entry)
    assert line.count("\n") == 1
    assert "\r" not in line
    assert line == (
        "1970-01-01T00:01:40Z - [error] - com.app - main - operation failed\\n"
        "Traceback (most recent call last):\\n"
        "  File \"C:\\\\app\\\\main.py\", line 3, in <module>\\r\\n"
        "ValueError: bad value\n"
    )
    assert parse_line(line) == entry


def test_unknown_escape_is_kept_as_written():
    entry = parse_line("2024-01-02T03:04:05Z - [info] - com.app - ui - tab\\there\n")
    assert entry.message == "tab\\there"


@pytest.mark.parametrize("line", [
    "",
    "not a log line",
    "2024-01-02T03:04:05Z - info - com.app - ui - message",
    "yesterday - [info] - com.app - ui - message",
    "2024-01-02T03:04:05Z - [info] - com.app",
])
def test_parse_line_rejects_malformed_lines(line):
    with pytest.raises(ValueError):
        parse_line(line)


#
############################################################################################################################
#
# Property tests:

_field_text = st.text(alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd"), whitelist_characters="._"),
                      max_size=30)
_message_text = st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=200) | st.text(
    alphabet=st.sampled_from(["a", " ", "-", "\\", "n", "r", "\n", "\r"]), max_size=40)
_timestamps = st.datetimes(
    min_value=datetime(1970, 1, 1),
    max_value=datetime(2100, 1, 1),
    timezones=st.just(timezone.utc),
).map(lambda dt: dt.replace(microsecond=0))

log_entries = st.builds(
    LogEntry,
    timestamp=_timestamps,
    level=st.sampled_from(list(LogLevel)),
    subsystem=_field_text,
    category=_field_text,
    message=_message_text,
)


@given(entry=log_entries)
@settings(max_examples=200)
def test_formatted_line_parses_back_to_the_same_entry(entry):
    line = format_entry(entry)
    assert line.endswith("\n")
    assert line.count("\n") == 1
    assert parse_line(line) == entry

#
# End of test_log_formatter.py
############################################################################################################################
