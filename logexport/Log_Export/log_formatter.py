# logexport/Log_Export/log_formatter.py
# Description: The canonical text line for an exported log entry, and its inverse.
#
#   <ISO-8601 UTC timestamp> - [<level>] - <subsystem> - <category> - <message>\n
#
# Line breaks and backslashes in the text fields are written as \n, \r and \\ so that
# every entry is exactly one line.
#
# Imports
import re
from datetime import datetime, timezone
from typing import Any
#
# Local Imports
from .models import LogEntry, LogLevel
#
#######################################################################################################################
#
# Functions:

FIELD_SEPARATOR = " - "
ISO_8601_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_ESCAPES = str.maketrans({"\\": "\\\\", "\n": "\\n", "\r": "\\r"})
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}
_ESCAPED_CHAR = re.compile(r"\\(.)", re.DOTALL)


def escape_field(text: str) -> str:
    return text.translate(_ESCAPES)


def unescape_field(text: str) -> str:
    # Unknown escapes are kept as written
    return _ESCAPED_CHAR.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), text)


def level_name(level: Any) -> str:
    """Lowercase symbolic name of a level; anything unrecognized is 'unknown'."""
    if isinstance(level, LogLevel):
        return level.value
    try:
        return LogLevel(str(level).lower()).value
    except ValueError:
        return LogLevel.UNKNOWN.value


def format_timestamp(timestamp: datetime) -> str:
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).strftime(ISO_8601_FORMAT)


def format_entry(entry: LogEntry) -> str:
    return FIELD_SEPARATOR.join((
        format_timestamp(entry.timestamp),
        f"[{level_name(entry.level)}]",
        escape_field(entry.subsystem),
        escape_field(entry.category),
        escape_field(entry.message),
    )) + "\n"


def parse_line(line: str) -> LogEntry:
    """
    Reads a canonical line back into a LogEntry.

    Subsystem and category may not contain the field separator; the message takes
    everything after the fourth separator.
    """
    if line.endswith("\n"):
        line = line[:-1]
    parts = line.split(FIELD_SEPARATOR, 4)
    if len(parts) != 5:
        raise ValueError(f"Not a log export line: {line!r}")
    timestamp_str, level_str, subsystem, category, message = parts
    if not (level_str.startswith("[") and level_str.endswith("]")):
        raise ValueError(f"Malformed level field {level_str!r} in line: {line!r}")
    try:
        timestamp = datetime.strptime(timestamp_str, ISO_8601_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise ValueError(f"Malformed timestamp {timestamp_str!r}: {e}") from e
    return LogEntry(
        timestamp=timestamp,
        level=level_str[1:-1],
        subsystem=unescape_field(subsystem),
        category=unescape_field(category),
        message=unescape_field(message),
    )

#
# End of logexport/Log_Export/log_formatter.py
########################################################################################################################
