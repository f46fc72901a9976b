# logexport/Log_Export/log_query.py
# Description: Reads log entries for a time window out of a log store.
#
# The store is behind a small protocol so the query never depends on where logs live:
#   - JsonLinesLogStore: the application's own structured log file (see Logging_Config.py)
#   - JournalLogStore: the systemd journal, scoped to the current PID
#   - anything else with open_store()/position()/entries()/close(), e.g. fakes in tests
#
# Imports
import json
import os
import shutil
import subprocess
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Dict, Iterator, List, Optional, Protocol
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from .log_export_errors import StoreUnavailable
from .models import LogEntry, LogLevel
#
#######################################################################################################################
#
# Classes:

class StoreHandle(Protocol):
    def position(self, at_or_after: datetime) -> Any: ...
    def entries(self, cursor: Any, subsystem_prefix: Optional[str]) -> Iterator[LogEntry]: ...
    def close(self) -> None: ...


class LogStore(Protocol):
    def open_store(self) -> StoreHandle: ...


# --- Structured log file store ---

class JsonLinesCursor:
    def __init__(self, files: List[Path], since: datetime):
        self.files = files
        self.since = since


class JsonLinesStoreHandle:
    def __init__(self, files: List[Path], process_id: Optional[int]):
        self._files = files
        self._process_id = process_id
        self._current_file = None

    def position(self, at_or_after: datetime) -> JsonLinesCursor:
        # A file last written before the window holds nothing we want
        since_epoch = at_or_after.timestamp()
        files = []
        for path in self._files:
            try:
                if path.stat().st_mtime >= since_epoch:
                    files.append(path)
            except OSError:
                continue
        return JsonLinesCursor(files, at_or_after)

    def entries(self, cursor: JsonLinesCursor, subsystem_prefix: Optional[str]) -> Iterator[LogEntry]:
        since_epoch = cursor.since.timestamp()
        for path in cursor.files:
            try:
                self._current_file = open(path, "r", encoding="utf-8", errors="replace")
            except FileNotFoundError:
                # Rotated away between position() and now
                logger.debug(f"Log store file disappeared before it could be read: {path}")
                continue
            except OSError as e:
                raise StoreUnavailable(f"Cannot read log store file {path}: {e}") from e
            with self._current_file as f:
                for line_no, line in enumerate(f, start=1):
                    record = _parse_json_record(line, path, line_no)
                    if record is None:
                        continue
                    if self._process_id is not None and record.get("pid") != self._process_id:
                        continue
                    timestamp = record.get("timestamp")
                    if not isinstance(timestamp, (int, float)) or timestamp < since_epoch:
                        continue
                    subsystem = str(record.get("subsystem", ""))
                    if subsystem_prefix is not None and not subsystem.startswith(subsystem_prefix):
                        continue
                    yield LogEntry(
                        timestamp=timestamp,
                        level=LogLevel.from_python_level(record.get("levelno")),
                        subsystem=subsystem,
                        category=str(record.get("category", "")),
                        message=str(record.get("message", "")),
                    )
            self._current_file = None

    def close(self) -> None:
        if self._current_file is not None:
            self._current_file.close()
            self._current_file = None


def _parse_json_record(line: str, path: Path, line_no: int) -> Optional[Dict[str, Any]]:
    line = line.strip()
    if not line:
        return None
    try:
        record = json.loads(line)
    except json.JSONDecodeError:
        logger.debug(f"Skipping malformed log store line {path}:{line_no}")
        return None
    return record if isinstance(record, dict) else None


class JsonLinesLogStore:
    """
    The JSON-lines file written by StructuredLogFileHandler, including its rotated backups.

    Backups (`app.log.N` ... `app.log.1`) are read oldest first, then the live file, which
    keeps entries in the order they were written.
    """

    def __init__(self, log_file_path: Path, process_id: Optional[int] = None,
                 current_process_only: bool = True):
        self.log_file_path = Path(log_file_path)
        if current_process_only and process_id is None:
            process_id = os.getpid()
        self.process_id = process_id if current_process_only else None

    def _store_files(self) -> List[Path]:
        backups = []
        for candidate in self.log_file_path.parent.glob(f"{self.log_file_path.name}.*"):
            suffix = candidate.name[len(self.log_file_path.name) + 1:]
            if suffix.isdigit():
                backups.append((int(suffix), candidate))
        files = [path for _, path in sorted(backups, reverse=True)]
        if self.log_file_path.exists():
            files.append(self.log_file_path)
        return files

    def open_store(self) -> JsonLinesStoreHandle:
        if not self.log_file_path.parent.is_dir():
            raise StoreUnavailable(f"Log store directory does not exist: {self.log_file_path.parent}")
        files = self._store_files()
        if not files:
            raise StoreUnavailable(f"No log store found at {self.log_file_path}")
        for path in files:
            if not os.access(path, os.R_OK):
                raise StoreUnavailable(f"Permission denied reading log store {path}")
        logger.debug(f"Opened log store with {len(files)} file(s) at {self.log_file_path}")
        return JsonLinesStoreHandle(files, self.process_id)


# --- systemd journal store ---

class JournalStoreHandle:
    def __init__(self, executable: str, process_id: int):
        self._executable = executable
        self._process_id = process_id
        self._process: Optional[subprocess.Popen] = None
        # Unread diagnostics in a PIPE could fill it and stall journalctl
        self._stderr: Optional[IO[bytes]] = None

    def position(self, at_or_after: datetime) -> str:
        # journalctl accepts "@<epoch seconds>" for --since
        return f"@{int(at_or_after.timestamp())}"

    def entries(self, cursor: str, subsystem_prefix: Optional[str]) -> Iterator[LogEntry]:
        cmd = [self._executable, "--output=json", "--no-pager", f"--since={cursor}", f"_PID={self._process_id}"]
        try:
            self._stderr = tempfile.TemporaryFile()
            self._process = subprocess.Popen(
                cmd, stdout=subprocess.PIPE, stderr=self._stderr,
                text=True, encoding="utf-8", errors="replace",
            )
        except OSError as e:
            raise StoreUnavailable(f"Failed to run journalctl: {e}") from e

        for line in self._process.stdout:
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                continue
            entry = _journal_record_to_entry(record)
            if entry is None:
                continue
            if subsystem_prefix is not None and not entry.subsystem.startswith(subsystem_prefix):
                continue
            yield entry

        returncode = self._process.wait()
        if returncode != 0:
            raise StoreUnavailable(f"journalctl failed with code {returncode}: {self._read_stderr()}")

    def _read_stderr(self) -> str:
        if self._stderr is None:
            return ""
        self._stderr.seek(0)
        return self._stderr.read().decode("utf-8", errors="replace").strip()

    def close(self) -> None:
        stderr, self._stderr = self._stderr, None
        if stderr is not None:
            stderr.close()
        process, self._process = self._process, None
        if process is None:
            return
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                logger.warning(f"journalctl (PID:{process.pid}) did not exit after terminate. Killing.")
                process.kill()
                process.wait()
        if process.stdout is not None:
            process.stdout.close()


def _journal_message(value: Any) -> str:
    # Binary messages are exported as an array of byte values
    if isinstance(value, list):
        try:
            return bytes(value).decode("utf-8", errors="replace")
        except (TypeError, ValueError):
            return ""
    return "" if value is None else str(value)


def _journal_record_to_entry(record: Dict[str, Any]) -> Optional[LogEntry]:
    try:
        timestamp_usec = int(record.get("__REALTIME_TIMESTAMP", 0))
    except (TypeError, ValueError):
        return None
    return LogEntry(
        timestamp=datetime.fromtimestamp(timestamp_usec / 1_000_000, tz=timezone.utc),
        level=LogLevel.from_syslog_priority(record.get("PRIORITY")),
        subsystem=str(record.get("SYSLOG_IDENTIFIER") or record.get("_COMM") or ""),
        category=str(record.get("CODE_FUNC") or record.get("_SYSTEMD_UNIT") or ""),
        message=_journal_message(record.get("MESSAGE")).strip(),
    )


class JournalLogStore:
    """Systemd journal entries emitted by this process."""

    def __init__(self, process_id: Optional[int] = None):
        self.process_id = process_id if process_id is not None else os.getpid()

    def open_store(self) -> JournalStoreHandle:
        executable = shutil.which("journalctl")
        if executable is None:
            raise StoreUnavailable("The systemd journal is not available (journalctl not found)")
        return JournalStoreHandle(executable, self.process_id)


# --- Query ---

class LogEntryStream:
    """
    Iterator over one query's results. Owns the store handle and releases it when
    enumeration finishes, fails, or close() is called. Not restartable.
    """

    def __init__(self, handle: StoreHandle, entries: Iterator[LogEntry], since_inclusive: datetime):
        self._handle = handle
        self._entries = entries
        self._since = since_inclusive
        self._closed = False

    def __iter__(self) -> "LogEntryStream":
        return self

    def __next__(self) -> LogEntry:
        if self._closed:
            raise StopIteration
        try:
            while True:
                entry = next(self._entries)
                if entry.timestamp >= self._since:
                    return entry
        except BaseException:
            self.close()
            raise

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            close_entries = getattr(self._entries, "close", None)
            if close_entries is not None:
                close_entries()
        finally:
            self._handle.close()

    def __enter__(self) -> "LogEntryStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class LogQuery:
    def __init__(self, store: LogStore, app_identifier: str):
        self.store = store
        self.app_identifier = app_identifier

    def fetch(self, since_inclusive: datetime, include_system_logs: bool) -> LogEntryStream:
        """
        Opens the store now (StoreUnavailable is raised here, not on first iteration)
        and returns a lazy stream of entries at or after `since_inclusive`.

        Without system logs only entries whose subsystem starts with the application
        identifier are returned.
        """
        if since_inclusive.tzinfo is None:
            since_inclusive = since_inclusive.replace(tzinfo=timezone.utc)
        subsystem_prefix = None if include_system_logs else self.app_identifier
        handle = self.store.open_store()
        try:
            cursor = handle.position(since_inclusive)
            entries = iter(handle.entries(cursor, subsystem_prefix))
        except BaseException:
            handle.close()
            raise
        logger.debug(f"Log query opened: since={since_inclusive.isoformat()}, "
                     f"subsystem_prefix={subsystem_prefix!r}")
        return LogEntryStream(handle, entries, since_inclusive)


def create_log_store(store_kind: str, log_file_path: Path) -> LogStore:
    """Builds the store named by `[export] log_store` in config.toml."""
    kind = (store_kind or "file").strip().lower()
    if kind == "journal":
        return JournalLogStore()
    if kind != "file":
        logger.warning(f"Unknown log store '{store_kind}' in config. Falling back to the structured log file.")
    return JsonLinesLogStore(log_file_path)

#
# End of logexport/Log_Export/log_query.py
########################################################################################################################
