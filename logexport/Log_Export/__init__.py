# logexport/Log_Export/__init__.py
from .export_controller import ExportController
from .export_sinks import ClipboardSink, FileSink, TextualSaveFlow
from .export_writer import ExportWriter
from .log_export_errors import (
    LogExportError, StoreUnavailable, CreateFailed,
    WriteFailed, ReadFailed, DecodeFailed, SaveFailed
)
from .log_formatter import format_entry, parse_line
from .log_query import LogQuery, JsonLinesLogStore, JournalLogStore
from .models import (
    LookbackWindow, LogLevel, LogEntry, ExportOptions,
    ExportArtifact, ExportState, ExportStatus
)

__all__ = [
    "ExportController",
    "ClipboardSink", "FileSink", "TextualSaveFlow",
    "ExportWriter",
    "LogExportError", "StoreUnavailable", "CreateFailed",
    "WriteFailed", "ReadFailed", "DecodeFailed", "SaveFailed",
    "format_entry", "parse_line",
    "LogQuery", "JsonLinesLogStore", "JournalLogStore",
    "LookbackWindow", "LogLevel", "LogEntry", "ExportOptions",
    "ExportArtifact", "ExportState", "ExportStatus",
]
