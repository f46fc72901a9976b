# Tests/Log_Export/conftest.py
#
# Shared fixtures for the log export pipeline tests.
#
# Imports
from pathlib import Path
from typing import List, Optional
#
# Third-party imports
import pytest
from textual.app import App
#
# Local imports
from logexport.Log_Export.export_controller import ExportController
from logexport.Log_Export.export_sinks import ClipboardSink, FileSink
from logexport.Log_Export.export_writer import ExportWriter
from logexport.Log_Export.log_query import LogQuery
from logexport.Log_Export.models import LogEntry, LogLevel
from log_export_fakes import APP_ID, FakeLogStore, FakeSaveFlow, entry_at
#
############################################################################################################################
#
# Fixtures:

@pytest.fixture
def mixed_entries() -> List[LogEntry]:
    return [
        entry_at(100, APP_ID, "ui", "button is pressed"),
        entry_at(150, "org.network", "tcp", "connection opened"),
        entry_at(200, f"{APP_ID}.export", "writer", "writing file"),
        entry_at(250, "kernel", "", "system noise", level=LogLevel.NOTICE),
        entry_at(300, APP_ID, "ui", "button released", level=LogLevel.DEBUG),
    ]


@pytest.fixture
def export_dir(tmp_path: Path) -> Path:
    path = tmp_path / "exports"
    path.mkdir()
    return path


@pytest.fixture
def writer(export_dir: Path) -> ExportWriter:
    return ExportWriter(temp_dir=export_dir, process_name="testproc")


@pytest.fixture
def clipboard() -> List[str]:
    return []


@pytest.fixture
def make_controller(writer: ExportWriter, clipboard: List[str]):
    """Builds a controller for `app` around a given store and save flow."""
    def _make(app: App, store: FakeLogStore, save_flow: Optional[FakeSaveFlow] = None) -> ExportController:
        return ExportController(
            app,
            LogQuery(store, APP_ID),
            writer,
            clipboard_sink=ClipboardSink(clipboard.append),
            file_sink=FileSink(save_flow or FakeSaveFlow(), writer.process_name),
        )
    return _make

#
# End of conftest.py
############################################################################################################################
