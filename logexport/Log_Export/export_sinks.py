# logexport/Log_Export/export_sinks.py
# Description: Delivery strategies for a finished export artifact (clipboard or a user-picked file).
#
# Imports
import concurrent.futures
import shutil
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Protocol
#
# 3rd-Party Imports
from loguru import logger
from textual_fspicker import FileSave, Filters
#
# Local Imports
from .export_writer import LOG_CONTENT_TYPE, LOG_FILE_SUFFIX, remove_artifact, suggested_save_filename
from .log_export_errors import DecodeFailed, ReadFailed, SaveFailed
from .models import ExportArtifact
#
if TYPE_CHECKING:
    from textual.app import App
#
#######################################################################################################################
#
# Classes:

class SaveFlow(Protocol):
    def present(self, artifact_path: Path, suggested_name: str, content_type: str) -> bool:
        """Lets the user save the artifact somewhere. Returns False when the user cancels."""
        ...


class ClipboardSink:
    """Copies an artifact's text to the clipboard, then deletes the artifact."""

    def __init__(self, set_text: Callable[[str], None]):
        self.set_text = set_text

    def deliver(self, artifact: ExportArtifact) -> bool:
        try:
            try:
                data = artifact.location.read_bytes()
            except OSError as e:
                raise ReadFailed(f"Cannot access logs at {artifact.location}: {e.strerror or e}") from e
            try:
                text = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeFailed(f"Exported logs are not valid UTF-8 (byte {e.start})") from e
            self.set_text(text)
            logger.info(f"Copied {len(text)} characters of logs to the clipboard.")
            return True
        finally:
            remove_artifact(artifact)


class FileSink:
    """Hands an artifact to the save flow and deletes it once the user confirms or cancels."""

    def __init__(self, save_flow: SaveFlow, process_name: str):
        self.save_flow = save_flow
        self.process_name = process_name

    def deliver(self, artifact: ExportArtifact) -> bool:
        try:
            confirmed = self.save_flow.present(
                artifact.location,
                suggested_save_filename(self.process_name),
                LOG_CONTENT_TYPE,
            )
            if confirmed:
                logger.info("Log export saved.")
            else:
                logger.info("Log export save cancelled by user.")
            return confirmed
        finally:
            remove_artifact(artifact)


def _log_files_only(path: Path) -> bool:
    return path.suffix == LOG_FILE_SUFFIX


class TextualSaveFlow:
    """
    Save flow backed by textual_fspicker's FileSave dialog.

    present() is called from the export worker thread. The dialog is pushed on the UI
    thread and the worker blocks until it is dismissed or cancel() is called.
    """

    def __init__(self, app: "App", start_location: Optional[Path] = None):
        self.app = app
        self.start_location = Path(start_location) if start_location else Path.home()
        self._pending: Optional[concurrent.futures.Future] = None
        self._cancelled = False
        self._lock = threading.Lock()

    def _push_dialog(self, suggested_name: str, future: concurrent.futures.Future) -> None:
        def _on_dismiss(selected: Optional[Path]) -> None:
            if not future.done():
                future.set_result(selected)

        self.app.push_screen(
            FileSave(
                location=str(self.start_location),
                title="Export logs",
                filters=Filters(("Log files", _log_files_only)),
                default_file=suggested_name,
            ),
            callback=_on_dismiss,
        )

    def choose_destination(self, suggested_name: str) -> Optional[Path]:
        future: concurrent.futures.Future = concurrent.futures.Future()
        with self._lock:
            if self._cancelled:
                logger.info("Save dialog skipped; the export was abandoned.")
                return None
            self._pending = future
        try:
            self.app.call_from_thread(self._push_dialog, suggested_name, future)
            return future.result()
        except concurrent.futures.CancelledError:
            logger.info("Save dialog abandoned.")
            return None
        finally:
            with self._lock:
                self._pending = None

    def present(self, artifact_path: Path, suggested_name: str, content_type: str) -> bool:
        destination = self.choose_destination(suggested_name)
        if destination is None:
            return False
        if destination.suffix != LOG_FILE_SUFFIX:
            destination = destination.with_name(destination.name + LOG_FILE_SUFFIX)
        copy_artifact(artifact_path, destination)
        logger.info(f"Saved log export ({content_type}) to {destination}")
        return True

    def cancel(self) -> None:
        """Resolves a pending dialog as cancelled. Stays in effect until reset()."""
        with self._lock:
            self._cancelled = True
            if self._pending is not None:
                self._pending.cancel()

    def reset(self) -> None:
        with self._lock:
            self._cancelled = False


def copy_artifact(artifact_path: Path, destination: Path) -> None:
    try:
        shutil.copyfile(artifact_path, destination)
    except OSError as e:
        raise SaveFailed(f"Failed to save logs to {destination}: {e.strerror or e}") from e

#
# End of logexport/Log_Export/export_sinks.py
########################################################################################################################
