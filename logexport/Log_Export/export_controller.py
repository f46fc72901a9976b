# logexport/Log_Export/export_controller.py
# Description: Runs log exports on a background worker and owns the idle / in-progress / error state.
#
# Imports
import functools
import threading
from typing import TYPE_CHECKING, Callable, List, Optional, Protocol
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from ..config import get_cli_log_file_path, get_cli_setting, get_export_temp_dir
from .export_sinks import ClipboardSink, FileSink, TextualSaveFlow
from .export_writer import ExportWriter, remove_artifact
from .log_export_errors import LogExportError
from .log_query import LogQuery, create_log_store
from .models import ExportArtifact, ExportOptions, ExportState, ExportStatus, LookbackWindow
#
if TYPE_CHECKING:
    from textual.app import App
    from textual.worker import Worker
#
#######################################################################################################################
#
# Classes:

StateListener = Callable[[ExportState], None]


class ExportSink(Protocol):
    def deliver(self, artifact: ExportArtifact) -> bool: ...


class ExportController:
    """
    Orchestrates query -> format -> write -> deliver for one export at a time.

    All state changes happen on the app's thread. The pipeline runs in a thread worker
    and reports back through `App.call_from_thread`. A start request while an export is
    in flight is rejected, not queued.
    """

    WORKER_GROUP = "log_export"
    WORKER_NAME = "log_export_worker"

    def __init__(self, app: "App", query: LogQuery, writer: ExportWriter,
                 clipboard_sink: Optional[ExportSink] = None,
                 file_sink: Optional[ExportSink] = None,
                 lookback: LookbackWindow = LookbackWindow.TEN_MINUTES,
                 include_system_logs: bool = False):
        self.app = app
        self.query = query
        self.writer = writer
        self.clipboard_sink = clipboard_sink or ClipboardSink(self._copy_to_clipboard)
        self.save_flow: Optional[TextualSaveFlow] = None
        if file_sink is None:
            self.save_flow = TextualSaveFlow(app)
            file_sink = FileSink(self.save_flow, writer.process_name)
        self.file_sink = file_sink

        # Current UI selection; captured into ExportOptions when an export starts
        self.lookback = lookback
        self.include_system_logs = include_system_logs

        self._state = ExportState.idle()
        self._listeners: List[StateListener] = []
        self._lock = threading.Lock()
        self._detached = False
        self._worker: Optional["Worker"] = None

    @classmethod
    def from_config(cls, app: "App") -> "ExportController":
        """Builds a controller wired to the store, identifiers and defaults in config.toml."""
        store = create_log_store(get_cli_setting("export", "log_store", "file"), get_cli_log_file_path())
        query = LogQuery(store, get_cli_setting("general", "app_identifier", "logexport"))
        writer = ExportWriter(temp_dir=get_export_temp_dir(),
                              process_name=get_cli_setting("general", "process_name", None))
        return cls(
            app, query, writer,
            lookback=LookbackWindow.from_config_key(get_cli_setting("export", "default_lookback", "ten_minutes")),
            include_system_logs=bool(get_cli_setting("export", "include_system_logs", False)),
        )

    # --- State ---

    @property
    def state(self) -> ExportState:
        return self._state

    @property
    def is_in_progress(self) -> bool:
        return self._state.status is ExportStatus.IN_PROGRESS

    @property
    def current_error(self) -> Optional[str]:
        return self._state.error_message if self._state.status is ExportStatus.ERROR else None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Registers a listener called on the app thread after every state change."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return _unsubscribe

    def _set_state(self, state: ExportState) -> None:
        previous, self._state = self._state, state
        logger.debug(f"Log export state: {previous.status.value} -> {state.status.value}")
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Log export state listener failed: {e}")

    # --- UI actions ---

    def current_options(self) -> ExportOptions:
        return ExportOptions.from_selection(self.lookback, self.include_system_logs)

    def start_export_to_clipboard(self, options: Optional[ExportOptions] = None) -> bool:
        return self.start(options or self.current_options(), self.clipboard_sink)

    def start_export_to_file(self, options: Optional[ExportOptions] = None) -> bool:
        return self.start(options or self.current_options(), self.file_sink)

    def acknowledge_error(self) -> None:
        if self._state.status is ExportStatus.ERROR:
            self._set_state(ExportState.idle())

    def start(self, options: ExportOptions, sink: ExportSink) -> bool:
        if self.is_in_progress:
            logger.warning("Log export already in progress. Ignoring start request.")
            return False
        with self._lock:
            self._detached = False
        if self.save_flow is not None:
            self.save_flow.reset()
        self._set_state(ExportState.in_progress())
        logger.info(f"Starting log export since {options.since_inclusive.isoformat()} "
                    f"(system logs: {options.include_system_logs}) via {type(sink).__name__}")
        self._worker = self.app.run_worker(
            functools.partial(self._run_export, options, sink),
            name=self.WORKER_NAME,
            group=self.WORKER_GROUP,
            description="Exporting logs",
            exclusive=False,
            exit_on_error=False,
            thread=True,
        )
        return True

    def detach(self) -> None:
        """
        The UI that started the export has gone away. Any pending save dialog is cancelled
        and an artifact not yet handed to a sink is deleted. An artifact a sink already
        owns is left to that sink, which deletes it when it returns. The worker finishes
        on its own and the export ends Idle.
        """
        with self._lock:
            self._detached = True
        logger.info("Log export UI dismissed while export in flight.")
        if self.save_flow is not None:
            self.save_flow.cancel()

    # --- Worker side ---

    def _copy_to_clipboard(self, text: str) -> None:
        self.app.call_from_thread(self.app.copy_to_clipboard, text)

    def _is_detached(self) -> bool:
        with self._lock:
            return self._detached

    def _claim_for_delivery(self) -> bool:
        """Hands the artifact to the sink unless the UI has detached. Decided under the lock."""
        with self._lock:
            return not self._detached

    def _release_artifact(self, artifact: Optional[ExportArtifact]) -> None:
        # Sinks delete what they consume. Anything still on disk here was never delivered.
        if artifact is not None and artifact.exists():
            remove_artifact(artifact)

    def _run_export(self, options: ExportOptions, sink: ExportSink) -> None:
        artifact: Optional[ExportArtifact] = None
        error_message: Optional[str] = None
        try:
            with self.query.fetch(options.since_inclusive, options.include_system_logs) as entries:
                artifact = self.writer.write(entries)
            if self._claim_for_delivery():
                sink.deliver(artifact)
            else:
                logger.info("Log export abandoned before delivery.")
        except LogExportError as e:
            if self._is_detached():
                logger.info(f"Abandoned log export stopped: {e}")
            else:
                logger.error(f"Log export failed: {e}")
                error_message = str(e)
        except Exception as e:
            if self._is_detached():
                logger.info(f"Abandoned log export stopped: {e}")
            else:
                logger.exception(f"Unexpected error during log export: {e}")
                error_message = f"Log export failed: {e}"
        finally:
            self._release_artifact(artifact)
        self._post_to_app(self._finish_export, error_message)

    def _post_to_app(self, callback: Callable, *args) -> None:
        try:
            self.app.call_from_thread(callback, *args)
        except RuntimeError as e:
            # The app has shut down; there is no UI left to update
            logger.warning(f"Could not report log export result to the app: {e}")

    def _finish_export(self, error_message: Optional[str]) -> None:
        if error_message is not None:
            self._set_state(ExportState.error(error_message))
        else:
            logger.info("Log export finished.")
            self._set_state(ExportState.idle())

#
# End of logexport/Log_Export/export_controller.py
########################################################################################################################
