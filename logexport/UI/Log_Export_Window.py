# Log_Export_Window.py
# Description: Modal screen for exporting recent logs to the clipboard or a file
#
# Imports
from typing import TYPE_CHECKING, Callable, Optional
#
# 3rd-Party Imports
from loguru import logger
from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import QueryError
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Button, Checkbox, Label, LoadingIndicator, Select, Static
#
# Local Imports
from ..Constants import (
    EXPORT_CANCEL_BUTTON_ID,
    EXPORT_CLIPBOARD_BUTTON_ID,
    EXPORT_DISMISS_ERROR_BUTTON_ID,
    EXPORT_ERROR_ID,
    EXPORT_FILE_BUTTON_ID,
    EXPORT_LOOKBACK_SELECT_ID,
    EXPORT_PROGRESS_ID,
    EXPORT_SYSTEM_LOGS_CHECKBOX_ID,
)
from ..Event_Handlers.log_export_events import LOG_EXPORT_BUTTON_HANDLERS
from ..Log_Export.models import ExportState, ExportStatus, LookbackWindow
if TYPE_CHECKING:
    from ..Log_Export.export_controller import ExportController
#
#########################################################################################################################
#
# Classes:

class LogExportScreen(ModalScreen[None]):
    """
    Export sheet: pick a lookback window, choose whether to include system logs, then
    copy to the clipboard or save to a file. Controls are disabled while an export runs.
    """

    exporting: reactive[bool] = reactive(False)
    error_message: reactive[Optional[str]] = reactive(None)

    def __init__(self, controller: 'ExportController', **kwargs):
        super().__init__(**kwargs)
        self.controller = controller
        self.pending_action: Optional[str] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        with Vertical(id="log-export-dialog"):
            yield Label("Filter", classes="section-title")
            yield Label("Last")
            yield Select(
                [(window.label, window) for window in (LookbackWindow.DAY, LookbackWindow.HOUR,
                                                       LookbackWindow.TEN_MINUTES)],
                value=self.controller.lookback,
                allow_blank=False,
                id=EXPORT_LOOKBACK_SELECT_ID,
            )
            yield Checkbox("Include system logs", value=self.controller.include_system_logs,
                           id=EXPORT_SYSTEM_LOGS_CHECKBOX_ID)
            yield LoadingIndicator(id=EXPORT_PROGRESS_ID)
            with Vertical(id="log-export-error-box"):
                yield Static("", id=EXPORT_ERROR_ID)
                yield Button("Dismiss", id=EXPORT_DISMISS_ERROR_BUTTON_ID)
            with Horizontal(id="log-export-buttons"):
                yield Button("Copy to clipboard", variant="primary", id=EXPORT_CLIPBOARD_BUTTON_ID)
                yield Button("Export to file", id=EXPORT_FILE_BUTTON_ID)
                yield Button("Cancel", id=EXPORT_CANCEL_BUTTON_ID)

    def on_mount(self) -> None:
        self._unsubscribe = self.controller.subscribe(self._on_export_state)
        self._on_export_state(self.controller.state)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self.controller.is_in_progress:
            self.controller.detach()

    def _on_export_state(self, state: ExportState) -> None:
        finished = self.exporting and state.status is ExportStatus.IDLE
        self.exporting = state.status is ExportStatus.IN_PROGRESS
        self.error_message = state.error_message if state.status is ExportStatus.ERROR else None
        if finished and self.pending_action == "clipboard":
            self.app.notify("Logs copied to clipboard!", title="Clipboard", severity="information", timeout=4)
        if state.status is not ExportStatus.IN_PROGRESS:
            self.pending_action = None

    def watch_exporting(self, exporting: bool) -> None:
        try:
            self.query_one("#log-export-dialog").set_class(exporting, "-exporting")
            self.query_one(f"#{EXPORT_PROGRESS_ID}", LoadingIndicator).display = exporting
            for widget_id in (EXPORT_LOOKBACK_SELECT_ID, EXPORT_SYSTEM_LOGS_CHECKBOX_ID,
                              EXPORT_CLIPBOARD_BUTTON_ID, EXPORT_FILE_BUTTON_ID):
                self.query_one(f"#{widget_id}").disabled = exporting
        except QueryError:
            logger.debug("Log export screen not composed yet; skipping busy-state update.")

    def watch_error_message(self, error_message: Optional[str]) -> None:
        try:
            self.query_one("#log-export-error-box").display = error_message is not None
            self.query_one(f"#{EXPORT_ERROR_ID}", Static).update(error_message or "")
        except QueryError:
            logger.debug("Log export screen not composed yet; skipping error update.")

    @on(Select.Changed, f"#{EXPORT_LOOKBACK_SELECT_ID}")
    def _lookback_changed(self, event: Select.Changed) -> None:
        if isinstance(event.value, LookbackWindow):
            self.controller.lookback = event.value

    @on(Checkbox.Changed, f"#{EXPORT_SYSTEM_LOGS_CHECKBOX_ID}")
    def _include_system_logs_changed(self, event: Checkbox.Changed) -> None:
        self.controller.include_system_logs = event.value

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        handler = LOG_EXPORT_BUTTON_HANDLERS.get(event.button.id)
        if handler is None:
            return
        event.stop()
        await handler(self, event)

#
# End of Log_Export_Window.py
#######################################################################################################################
