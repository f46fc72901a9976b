# logexport - Textual host for the log export pipeline
# Description: A small Textual app showing live logs with an "Export logs..." action.
#
# Imports
import logging
from typing import Callable, Optional
#
# 3rd-Party Libraries
from loguru import logger as loguru_logger
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, Footer, Header, RichLog
#
# Local Imports
from .Constants import LOG_DISPLAY_ID, OPEN_EXPORT_BUTTON_ID, css_content
from .Log_Export.export_controller import ExportController
from .Logging_Config import RichLogHandler, configure_application_logging
from .UI.Log_Export_Window import LogExportScreen
#
#######################################################################################################################
#
# Classes:

class LogExportApp(App[None]):
    """Demo host: a log view plus the log export sheet."""

    CSS = css_content
    TITLE = "Log Export"
    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit App", show=True),
        Binding("e", "export_logs", "Export logs...", show=True),
    ]

    def __init__(self, controller_factory: Optional[Callable[["LogExportApp"], ExportController]] = None,
                 configure_logging: bool = True):
        super().__init__()
        self.loguru_logger = loguru_logger
        self._rich_log_handler: Optional[RichLogHandler] = None
        self._configure_logging = configure_logging
        # The controller needs the app for its worker and UI thread hand-off
        self.export_controller = (controller_factory or ExportController.from_config)(self)

    def compose(self) -> ComposeResult:
        yield Header()
        yield RichLog(id=LOG_DISPLAY_ID, wrap=True, highlight=True, markup=False, auto_scroll=True)
        with Horizontal(id="main-actions"):
            yield Button("Export logs...", id=OPEN_EXPORT_BUTTON_ID, variant="primary")
        yield Footer()

    def on_mount(self) -> None:
        if self._configure_logging:
            configure_application_logging(self)
        self.loguru_logger.info("Log export app started.")

    async def on_unmount(self) -> None:
        if self._rich_log_handler is not None:
            logging.getLogger().removeHandler(self._rich_log_handler)
            await self._rich_log_handler.stop_processor()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == OPEN_EXPORT_BUTTON_ID:
            self.action_export_logs()

    def action_export_logs(self) -> None:
        if isinstance(self.screen, LogExportScreen):
            return
        self.push_screen(LogExportScreen(self.export_controller))


def main() -> None:
    LogExportApp().run()


if __name__ == "__main__":
    main()

#
# End of app.py
#######################################################################################################################
