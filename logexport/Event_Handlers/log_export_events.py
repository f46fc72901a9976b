# log_export_events.py
# Description: Button handlers for the log export screen
#
# Imports
from typing import TYPE_CHECKING
#
# 3rd-Party Imports
from loguru import logger
from textual.widgets import Button
#
# Local Imports
from ..Constants import (
    EXPORT_CANCEL_BUTTON_ID,
    EXPORT_CLIPBOARD_BUTTON_ID,
    EXPORT_DISMISS_ERROR_BUTTON_ID,
    EXPORT_FILE_BUTTON_ID,
)
if TYPE_CHECKING:
    from ..UI.Log_Export_Window import LogExportScreen
#
########################################################################################################################
#
# Functions:

async def handle_copy_to_clipboard_button_pressed(screen: 'LogExportScreen', event: Button.Pressed) -> None:
    logger.info("Copy logs to clipboard button pressed.")
    if screen.controller.start_export_to_clipboard():
        screen.pending_action = "clipboard"
    else:
        screen.app.notify("An export is already running.", severity="warning", timeout=3)


async def handle_export_to_file_button_pressed(screen: 'LogExportScreen', event: Button.Pressed) -> None:
    logger.info("Export logs to file button pressed.")
    if screen.controller.start_export_to_file():
        screen.pending_action = "file"
    else:
        screen.app.notify("An export is already running.", severity="warning", timeout=3)


async def handle_cancel_button_pressed(screen: 'LogExportScreen', event: Button.Pressed) -> None:
    if screen.controller.is_in_progress:
        logger.info("Log export screen closed while an export is running.")
    screen.dismiss()


async def handle_dismiss_error_button_pressed(screen: 'LogExportScreen', event: Button.Pressed) -> None:
    screen.controller.acknowledge_error()


# --- Button Handler Map ---
LOG_EXPORT_BUTTON_HANDLERS = {
    EXPORT_CLIPBOARD_BUTTON_ID: handle_copy_to_clipboard_button_pressed,
    EXPORT_FILE_BUTTON_ID: handle_export_to_file_button_pressed,
    EXPORT_CANCEL_BUTTON_ID: handle_cancel_button_pressed,
    EXPORT_DISMISS_ERROR_BUTTON_ID: handle_dismiss_error_button_pressed,
}

#
# End of log_export_events.py
########################################################################################################################
