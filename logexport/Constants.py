# Constants.py
# Description: Constants for the application
#
########################################################################################################################
#
# Constants:

# --- Widget IDs ---
LOG_DISPLAY_ID = "app-log-display"
OPEN_EXPORT_BUTTON_ID = "open-log-export-button"
EXPORT_LOOKBACK_SELECT_ID = "log-export-lookback"
EXPORT_SYSTEM_LOGS_CHECKBOX_ID = "log-export-include-system"
EXPORT_CLIPBOARD_BUTTON_ID = "log-export-clipboard-button"
EXPORT_FILE_BUTTON_ID = "log-export-file-button"
EXPORT_CANCEL_BUTTON_ID = "log-export-cancel-button"
EXPORT_DISMISS_ERROR_BUTTON_ID = "log-export-dismiss-error-button"
EXPORT_ERROR_ID = "log-export-error"
EXPORT_PROGRESS_ID = "log-export-progress"


# --- CSS definition ---
css_content = """
Screen { layout: vertical; }
#app-log-display { height: 1fr; border: round $accent; }
#main-actions { height: auto; padding: 0 1; }

LogExportScreen { align: center middle; }
#log-export-dialog {
    width: 64;
    height: auto;
    padding: 1 2;
    border: thick $accent;
    background: $panel;
}
#log-export-dialog.-exporting { opacity: 60%; }
#log-export-dialog .section-title { text-style: bold; margin-bottom: 1; }
#log-export-buttons { height: auto; margin-top: 1; }
#log-export-buttons Button { margin-right: 1; }
#log-export-progress { height: 1; display: none; }
#log-export-error-box { height: auto; margin-top: 1; border: round $error; padding: 0 1; display: none; }
#log-export-error { color: $error; }
"""

#
# End of Constants.py
########################################################################################################################
