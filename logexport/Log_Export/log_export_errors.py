# logexport/Log_Export/log_export_errors.py
#
#
#######################################################################################################################
#
# Classes:

class LogExportError(Exception):
    """Base exception for log export errors. The message is shown to the user as-is."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

class StoreUnavailable(LogExportError):
    """Raised when the log store cannot be opened (missing, unreadable, or access denied)."""
    pass

class CreateFailed(LogExportError):
    """Raised when the temporary export file cannot be created."""
    def __init__(self, path, reason: str = ""):
        message = f"Failed to create a temporary file at {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path

class WriteFailed(LogExportError):
    """Raised for I/O failures while streaming entries into the export file."""
    pass

class ReadFailed(LogExportError):
    """Raised when the finished export file cannot be read back for delivery."""
    pass

class DecodeFailed(LogExportError):
    """Raised when exported content is not valid UTF-8 and cannot be placed on the clipboard."""
    pass

class SaveFailed(LogExportError):
    """Raised when the save flow could not write the export to the chosen destination."""
    pass

#
# End of logexport/Log_Export/log_export_errors.py
########################################################################################################################
