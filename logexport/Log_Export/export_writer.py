# logexport/Log_Export/export_writer.py
# Description: Streams formatted log lines into a fresh temporary file.
#
# Imports
import sys
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Union
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from .log_export_errors import CreateFailed, WriteFailed
from .log_formatter import format_entry
from .models import ExportArtifact, LogEntry
#
#######################################################################################################################
#
# Functions:

LOG_FILE_SUFFIX = ".log"
LOG_CONTENT_TYPE = "text/x-log"


def get_process_name(override: Optional[str] = None) -> str:
    """Name used in export file names. `override` comes from `[general] process_name`."""
    if override:
        return str(override)
    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else ""
    name = Path(argv0).stem
    if not name or name in ("-c", "-m", "__main__"):
        name = Path(sys.executable).stem or "python"
    return name


def make_export_filename(process_name: str, token: str) -> str:
    return f"{process_name}-{token}{LOG_FILE_SUFFIX}"


def suggested_save_filename(process_name: str, now: Optional[datetime] = None) -> str:
    """Default name offered by the save dialog: `<process>-<ISO-8601 basic UTC>.log`."""
    now = now or datetime.now(timezone.utc)
    return make_export_filename(process_name, now.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ"))


def remove_artifact(artifact: Optional[ExportArtifact]) -> None:
    """Best-effort delete. Failures are logged, never raised."""
    if artifact is None:
        return
    try:
        artifact.location.unlink(missing_ok=True)
        logger.debug(f"Removed export artifact {artifact.location}")
    except OSError as e:
        logger.warning(f"Could not remove export artifact {artifact.location}: {e}")


#######################################################################################################################
#
# Classes:

class ExportWriter:
    def __init__(self, temp_dir: Optional[Union[str, Path]] = None, process_name: Optional[str] = None):
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
        self.process_name = get_process_name(process_name)

    def _new_artifact_path(self) -> Path:
        return self.temp_dir / make_export_filename(self.process_name, uuid.uuid4().hex)

    def write(self, entries: Iterable[LogEntry]) -> ExportArtifact:
        """
        Creates a new uniquely named file and streams one canonical line per entry into it.

        The file is opened with exclusive creation, so an existing path is never reused.
        On a streaming failure the partial file is removed before WriteFailed is raised.
        """
        path = self._new_artifact_path()
        try:
            handle = open(path, "x", encoding="utf-8", newline="")
        except OSError as e:
            raise CreateFailed(path, e.strerror or str(e)) from e

        artifact = ExportArtifact(location=path)
        written = 0
        skipped = 0
        try:
            with handle:
                for entry in entries:
                    line = format_entry(entry)
                    try:
                        line.encode("utf-8")
                    except UnicodeEncodeError:
                        skipped += 1
                        continue
                    handle.write(line)
                    written += 1
        except OSError as e:
            remove_artifact(artifact)
            raise WriteFailed(f"Failed writing logs to {path}: {e.strerror or e}") from e
        except BaseException:
            remove_artifact(artifact)
            raise

        if skipped:
            logger.warning(f"Skipped {skipped} log entries that could not be encoded as UTF-8.")
        logger.info(f"Wrote {written} log entries to {path}")
        return artifact

#
# End of logexport/Log_Export/export_writer.py
########################################################################################################################
