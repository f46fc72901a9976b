# run.py
# Description: Entry point for the logexport application. Ensures the config file exists, then runs the app.
#
# Imports
import sys
#
# Local Imports
from logexport.app import LogExportApp
from logexport.config import DEFAULT_CONFIG_PATH, load_settings
#
#######################################################################################################################
#
# Functions:

def ensure_default_files() -> None:
    """Creates the default config file if it doesn't exist."""
    if not DEFAULT_CONFIG_PATH.exists():
        print(f"Config file not found at {DEFAULT_CONFIG_PATH}, creating default.")
    load_settings(force_reload=True)
    if not DEFAULT_CONFIG_PATH.exists():
        print(f"WARNING: Could not create {DEFAULT_CONFIG_PATH}. Running with built-in defaults.", file=sys.stderr)


if __name__ == "__main__":
    ensure_default_files()
    print("Starting logexport application...")
    # Logging is configured inside the app's lifecycle (on_mount)
    app = LogExportApp()
    app.run()
    print("logexport application finished.")

#
# End of run.py
#######################################################################################################################
