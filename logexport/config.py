# logexport/config.py
# Description: Configuration management for the logexport application.
#
# Imports
import copy
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional
#
# Third-Party Imports
from loguru import logger
#
#######################################################################################################################
#
# Functions:

# --- Path to the CLI's configuration file ---
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "logexport" / "config.toml"

# --- Base directory for data the app writes (log store lives here) ---
BASE_DATA_DIR_CLI = Path.home() / ".local" / "share" / "logexport"

# --- Configuration File Content (for reference or auto-creation for the CLI) ---
CONFIG_TOML_CONTENT = """
# Configuration for the logexport TUI App
# Located at: ~/.config/logexport/config.toml
[general]
log_level = "INFO" # TUI Log Level: DEBUG, INFO, WARNING, ERROR, CRITICAL
# Loggers whose names start with this are "application" logs; everything else is a system log.
app_identifier = "logexport"
# Used in exported file names. Empty means the running script's name.
process_name = ""

[logging]
# Structured (JSON lines) log file read back by the exporter. Placed under data_dir.
data_dir = "~/.local/share/logexport"
log_filename = "logexport_app.log"
file_log_level = "DEBUG" # File Log Level: DEBUG, INFO, WARNING, ERROR, CRITICAL
rich_log_level = "DEBUG"
log_max_bytes = 10485760 # 10 MB
log_backup_count = 5

[export]
log_store = "file" # "file" (structured log file) or "journal" (systemd journal)
default_lookback = "ten_minutes" # "ten_minutes", "hour", "day"
include_system_logs = false
# Where temporary export files are created. Empty means the system temp directory.
temp_dir = ""
"""

try:
    DEFAULT_CONFIG_FROM_TOML: Dict[str, Any] = tomllib.loads(CONFIG_TOML_CONTENT)
except tomllib.TOMLDecodeError as e:
    logger.critical(f"FATAL: Could not parse internal CONFIG_TOML_CONTENT: {e}. Application cannot start correctly.")
    DEFAULT_CONFIG_FROM_TOML = {}


# --- Helper for deep merging dictionaries ---
def deep_merge_dicts(base: Dict, update: Dict) -> Dict:
    """Recursively merges update_dict into base_dict."""
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = deep_merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Primary Configuration Loading Logic for the CLI ---
_CONFIG_CACHE: Optional[Dict[str, Any]] = None

def load_settings(force_reload: bool = False) -> Dict[str, Any]:
    """
    Loads settings from ~/.config/logexport/config.toml on top of the built-in defaults.
    If the file doesn't exist, it's created with default values.
    """
    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None and not force_reload:
        return _CONFIG_CACHE

    loaded_config = copy.deepcopy(DEFAULT_CONFIG_FROM_TOML)

    if not DEFAULT_CONFIG_PATH.exists():
        logger.info(f"Config file not found at {DEFAULT_CONFIG_PATH}. Creating with default values.")
        try:
            DEFAULT_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
            with open(DEFAULT_CONFIG_PATH, "w", encoding="utf-8") as f:
                # Write the commented TOML, not the parsed dictionary
                f.write(CONFIG_TOML_CONTENT)
            logger.info(f"Created default config file at {DEFAULT_CONFIG_PATH}")
        except OSError as e:
            logger.error(f"Could not create default config file {DEFAULT_CONFIG_PATH}: {e}. Using internal defaults.")
    else:
        logger.info(f"Attempting to load config from: {DEFAULT_CONFIG_PATH}")
        try:
            with open(DEFAULT_CONFIG_PATH, "rb") as f:
                user_config_from_file = tomllib.load(f)
            loaded_config = deep_merge_dicts(loaded_config, user_config_from_file)
            logger.info(f"Successfully loaded and merged config from {DEFAULT_CONFIG_PATH}")
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Error decoding TOML config file {DEFAULT_CONFIG_PATH}: {e}. Using internal defaults.")
        except OSError as e:
            logger.error(f"Could not read config file {DEFAULT_CONFIG_PATH}: {e}. Using internal defaults.")

    _CONFIG_CACHE = loaded_config
    logger.debug(f"load_settings returning config with top-level keys: {list(loaded_config.keys())}")
    return _CONFIG_CACHE


# --- CLI Setting Getter ---
def get_cli_setting(section: str, key: str, default: Any = None) -> Any:
    """Helper to get a specific setting from the loaded configuration."""
    config = load_settings()
    section_data = config.get(section)
    if isinstance(section_data, dict):
        return section_data.get(key, default)
    return default


# --- Path Getters ---
def get_data_dir() -> Path:
    data_dir_str = get_cli_setting("logging", "data_dir", str(BASE_DATA_DIR_CLI))
    return Path(data_dir_str).expanduser().resolve()

def get_cli_log_file_path() -> Path:
    default_log_filename = DEFAULT_CONFIG_FROM_TOML.get("logging", {}).get("log_filename", "logexport_app.log")
    log_filename = get_cli_setting("logging", "log_filename", default_log_filename)
    log_file_path = get_data_dir() / log_filename
    try:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create log directory {log_file_path.parent}: {e}")
    return log_file_path

def get_export_temp_dir() -> Optional[Path]:
    """Directory for temporary export files, or None for the system temp directory."""
    temp_dir_str = get_cli_setting("export", "temp_dir", "")
    if not temp_dir_str:
        return None
    return Path(temp_dir_str).expanduser().resolve()

#
# End of logexport/config.py
#######################################################################################################################
