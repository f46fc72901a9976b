# test_config.py
#
# Imports
from pathlib import Path
#
# Third-party imports
import pytest
from textual.app import App
#
# Local imports
from logexport import config
from logexport.Log_Export.export_controller import ExportController
from logexport.Log_Export.log_query import JournalLogStore, JsonLinesLogStore
from logexport.Log_Export.models import LookbackWindow
#
############################################################################################################################
#
# Fixtures:

@pytest.fixture
def config_path(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "config" / "config.toml"
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", path)
    monkeypatch.setattr(config, "_CONFIG_CACHE", None)
    return path


#
############################################################################################################################
#
# Tests:

def test_missing_config_file_is_created_with_defaults(config_path):
    settings = config.load_settings()
    assert config_path.exists()
    assert config_path.read_text(encoding="utf-8") == config.CONFIG_TOML_CONTENT
    assert settings["general"]["app_identifier"] == "logexport"
    assert settings["export"]["log_store"] == "file"
    assert settings["export"]["default_lookback"] == "ten_minutes"
    assert settings["export"]["include_system_logs"] is False


def test_user_values_are_merged_over_defaults(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text('[export]\ndefault_lookback = "day"\n\n[general]\nprocess_name = "myproc"\n',
                           encoding="utf-8")
    settings = config.load_settings()
    assert settings["export"]["default_lookback"] == "day"
    assert settings["export"]["log_store"] == "file"
    assert settings["general"]["process_name"] == "myproc"
    assert settings["general"]["app_identifier"] == "logexport"


def test_invalid_toml_falls_back_to_defaults(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("[export\nlog_store = ", encoding="utf-8")
    settings = config.load_settings()
    assert settings == config.DEFAULT_CONFIG_FROM_TOML


def test_settings_are_cached_until_forced(config_path):
    first = config.load_settings()
    config_path.write_text('[general]\napp_identifier = "other"\n', encoding="utf-8")
    assert config.load_settings() is first
    assert config.load_settings(force_reload=True)["general"]["app_identifier"] == "other"


def test_get_cli_setting_defaults(config_path):
    assert config.get_cli_setting("export", "log_store") == "file"
    assert config.get_cli_setting("export", "missing_key", "fallback") == "fallback"
    assert config.get_cli_setting("no_such_section", "key", 42) == 42


def test_log_file_path_lives_under_data_dir(config_path, tmp_path):
    config_path.parent.mkdir(parents=True)
    data_dir = tmp_path / "data"
    config_path.write_text(f'[logging]\ndata_dir = "{data_dir}"\nlog_filename = "store.log"\n', encoding="utf-8")
    log_file = config.get_cli_log_file_path()
    assert log_file == data_dir.resolve() / "store.log"
    assert log_file.parent.is_dir()


def test_export_temp_dir(config_path, tmp_path):
    assert config.get_export_temp_dir() is None
    config_path.write_text(f'[export]\ntemp_dir = "{tmp_path}"\n', encoding="utf-8")
    config.load_settings(force_reload=True)
    assert config.get_export_temp_dir() == tmp_path.resolve()


def test_deep_merge_does_not_mutate_base():
    base = {"a": {"b": 1, "c": 2}}
    merged = config.deep_merge_dicts(base, {"a": {"b": 10}, "d": 4})
    assert merged == {"a": {"b": 10, "c": 2}, "d": 4}
    assert base == {"a": {"b": 1, "c": 2}}


def test_controller_from_config(config_path, tmp_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text(
        f'[general]\napp_identifier = "myapp"\nprocess_name = "myproc"\n\n'
        f'[logging]\ndata_dir = "{tmp_path / "data"}"\n\n'
        f'[export]\nlog_store = "journal"\ndefault_lookback = "day"\ninclude_system_logs = true\n'
        f'temp_dir = "{tmp_path}"\n',
        encoding="utf-8",
    )
    controller = ExportController.from_config(App())
    assert controller.lookback is LookbackWindow.DAY
    assert controller.include_system_logs is True
    assert controller.query.app_identifier == "myapp"
    assert isinstance(controller.query.store, JournalLogStore)
    assert controller.writer.process_name == "myproc"
    assert controller.writer.temp_dir == tmp_path.resolve()
    assert controller.save_flow is not None


def test_controller_from_default_config_reads_structured_log_file(config_path, tmp_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text(f'[logging]\ndata_dir = "{tmp_path / "data"}"\n', encoding="utf-8")
    controller = ExportController.from_config(App())
    assert isinstance(controller.query.store, JsonLinesLogStore)
    assert controller.query.store.log_file_path.name == "logexport_app.log"
    assert controller.lookback is LookbackWindow.TEN_MINUTES
    assert controller.include_system_logs is False

#
# End of test_config.py
############################################################################################################################
