import json
import logging

import pytest

from sniff_console.config import ConfigManager, configure_logging
from sniff_console.models.parameter import Parameter


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("SNIFF_PORT", "SNIFF_BAUDRATE", "SNIFF_TRANSPORT", "SNIFF_COMPARE_MODE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = ConfigManager(load_defaults=False)
    assert config.serial_settings.port == "COM11"
    assert config.serial_settings.baudrate == 115200
    assert config.capture_settings.window_ms == 1000
    assert config.capture_settings.compare_mode == "whole"
    assert config.capture_settings.target_addresses == ["136", "13A", "17C", "1DC"]
    assert config.parameters == []
    assert config.validate() == []


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SNIFF_PORT", "/dev/ttyUSB0")
    monkeypatch.setenv("SNIFF_BAUDRATE", "250000")
    monkeypatch.setenv("SNIFF_COMPARE_MODE", "PAIR")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    config = ConfigManager(load_defaults=False)
    assert config.serial_settings.port == "/dev/ttyUSB0"
    assert config.serial_settings.baudrate == 250000
    assert config.capture_settings.compare_mode == "pair"
    assert config.app_settings.log_level == "DEBUG"


def test_invalid_environment_value_keeps_default(monkeypatch):
    monkeypatch.setenv("SNIFF_BAUDRATE", "fast")
    config = ConfigManager(load_defaults=False)
    assert config.serial_settings.baudrate == 115200


def test_load_from_file(tmp_path, monkeypatch):
    monkeypatch.setenv("SNIFF_PORT", "COM3")
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "serial_settings": {"port": "COM7", "transport": "python-can", "interface": "virtual"},
        "capture_settings": {"compare_mode": "pair", "target_addresses": ["017c", "0x1dc", "nothex"]},
        "parameters": [
            {"name": "rpm", "address": "17C", "byte_indices": [2, 3], "coefficient": 0.25},
            {"name": "broken", "address": "17C"},
        ],
    }))
    config = ConfigManager(str(path))
    assert config.config_file == str(path)
    # file beats environment
    assert config.serial_settings.port == "COM7"
    assert config.serial_settings.transport == "python-can"
    assert config.serial_settings.interface == "virtual"
    assert config.capture_settings.compare_mode == "pair"
    assert config.capture_settings.target_addresses == ["17C", "1DC"]
    assert config.parameters == [Parameter("rpm", "17C", (2, 3), 0.25)]


def test_malformed_file_keeps_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    config = ConfigManager(str(path))
    assert config.serial_settings.port == "COM11"


def test_invalid_interval_in_config_keeps_default(caplog):
    config = ConfigManager(load_defaults=False)
    with caplog.at_level(logging.WARNING):
        config.load_dict({"app_settings": {"refresh_interval": "fast", "poll_interval": None}})
    assert config.app_settings.refresh_interval == 1.0
    assert config.app_settings.poll_interval == 0.1
    assert "refresh_interval" in caplog.text
    assert "poll_interval" in caplog.text


def test_negative_byte_index_parameter_ignored():
    config = ConfigManager(load_defaults=False)
    config.load_dict({"parameters": [
        {"name": "bad", "address": "17C", "byte_indices": [-1]},
        {"name": "rpm", "address": "17C", "byte_indices": [2, 3]},
    ]})
    assert [p.name for p in config.parameters] == ["rpm"]


def test_validate_reports_errors():
    config = ConfigManager(load_defaults=False)
    config.capture_settings.compare_mode = "sideways"
    config.serial_settings.baudrate = 0
    config.serial_settings.transport = "smoke-signals"
    errors = config.validate()
    assert len(errors) == 3


def test_save_and_reload(tmp_path):
    config = ConfigManager(load_defaults=False)
    config.serial_settings.port = "loop://"
    config.parameters = [Parameter("rpm", "17C", (2, 3), 1.0)]
    path = tmp_path / "saved" / "config.json"
    assert config.save_to_file(str(path))
    reloaded = ConfigManager(str(path))
    assert reloaded.serial_settings.port == "loop://"
    assert reloaded.parameters == config.parameters
    assert reloaded.capture_settings.target_addresses == config.capture_settings.target_addresses


def test_configure_logging_level(monkeypatch):
    configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    configure_logging()
    assert logging.getLogger().level == logging.WARNING
    configure_logging("nonsense")
    assert logging.getLogger().level == logging.INFO
