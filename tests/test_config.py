"""
Tests for YAML configuration loading.
"""

import logging
from pathlib import Path

import pytest

from vshell.core import config as config_module
from vshell.core.config import Config, get_config
from vshell.core.logs import configure_logging


def test_missing_file_gives_defaults(tmp_path):
    config = Config.load(tmp_path / "nope.yaml")

    assert config.read.timeout == 20.0
    assert config.read.buffer_size == 64 * 1024
    assert config.transport.connect_timeout == 15
    assert config.transport.verify_host_keys is False
    assert config.logging.level == "INFO"


def test_load_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "transport:\n"
        "  connect_timeout: 5\n"
        "  verify_host_keys: true\n"
        "  known_hosts_file: ~/.ssh/lab_known_hosts\n"
        "  legacy_mode: true\n"
        "read:\n"
        "  timeout: 2.5\n"
        "  buffer_size: 1024\n"
        "logging:\n"
        "  level: DEBUG\n"
    )

    config = Config.load(path)

    assert config.transport.connect_timeout == 5
    assert config.transport.verify_host_keys is True
    assert config.transport.known_hosts_file == Path("~/.ssh/lab_known_hosts").expanduser()
    assert config.transport.legacy_mode is True
    assert config.transport.request_pty is True
    assert config.read.timeout == 2.5
    assert config.read.buffer_size == 1024
    assert config.read.encoding == "utf-8"
    assert config.logging.level == "DEBUG"


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("read: [unclosed\n")

    with pytest.raises(ValueError):
        Config.load(path)


def test_env_var_selects_file(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("read:\n  timeout: 7\n")
    monkeypatch.setenv("VSHELL_CONFIG", str(path))

    assert get_config(reload=True).read.timeout == 7.0


def test_get_config_is_cached():
    assert get_config() is get_config()


def test_saved_default_config_loads_back(tmp_path):
    config = Config(config_file=tmp_path / "sub" / "config.yaml")
    config.save_default_config()

    loaded = Config.load(config.config_file)

    assert loaded.read == config.read
    assert loaded.transport.connect_timeout == config.transport.connect_timeout
    assert loaded.transport.verify_host_keys == config.transport.verify_host_keys
    assert loaded.transport.width == config.transport.width
    assert loaded.transport.height == config.transport.height
    assert loaded.transport.known_hosts_file is None
    assert loaded.logging.file is None

    text = config.config_file.read_text()
    assert "# known_hosts_file:" in text
    assert "# file:" in text


def test_configure_logging_uses_config_level(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    log_file = tmp_path / "logs" / "vshell.log"
    path.write_text(f"logging:\n  level: DEBUG\n  file: {log_file}\n")
    monkeypatch.setattr(config_module, "_config", Config.load(path))

    package_logger = logging.getLogger("vshell")
    monkeypatch.setattr(package_logger, "handlers", [])
    monkeypatch.setattr(package_logger, "level", logging.NOTSET)

    configure_logging()

    assert package_logger.level == logging.DEBUG
    assert isinstance(package_logger.handlers[0], logging.FileHandler)
    assert log_file.parent.exists()
    package_logger.handlers[0].close()
