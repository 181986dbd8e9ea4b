"""
Tests for configuration loading.
"""

import json
import os
from pathlib import Path

import pytest

from ftp_checkout.config import ConfigLoader, GlobalConfig, LogLevel, load_config
from ftp_checkout.exceptions import ConfigError


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, temp_dir):
    """No stray config files or FTP_CHECKOUT_* variables."""
    monkeypatch.chdir(temp_dir)
    monkeypatch.setenv("HOME", str(temp_dir))
    for key in list(os.environ):
        if key.startswith("FTP_CHECKOUT_"):
            monkeypatch.delenv(key)


class TestGlobalConfig:
    """Test configuration models."""

    def test_defaults(self):
        config = GlobalConfig()

        assert config.logging.level == LogLevel.INFO
        assert config.logging.enable_file is False
        assert config.ftp.connection_timeout == 30.0
        assert config.storage.profiles_file.name == "servers.yaml"

    def test_storage_paths_expanded(self):
        config = GlobalConfig(storage={"profiles_file": "~/servers.json"})
        assert config.storage.profiles_file == Path("~/servers.json").expanduser()

    def test_unknown_section_rejected(self):
        with pytest.raises(ValueError):
            GlobalConfig(http={})


class TestConfigLoader:
    """Test file and environment sources."""

    def test_no_sources(self):
        config = ConfigLoader().load_config()
        assert config == GlobalConfig()

    def test_yaml_file(self, temp_dir):
        path = temp_dir / "custom.yaml"
        path.write_text(
            "logging:\n  level: DEBUG\nftp:\n  chunk_size: 4096\n  passive_commands: [epsv, pasv]\n",
            encoding="utf-8",
        )
        config = load_config(path)

        assert config.logging.level == LogLevel.DEBUG
        assert config.ftp.chunk_size == 4096
        assert config.ftp.passive_commands == ["epsv", "pasv"]

    def test_json_file(self, temp_dir):
        path = temp_dir / "custom.json"
        path.write_text(json.dumps({"ftp": {"socket_timeout": 12.5}}), encoding="utf-8")
        assert load_config(path).ftp.socket_timeout == 12.5

    def test_search_path(self, temp_dir):
        (temp_dir / "ftp_checkout.yaml").write_text("ftp:\n  encoding: latin-1\n", encoding="utf-8")
        assert load_config().ftp.encoding == "latin-1"

    def test_home_search_path(self, temp_dir):
        home_dir = temp_dir / ".ftp_checkout"
        home_dir.mkdir()
        (home_dir / "config.json").write_text(
            json.dumps({"ftp": {"chunk_size": 2048}}), encoding="utf-8"
        )
        assert ConfigLoader().load_config().ftp.chunk_size == 2048

    def test_environment_overrides_file(self, temp_dir, monkeypatch):
        path = temp_dir / "custom.yaml"
        path.write_text("ftp:\n  connection_timeout: 10\n  chunk_size: 4096\n", encoding="utf-8")
        monkeypatch.setenv("FTP_CHECKOUT_CONNECTION_TIMEOUT", "2.5")
        monkeypatch.setenv("FTP_CHECKOUT_LOG_LEVEL", "WARNING")

        config = load_config(path)

        assert config.ftp.connection_timeout == 2.5
        assert config.ftp.chunk_size == 4096
        assert config.logging.level == LogLevel.WARNING

    def test_log_file_from_environment_enables_file_logging(self, temp_dir, monkeypatch):
        monkeypatch.setenv("FTP_CHECKOUT_LOG_FILE", str(temp_dir / "checkout.log"))
        config = load_config()

        assert config.logging.enable_file is True
        assert config.logging.file_path == temp_dir / "checkout.log"

    def test_storage_from_environment(self, temp_dir, monkeypatch):
        monkeypatch.setenv("FTP_CHECKOUT_PROFILES_FILE", str(temp_dir / "p.json"))
        assert load_config().storage.profiles_file == temp_dir / "p.json"

    @pytest.mark.parametrize(
        "raw,expected",
        [("true", True), ("Off", False), ("42", 42), ("1.5", 1.5), ("plain", "plain")],
    )
    def test_convert_env_value(self, raw, expected):
        assert ConfigLoader()._convert_env_value(raw) == expected

    def test_missing_explicit_file(self, temp_dir):
        with pytest.raises(ConfigError, match="not found"):
            load_config(temp_dir / "missing.yaml")

    def test_unsupported_format(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigError, match="Unsupported"):
            load_config(path)

    def test_unparseable_file(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("ftp: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_values(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("ftp:\n  passive_commands: [port]\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)
