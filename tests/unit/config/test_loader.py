"""Unit tests for rpcwire configuration loading."""

import logging

import pytest

from rpcwire.config import (
    DEFAULT_TIMEOUT,
    ClientConfig,
    ConfigLoader,
    resolve_env_vars,
)
from rpcwire.config.loader import CONFIG_PATH_ENV
from rpcwire.errors import RPCWireError
from rpcwire.types import LogFormat, LogLevel

FULL_CONFIG = """
endpoint: https://node.example.com/rpc
timeout: 5
headers:
  X-Api-Key: abc
auth:
  username: alice
  password: s3cret
ids:
  auto_increment: false
  start: 100
logging:
  level: debug
  format: json
"""


class TestResolveEnvVars:
    """Tests for environment variable interpolation."""

    def test_plain_reference(self, monkeypatch):
        """Test ${VAR} is replaced by its value."""
        monkeypatch.setenv("RPC_HOST", "node.local")
        assert resolve_env_vars("http://${RPC_HOST}:8545") == "http://node.local:8545"

    def test_default(self, monkeypatch):
        """Test ${VAR:-default} falls back when unset."""
        monkeypatch.delenv("RPC_PORT", raising=False)
        assert resolve_env_vars("${RPC_PORT:-8545}") == "8545"

    def test_missing_required(self, monkeypatch):
        """Test an unset ${VAR} raises CONFIG_INVALID."""
        monkeypatch.delenv("RPC_TOKEN", raising=False)
        with pytest.raises(RPCWireError) as exc_info:
            resolve_env_vars("${RPC_TOKEN}")
        assert exc_info.value.code == "CONFIG_INVALID"
        assert "RPC_TOKEN" in exc_info.value.detail

    def test_custom_error(self, monkeypatch):
        """Test ${VAR:?message} raises with the given message."""
        monkeypatch.delenv("RPC_TOKEN", raising=False)
        with pytest.raises(RPCWireError) as exc_info:
            resolve_env_vars("${RPC_TOKEN:?token is required}")
        assert exc_info.value.detail == "token is required"


class TestConfigLoaderLoad:
    """Tests for ConfigLoader.load."""

    def test_full_file(self, tmp_path):
        """Test every section is read from YAML."""
        path = tmp_path / "rpcwire.yaml"
        path.write_text(FULL_CONFIG)

        loader = ConfigLoader()
        config = loader.load(path)

        assert config.endpoint == "https://node.example.com/rpc"
        assert config.timeout == 5.0
        assert isinstance(config.timeout, float)
        assert config.headers == {"X-Api-Key": "abc"}
        assert config.auth.username == "alice"
        assert config.auth.password == "s3cret"
        assert config.ids.auto_increment is False
        assert config.ids.start == 100
        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.format == LogFormat.JSON
        assert loader.config_path == path
        assert loader.get() is config

    def test_env_interpolation(self, tmp_path, monkeypatch):
        """Test environment references are resolved in values."""
        monkeypatch.setenv("RPC_PASSWORD", "from-env")
        path = tmp_path / "rpcwire.yaml"
        path.write_text("endpoint: http://localhost\nauth:\n  username: bob\n  password: ${RPC_PASSWORD}\n")

        config = ConfigLoader().load(path)
        assert config.auth.password == "from-env"

    def test_missing_file_uses_defaults(self, tmp_path):
        """Test a missing file yields the default configuration."""
        config = ConfigLoader().load(tmp_path / "absent.yaml")
        assert config == ClientConfig()
        assert config.timeout == DEFAULT_TIMEOUT

    def test_missing_file_without_defaults(self, tmp_path):
        """Test a missing file raises when defaults are disabled."""
        with pytest.raises(RPCWireError) as exc_info:
            ConfigLoader().load(tmp_path / "absent.yaml", use_defaults=False)
        assert "not found" in exc_info.value.detail

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML raises CONFIG_INVALID."""
        path = tmp_path / "rpcwire.yaml"
        path.write_text("endpoint: [unclosed\n")
        with pytest.raises(RPCWireError) as exc_info:
            ConfigLoader().load(path)
        assert exc_info.value.code == "CONFIG_INVALID"

    def test_non_mapping(self, tmp_path):
        """Test a YAML list at top level is rejected."""
        path = tmp_path / "rpcwire.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(RPCWireError):
            ConfigLoader().load(path)

    def test_empty_file(self, tmp_path):
        """Test an empty file loads as defaults."""
        path = tmp_path / "rpcwire.yaml"
        path.write_text("")
        assert ConfigLoader().load(path) == ClientConfig()

    def test_path_from_environment(self, tmp_path, monkeypatch):
        """Test RPCWIRE_CONFIG_PATH selects the file."""
        path = tmp_path / "custom.yaml"
        path.write_text("endpoint: http://env.example\n")
        monkeypatch.setenv(CONFIG_PATH_ENV, str(path))

        assert ConfigLoader().load().endpoint == "http://env.example"

    def test_local_file(self, tmp_path, monkeypatch):
        """Test ./rpcwire.yaml is picked up from the working directory."""
        monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
        monkeypatch.chdir(tmp_path)
        (tmp_path / "rpcwire.yaml").write_text("endpoint: http://local.example\n")

        assert ConfigLoader().load().endpoint == "http://local.example"

    def test_get_before_load(self):
        """Test get raises before anything is loaded."""
        with pytest.raises(RPCWireError):
            ConfigLoader().get()


class TestConfigLoaderValidate:
    """Tests for ConfigLoader.validate."""

    def test_valid(self):
        """Test a complete mapping has no issues."""
        result = ConfigLoader().validate(
            {"endpoint": "http://x", "timeout": 1.5, "ids": {"start": 0}}
        )
        assert result.valid
        assert result.errors == []

    def test_unknown_key_warns(self, caplog):
        """Test unknown keys are warnings, not errors."""
        loader = ConfigLoader()
        result = loader.validate({"endpiont": "http://x"})
        assert result.valid
        assert [w.path for w in result.warnings] == ["endpiont"]

        with caplog.at_level(logging.WARNING, logger="rpcwire.config"):
            loader.load_from_dict({"endpiont": "http://x"})
        assert "Unknown configuration key" in caplog.text

    @pytest.mark.parametrize(
        ("data", "path"),
        [
            ({"endpoint": "ftp://x"}, "endpoint"),
            ({"endpoint": 5}, "endpoint"),
            ({"timeout": 0}, "timeout"),
            ({"timeout": "fast"}, "timeout"),
            ({"timeout": True}, "timeout"),
            ({"headers": ["X"]}, "headers"),
            ({"headers": {"X-Num": 1}}, "headers.X-Num"),
            ({"auth": {"username": 1}}, "auth.username"),
            ({"ids": {"start": -1}}, "ids.start"),
            ({"ids": {"auto_increment": "yes"}}, "ids.auto_increment"),
            ({"logging": {"level": "LOUD"}}, "logging.level"),
            ({"logging": {"format": "xml"}}, "logging.format"),
        ],
    )
    def test_invalid_values(self, data, path):
        """Test each invalid value is reported at its path."""
        result = ConfigLoader().validate(data)
        assert not result.valid
        assert [e.path for e in result.errors] == [path]

    def test_load_from_dict_lists_errors(self):
        """Test loading an invalid mapping reports every problem."""
        with pytest.raises(RPCWireError) as exc_info:
            ConfigLoader().load_from_dict({"timeout": -1, "ids": {"start": -2}})
        detail = exc_info.value.detail
        assert "timeout" in detail
        assert "ids.start" in detail
