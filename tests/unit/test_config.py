"""
Unit tests for configuration and the command line.
"""

import pytest

from minihttp import __version__
from minihttp.__main__ import build_parser, main
from minihttp.config import ServerConfig


ENV_VARS = (
    "HTTP_HOST", "HTTP_PORT", "HTTP_DIRECTORY",
    "HTTP_TIMEOUT", "HTTP_LOG_LEVEL", "HTTP_LOG_FORMAT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestServerConfig:
    """Tests for ServerConfig defaults and validation."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 4221
        assert config.timeout is None
        assert config.directory == ""
        assert config.max_line_size is None
        assert config.max_body_size is None
        config.validate()

    @pytest.mark.parametrize("overrides", [
        {"port": -1},
        {"port": 65536},
        {"backlog": 0},
        {"timeout": 0},
        {"timeout": -1.5},
        {"max_line_size": 8},
        {"max_body_size": -1},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            ServerConfig(**overrides).validate()

    def test_port_zero_allowed(self):
        ServerConfig(port=0).validate()

    def test_log_level_case_insensitive(self):
        ServerConfig(log_level="debug").validate()


class TestFromEnv:
    """Tests for ServerConfig.from_env()."""

    def test_unset_gives_defaults(self, clean_env):
        assert ServerConfig.from_env() == ServerConfig()

    def test_reads_variables(self, clean_env):
        clean_env.setenv("HTTP_HOST", "0.0.0.0")
        clean_env.setenv("HTTP_PORT", "8080")
        clean_env.setenv("HTTP_DIRECTORY", "/tmp/data/")
        clean_env.setenv("HTTP_TIMEOUT", "2.5")
        clean_env.setenv("HTTP_LOG_LEVEL", "DEBUG")
        clean_env.setenv("HTTP_LOG_FORMAT", "json")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.directory == "/tmp/data/"
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_bad_port(self, clean_env):
        clean_env.setenv("HTTP_PORT", "http")

        with pytest.raises(ValueError):
            ServerConfig.from_env()


class TestCommandLine:
    """Tests for the argument parser and main()."""

    def test_parser_defaults(self):
        args = build_parser(ServerConfig()).parse_args([])

        assert args.host == "127.0.0.1"
        assert args.port == 4221
        assert args.directory == ""
        assert args.log_level == "INFO"
        assert args.log_format == "text"

    def test_parser_options(self):
        args = build_parser(ServerConfig()).parse_args(
            ["--directory", "/tmp/data/", "-p", "9000", "-l", "debug", "--log-format", "json"]
        )

        assert args.directory == "/tmp/data/"
        assert args.port == 9000
        assert args.log_level == "DEBUG"
        assert args.log_format == "json"

    def test_env_supplies_defaults(self, clean_env):
        clean_env.setenv("HTTP_DIRECTORY", "/srv/files/")

        args = build_parser(ServerConfig.from_env()).parse_args([])

        assert args.directory == "/srv/files/"

    def test_version(self, clean_env, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == f"minihttp {__version__}"

    def test_invalid_env_exits_1(self, clean_env, capsys):
        clean_env.setenv("HTTP_PORT", "not-a-port")

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert "Error" in capsys.readouterr().err

    def test_invalid_port_exits_1(self, clean_env, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--port", "70000"])

        assert exc_info.value.code == 1
        assert "Invalid port" in capsys.readouterr().err
