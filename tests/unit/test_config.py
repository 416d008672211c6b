"""
Unit tests for server configuration and the command line.
"""

from dataclasses import FrozenInstanceError

import pytest

from mediaserver import MediaServer
from mediaserver.__main__ import build_parser, main
from mediaserver.config import ConfigError, ServerConfig
from mediaserver.server import create_server


class TestServerConfigFromEnv:
    """Tests for ServerConfig.from_env()."""

    def test_media_dir_from_env(self):
        """Test MEDIA_DIR is picked up."""
        config = ServerConfig.from_env(port=8080, environ={"MEDIA_DIR": "/srv/media"})

        assert config.media_dir == "/srv/media"
        assert config.port == 8080
        assert config.host == "0.0.0.0"
        assert config.log_level == "INFO"

    @pytest.mark.parametrize("environ", [{}, {"MEDIA_DIR": ""}])
    def test_media_dir_required(self, environ: dict):
        """Test a missing or empty MEDIA_DIR is a config error."""
        with pytest.raises(ConfigError, match="Unable to find env variable MEDIA_DIR"):
            ServerConfig.from_env(port=8080, environ=environ)

    def test_log_level_from_env(self):
        """Test MEDIA_SERVER_LOG_LEVEL is used and upper-cased."""
        config = ServerConfig.from_env(
            port=8080,
            environ={"MEDIA_DIR": "/m", "MEDIA_SERVER_LOG_LEVEL": "debug"},
        )

        assert config.log_level == "DEBUG"

    def test_explicit_log_level_wins(self):
        """Test an explicit level overrides the environment."""
        config = ServerConfig.from_env(
            port=8080,
            log_level="error",
            environ={"MEDIA_DIR": "/m", "MEDIA_SERVER_LOG_LEVEL": "DEBUG"},
        )

        assert config.log_level == "ERROR"

    def test_reads_os_environ_by_default(self, monkeypatch):
        """Test os.environ is used when no mapping is given."""
        monkeypatch.setenv("MEDIA_DIR", "/from/env")

        assert ServerConfig.from_env(port=1).media_dir == "/from/env"


class TestServerConfigValidate:
    """Tests for ServerConfig.validate()."""

    def test_valid(self):
        """Test a complete config passes."""
        ServerConfig(port=0, media_dir="/m").validate()

    @pytest.mark.parametrize("overrides", [
        {"port": -1},
        {"port": 65536},
        {"media_dir": ""},
        {"backlog": 0},
        {"buffer_size": 512},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
    ])
    def test_invalid(self, overrides: dict):
        """Test each invalid value is rejected."""
        values = {"port": 8080, "media_dir": "/m", **overrides}

        with pytest.raises(ConfigError):
            ServerConfig(**values).validate()

    def test_frozen(self):
        """Test the config cannot be changed after creation."""
        config = ServerConfig(media_dir="/m")

        with pytest.raises(FrozenInstanceError):
            config.media_dir = "/other"

    def test_server_validates_config(self):
        """Test MediaServer refuses an invalid config before binding."""
        with pytest.raises(ConfigError):
            MediaServer(ServerConfig())

    def test_create_server_from_env(self, monkeypatch, tmp_path):
        """Test create_server() reads MEDIA_DIR when given no config."""
        monkeypatch.setenv("MEDIA_DIR", str(tmp_path))

        server = create_server(port=0)

        assert server.config.media_dir == str(tmp_path)
        assert server.config.port == 0
        assert not server.is_running


class TestCommandLine:
    """Tests for the mediaserver command."""

    def test_port_required(self):
        """Test a missing port is a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args([])

        assert exc_info.value.code == 2

    def test_port_must_be_int(self):
        """Test a non-numeric port is a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            main(["http"])

        assert exc_info.value.code == 2

    def test_arguments(self):
        """Test flags are parsed."""
        args = build_parser().parse_args(["9000", "--host", "127.0.0.1", "-l", "debug"])

        assert args.port == 9000
        assert args.host == "127.0.0.1"
        assert args.log_level == "DEBUG"
        assert args.log_format == "text"

    def test_missing_media_dir(self, monkeypatch, capsys):
        """Test a missing MEDIA_DIR exits 1 without starting."""
        monkeypatch.delenv("MEDIA_DIR", raising=False)

        assert main(["8080"]) == 1
        assert "Unable to find env variable MEDIA_DIR" in capsys.readouterr().err

    def test_invalid_port(self, monkeypatch, capsys):
        """Test an out-of-range port exits 1."""
        monkeypatch.setenv("MEDIA_DIR", "/m")

        assert main(["70000"]) == 1
        assert "Invalid port" in capsys.readouterr().err

    def test_bind_failure(self, monkeypatch, capsys):
        """Test a listener that cannot be created exits 1."""
        monkeypatch.setenv("MEDIA_DIR", "/m")

        def fail(self):
            raise OSError("Address already in use")

        monkeypatch.setattr(MediaServer, "run", fail)

        assert main(["8080"]) == 1
        assert "Unable to create TCP listener" in capsys.readouterr().err

    def test_clean_exit(self, monkeypatch, tmp_path):
        """Test a server that stops normally exits 0 with the parsed config."""
        monkeypatch.setenv("MEDIA_DIR", str(tmp_path))
        seen = {}

        def run(self):
            seen["config"] = self.config

        monkeypatch.setattr(MediaServer, "run", run)

        assert main(["8081", "--log-format", "json"]) == 0
        assert seen["config"].port == 8081
        assert seen["config"].log_format == "json"
        assert seen["config"].media_dir == str(tmp_path)
