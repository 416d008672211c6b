"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Everything the server needs to start, in one frozen dataclass.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── mediaserver 8080 --log-level DEBUG                        │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── MEDIA_DIR=/srv/media          (required)                  │
    │      └── MEDIA_SERVER_LOG_LEVEL=DEBUG  (optional)                  │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The port has no environment fallback: it is a required positional argument.
The media directory has no command-line flag: it only comes from MEDIA_DIR.

=============================================================================
WHY FROZEN?
=============================================================================

The config (and in particular media_dir) is read by every worker thread.
Freezing it means it can be handed out without copies or locks: no thread
can change what another one sees. To "change" it, build a new one with
dataclasses.replace().

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


MEDIA_DIR_ENV = "MEDIA_DIR"
LOG_LEVEL_ENV = "MEDIA_SERVER_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


class ConfigError(ValueError):
    """Startup configuration is missing or invalid."""


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the media server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK
    - host, port, backlog, buffer_size

    CONTENT
    - media_dir

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    Address to bind. All interfaces by default.
    """

    port: int = 8080
    """
    Port to listen on. 0 asks the OS for a free port (used by tests);
    the real port is then available from MediaServer.address.
    """

    backlog: int = 128
    """
    Maximum number of connections queued by the kernel before accept().
    """

    buffer_size: int = 8192
    """
    Read buffer for the per-connection line reader, in bytes.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    media_dir: str = ""
    """
    Directory whose regular files are listed and served. Not recursive.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    DEBUG also dumps every parsed request and every response head.
    """

    log_format: str = "text"
    """
    Access log format: 'text' (Apache-style) or 'json'.
    """

    server_name: str = "mediaserver/1.0"
    """
    Shown in the startup log line.
    """

    @classmethod
    def from_env(
        cls,
        port: int,
        host: str = "0.0.0.0",
        log_level: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ServerConfig":
        """
        Build a config from a port plus the environment.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        MEDIA_DIR                Media directory (required)
        MEDIA_SERVER_LOG_LEVEL   Logging level when `log_level` is not given
                                 (default: INFO)

        =====================================================================

        Args:
            port: Port to listen on.
            host: Address to bind.
            log_level: Explicit log level; overrides the environment.
            environ: Environment mapping, os.environ by default.

        Raises:
            ConfigError: If MEDIA_DIR is missing or empty.
        """
        env = os.environ if environ is None else environ

        media_dir = env.get(MEDIA_DIR_ENV, "")
        if not media_dir:
            raise ConfigError(f"Unable to find env variable {MEDIA_DIR_ENV}")

        return cls(
            host=host,
            port=port,
            media_dir=media_dir,
            log_level=(log_level or env.get(LOG_LEVEL_ENV) or "INFO").upper(),
        )

    def validate(self) -> None:
        """
        Check the values, failing fast at startup.

        A media directory that does not exist (yet) is not an error here:
        every request re-reads it, and until it appears requests get 500.

        Raises:
            ConfigError: On the first invalid value.
        """
        if not 0 <= self.port < 65536:
            raise ConfigError(f"Invalid port: {self.port}. Must be 0-65535.")

        if not self.media_dir:
            raise ConfigError("media_dir must be set")

        if self.backlog < 1:
            raise ConfigError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ConfigError("buffer_size must be >= 1024")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ConfigError(f"Unknown log format: {self.log_format}")
