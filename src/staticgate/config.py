"""
=============================================================================
CONFIGURATION
=============================================================================

Two configuration records live here:

    StaticOptions   How the static gate behaves (index, hidden, caching...)
    ServerConfig    Where the bundled host listens and how it logs

Both are dataclasses, both can be built from environment variables, and
both validate eagerly so that a bad value stops the process at startup
instead of surfacing on the first request.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m staticgate ./public --index index.html          │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── STATIC_INDEX=index.html python -m staticgate ./public     │
    │                                                                      │
    │   3. Default values (in these dataclasses)                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
IMMUTABILITY
=============================================================================

StaticOptions is frozen. A configured gate is shared by every in-flight
request on every worker thread; a frozen record can be read concurrently
without locks because nobody can write to it.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got: {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got: {raw!r}")


@dataclass(frozen=True)
class StaticOptions:
    """
    Behaviour flags for the static gate.

    =========================================================================
    FIELDS
    =========================================================================

        index                       Filename appended to paths ending in "/".
                                    None disables index substitution. A
                                    dot-file index requires hidden=True.

        hidden                      Serve dot-files ("/.env", "/.git/config").
                                    Off by default.

        maxage                      Seconds for Cache-Control: max-age.

        if_modified_since_support   Answer 304 when the client's copy is
                                    still current.

        format                      Treat "/docs" like "/docs/" when docs is
                                    a directory and index is set.

    =========================================================================
    """

    index: Optional[str] = None
    hidden: bool = False
    maxage: int = 0
    if_modified_since_support: bool = True
    format: bool = True

    @classmethod
    def from_env(cls) -> "StaticOptions":
        """
        Create options from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        STATIC_INDEX               Index filename (default: disabled)
        STATIC_HIDDEN              Serve dot-files (default: false)
        STATIC_MAXAGE              Cache lifetime in seconds (default: 0)
        STATIC_IF_MODIFIED_SINCE   Conditional GET (default: true)
        STATIC_FORMAT              Directory without "/" uses index (default: true)

        =====================================================================
        """
        options = cls(
            index=os.getenv("STATIC_INDEX") or None,
            hidden=_env_bool("STATIC_HIDDEN", False),
            maxage=_env_int("STATIC_MAXAGE", 0),
            if_modified_since_support=_env_bool("STATIC_IF_MODIFIED_SINCE", True),
            format=_env_bool("STATIC_FORMAT", True),
        )
        options.validate()
        return options

    def validate(self) -> None:
        """Fail fast on values that could never work."""
        if isinstance(self.maxage, bool) or not isinstance(self.maxage, int):
            raise ConfigurationError(f"maxage must be an integer, got: {self.maxage!r}")

        if self.maxage < 0:
            raise ConfigurationError(f"maxage must be >= 0, got: {self.maxage}")

        if self.index is not None:
            if not self.index:
                raise ConfigurationError("index cannot be empty (use None to disable)")
            # The index is a filename, not a path: it must not walk anywhere.
            if "/" in self.index or os.sep in self.index or self.index in (".", ".."):
                raise ConfigurationError(f"index must be a plain filename, got: {self.index!r}")
            # The sender appends the index after the hidden check has run.
            if self.index.startswith(".") and not self.hidden:
                raise ConfigurationError(
                    f"index {self.index!r} is a hidden file; set hidden=True to serve it"
                )


@dataclass
class ServerConfig:
    """
    Settings for the bundled threaded host (see server.py).

    The gate itself never reads these; they only decide where the
    demonstration server listens and how it logs.
    """

    host: str = "127.0.0.1"
    port: int = 8080
    mount: str = ""
    """
    Optional URL prefix the static root is mounted under, e.g. "/assets".
    Empty string means the root is served at "/".
    """

    log_level: str = "INFO"
    log_format: str = "text"
    """'text' (Apache-like) or 'json' access log lines."""

    server_name: str = "staticgate/1.0"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        STATIC_HOST       Server host (default: 127.0.0.1)
        STATIC_PORT       Server port (default: 8080)
        STATIC_MOUNT      Mount prefix (default: none)
        STATIC_LOG_LEVEL  Logging level (default: INFO)
        """
        return cls(
            host=os.getenv("STATIC_HOST", "127.0.0.1"),
            port=_env_int("STATIC_PORT", 8080),
            mount=os.getenv("STATIC_MOUNT", ""),
            log_level=os.getenv("STATIC_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        if not self.host.strip():
            raise ConfigurationError("host cannot be empty")

        # Port 0 lets the OS pick a free port (used by tests).
        if not 0 <= self.port < 65536:
            raise ConfigurationError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.mount and not self.mount.startswith("/"):
            raise ConfigurationError(f"mount must start with '/', got: {self.mount!r}")

        if self.log_format not in ("text", "json"):
            raise ConfigurationError(f"log_format must be 'text' or 'json', got: {self.log_format!r}")
