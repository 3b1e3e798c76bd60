"""Configuration loading for github-milestones-mcp.

Configuration is supplied by the host environment (e.g., MCP client config), not by the agent.
The GitHub token is a secret and must never be emitted to agents, logs, or audit events.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from . import __version__
from .errors import SafeError

TOKEN_ENV_VARS: tuple[str, ...] = ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN")
TIMEOUT_ENV_VAR = "GITHUB_MILESTONES_MCP_TIMEOUT_S"

GITHUB_API_BASE_URL = "https://api.github.com"
USER_AGENT = f"github-milestones-mcp/{__version__}"


@dataclass(frozen=True, slots=True)
class LimitsConfig:
    """Network timeouts applied to every GitHub request."""

    total_timeout_s: float = 30.0
    connect_timeout_s: float = 5.0
    read_timeout_s: float = 30.0


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Startup configuration; immutable for the process lifetime."""

    token: str = field(repr=False)
    user_agent: str = USER_AGENT
    api_base_url: str = GITHUB_API_BASE_URL
    limits: LimitsConfig = field(default_factory=LimitsConfig)


def _read_token() -> str | None:
    for name in TOKEN_ENV_VARS:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return None


def _parse_timeout(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        timeout = float(value)
    except ValueError as exc:
        raise SafeError(code="Config", message=f"{TIMEOUT_ENV_VAR} must be a number") from exc
    if timeout <= 0:
        raise SafeError(code="Config", message=f"{TIMEOUT_ENV_VAR} must be greater than zero")
    return timeout


def load_config_from_env() -> ServerConfig:
    """Load and validate configuration from environment variables.

    ``GITHUB_TOKEN`` wins over ``GITHUB_PERSONAL_ACCESS_TOKEN`` when both are set.

    Raises:
        SafeError: If no token is configured or the timeout is invalid.
    """
    token = _read_token()
    if token is None:
        raise SafeError(
            code="Config",
            message=(
                "GitHub token is required. "
                "Set GITHUB_TOKEN or GITHUB_PERSONAL_ACCESS_TOKEN environment variable."
            ),
        )

    limits = LimitsConfig()
    timeout = _parse_timeout(os.getenv(TIMEOUT_ENV_VAR))
    if timeout is not None:
        limits = LimitsConfig(total_timeout_s=timeout, read_timeout_s=timeout)

    return ServerConfig(token=token, limits=limits)
