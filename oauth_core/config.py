"""
Configuration
=============
Runtime settings for OAuth request authentication, read from the environment.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Set

from .errors import ConfigurationError

DEFAULT_SKIP_PATHS = {"/health", "/ready", "/live", "/metrics"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class OAuthConfig:
    """Configuration for OAuth request authentication."""

    # Accepted distance between oauth_timestamp and server time
    timestamp_window_seconds: int = 300

    # How long a seen nonce is remembered
    nonce_ttl_seconds: int = 600

    # Reject requests where an oauth_* name occurs more than once
    reject_duplicate_params: bool = True

    # Scheme/host used for base-string URLs, e.g. behind a TLS proxy
    public_base_url: Optional[str] = None

    # Remote directory service
    directory_url: str = "http://localhost:8000"
    directory_secret: str = ""
    directory_timeout: float = 5.0

    skip_paths: Set[str] = field(default_factory=lambda: set(DEFAULT_SKIP_PATHS))
    service_name: str = "oauth-core"

    def __post_init__(self):
        # A nonce must outlive every timestamp that could still carry it
        if self.nonce_ttl_seconds < 2 * self.timestamp_window_seconds:
            raise ConfigurationError(
                f"nonce_ttl_seconds ({self.nonce_ttl_seconds}) must be at least twice "
                f"timestamp_window_seconds ({self.timestamp_window_seconds})"
            )

    @classmethod
    def from_env(cls) -> "OAuthConfig":
        skip_paths = os.environ.get("OAUTH_SKIP_PATHS")
        return cls(
            timestamp_window_seconds=_env_int("OAUTH_TIMESTAMP_WINDOW_SECONDS", 300),
            nonce_ttl_seconds=_env_int("OAUTH_NONCE_TTL_SECONDS", 600),
            reject_duplicate_params=_env_bool("OAUTH_REJECT_DUPLICATE_PARAMS", True),
            public_base_url=os.environ.get("OAUTH_PUBLIC_BASE_URL") or None,
            directory_url=os.environ.get("OAUTH_DIRECTORY_URL", "http://localhost:8000"),
            directory_secret=os.environ.get("OAUTH_DIRECTORY_SECRET", ""),
            directory_timeout=_env_float("OAUTH_DIRECTORY_TIMEOUT", 5.0),
            skip_paths=(
                {p.strip() for p in skip_paths.split(",") if p.strip()}
                if skip_paths else set(DEFAULT_SKIP_PATHS)
            ),
            service_name=os.environ.get("SERVICE_NAME", "oauth-core"),
        )
