"""
Relay configuration.

Settings are read from the environment once, when the app is created, and
passed to request handlers through a FastAPI dependency. A ``.env`` file is
loaded first when present; real environment variables take precedence.

Environment variables
---------------------
RESEND_API_KEY          Resend API key (required, secret).
FROM_EMAIL              Verified sender address in Resend (required).
TO_EMAIL                Inbox that receives uploads (required).
ALLOWED_ORIGINS         Comma-separated origin allow-list, e.g.
                        https://example.com,http://localhost:8080
                        Falls back to the legacy ALLOWED_ORIGIN when unset.
                        Empty means any origin is accepted.
MAX_FILE_BYTES          Maximum upload size in bytes (default 10485760).
RESEND_API_URL          Send-email endpoint (default https://api.resend.com/emails).
SEND_TIMEOUT_SECONDS    Timeout for the outbound send call (default 30).
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from fastapi import Request
from pydantic import BaseModel

DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_RESEND_API_URL = "https://api.resend.com/emails"
DEFAULT_SEND_TIMEOUT_SECONDS = 30.0


class ConfigError(ValueError):
    """Raised when the environment does not describe a usable relay."""


def parse_allowed_origins(raw: Optional[str]) -> tuple[str, ...]:
    """
    Split a comma-separated origin list.

    Entries are trimmed and empty entries dropped. Duplicates are removed
    while preserving order.
    """
    if not raw:
        return ()

    seen: set = set()
    origins: list[str] = []
    for entry in raw.split(","):
        origin = entry.strip()
        if origin and origin not in seen:
            seen.add(origin)
            origins.append(origin)
    return tuple(origins)


class Settings(BaseModel):
    """Immutable relay settings shared by every request."""
    model_config = {"frozen": True}

    resend_api_key: str
    from_email: str
    to_email: str
    allowed_origins: tuple[str, ...] = ()
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    resend_api_url: str = DEFAULT_RESEND_API_URL
    send_timeout_seconds: float = DEFAULT_SEND_TIMEOUT_SECONDS

    @property
    def allows_any_origin(self) -> bool:
        return not self.allowed_origins

    def __repr__(self) -> str:
        # Keep the API key out of tracebacks and debug output
        return (
            f"Settings(from_email={self.from_email!r}, to_email={self.to_email!r}, "
            f"allowed_origins={self.allowed_origins!r}, max_file_bytes={self.max_file_bytes})"
        )

    def __str__(self) -> str:
        return self.__repr__()


def _parse_positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _parse_positive_float(name: str, raw: str) -> float:
    try:
        value = float(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from an environment mapping (``os.environ`` by default).

    Raises:
        ConfigError: if a required variable is missing or a numeric value
                     cannot be parsed.
    """
    env = os.environ if environ is None else environ

    required = {
        "RESEND_API_KEY": (env.get("RESEND_API_KEY") or "").strip(),
        "FROM_EMAIL": (env.get("FROM_EMAIL") or "").strip(),
        "TO_EMAIL": (env.get("TO_EMAIL") or "").strip(),
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ConfigError(
            f"{', '.join(missing)} must be set in environment variables"
        )

    raw_origins = env.get("ALLOWED_ORIGINS") or env.get("ALLOWED_ORIGIN") or ""

    max_file_bytes = DEFAULT_MAX_FILE_BYTES
    if (env.get("MAX_FILE_BYTES") or "").strip():
        max_file_bytes = _parse_positive_int("MAX_FILE_BYTES", env["MAX_FILE_BYTES"])

    send_timeout = DEFAULT_SEND_TIMEOUT_SECONDS
    if (env.get("SEND_TIMEOUT_SECONDS") or "").strip():
        send_timeout = _parse_positive_float(
            "SEND_TIMEOUT_SECONDS", env["SEND_TIMEOUT_SECONDS"]
        )

    return Settings(
        resend_api_key=required["RESEND_API_KEY"],
        from_email=required["FROM_EMAIL"],
        to_email=required["TO_EMAIL"],
        allowed_origins=parse_allowed_origins(raw_origins),
        max_file_bytes=max_file_bytes,
        resend_api_url=(env.get("RESEND_API_URL") or "").strip() or DEFAULT_RESEND_API_URL,
        send_timeout_seconds=send_timeout,
    )


def load_settings() -> Settings:
    """Load ``.env`` (without overriding real variables) and read Settings."""
    load_dotenv()
    return settings_from_env()


def get_settings(request: Request) -> Settings:
    """FastAPI dependency: the Settings the running app was created with."""
    return request.app.state.settings
