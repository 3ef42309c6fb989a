"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets adapters (HTTP collaborator, permission host) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "ankidroid-bridge"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "ankidroid-bridge"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "ankidroid-bridge"
    return Path.home() / ".config" / "ankidroid-bridge"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        try:
            existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError):
            existing = {}

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# ankidroid-bridge user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class BridgeSettings(BaseSettings):
    """Central bridge configuration.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without leaking into the core.
    - A single configuration contract for the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="ANKIDROID_BRIDGE_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    collaborator_url: str = Field(
        default="http://127.0.0.1:8765",
        min_length=8,
        description="Base URL of the companion service exposing the AnkiDroid API.",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout per request to the companion service (seconds).",
    )
    user_agent: str = Field(
        default="ankidroid-bridge/0.1",
        min_length=1,
        description="User-Agent sent to the companion service.",
    )

    force_platform_support: bool = Field(
        default=False,
        description="Treat the host as capable even when it is not Android (remote bridging).",
    )
    request_permission_on_demand: bool = Field(
        default=True,
        description="Prompt for the API permission when a call finds it missing.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Log level for the diagnostic side channel (DEBUG, INFO, WARNING...).",
    )
