"""
Configuration management using Dynaconf and Pydantic.

Settings are loaded from files (`settings.toml`, `.secrets.toml`, both
project-local and user-scoped) and `QOBUZ_`-prefixed environment variables by
Dynaconf, then validated into a typed `QobuzSettings` object by Pydantic.

`get_settings` returns a process-wide singleton so every command and the API
client see the same configuration.
"""

import json
import os
from pathlib import Path
from typing import Optional

import toml
from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from rich.console import Console

from ..metadata.config import MetadataConfig

console = Console()

# User-scoped config directory (XDG-style)
USER_CONFIG_DIR = Path.home() / ".config" / "qobuz-api"
USER_SETTINGS_FILE = USER_CONFIG_DIR / "settings.toml"
USER_SECRETS_FILE = USER_CONFIG_DIR / ".secrets.toml"

# Project-local settings (CWD) to support isolated runs and tests
LOCAL_SETTINGS_FILE = Path("settings.toml")
LOCAL_SECRETS_FILE = Path(".secrets.toml")

settings_loader = Dynaconf(
    envvar_prefix="QOBUZ",
    settings_files=[
        "settings.toml",
        ".secrets.toml",
        str(USER_SETTINGS_FILE),
        str(USER_SECRETS_FILE),
    ],
    load_dotenv=True,
)

# 27 = FLAC 24-bit up to 192 kHz, the API falls back to the best available.
DEFAULT_FORMAT_ID = "27"


class QobuzSettings(BaseModel):
    """A Pydantic model that defines and validates all application settings."""

    download_path: Path = Field(default_factory=lambda: Path.home() / "Music" / "Qobuz")
    app_id: Optional[str] = None
    app_secret: Optional[str] = None
    format_id: str = DEFAULT_FORMAT_ID
    requests_per_second: int = Field(default=8, ge=1)
    http_timeout: float = Field(default=30.0, gt=0)
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    @field_validator("app_id", "app_secret", "format_id", mode="before")
    @classmethod
    def _numbers_as_text(cls, value):
        # Dynaconf parses QOBUZ_APP_ID=123 as an int
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


_settings_instance: Optional[QobuzSettings] = None


def _lower_keys(data: dict) -> dict:
    # Dynaconf upper-cases top-level keys
    return {str(k).lower(): v for k, v in data.items()}


def get_settings() -> QobuzSettings:
    """Get the application settings as a singleton Pydantic model.

    Honors QOBUZ_SETTINGS_PATH when set: a JSON file path used for persistence in tests.
    """
    global _settings_instance
    if _settings_instance is None:
        config_dict: dict = {}

        # 1) Explicit JSON settings file
        env_settings_path = os.getenv("QOBUZ_SETTINGS_PATH")
        if env_settings_path:
            p = Path(env_settings_path)
            if p.exists():
                try:
                    config_dict.update(json.loads(p.read_text(encoding="utf-8")) or {})
                except ValueError:
                    console.print(f"[yellow]Warning:[/yellow] ignoring malformed settings file {p}")

        # 2) Dynaconf loader (project + user scope + QOBUZ_* env)
        config_dict.update(_lower_keys(settings_loader.as_dict() or {}))

        # 3) Project-local settings.toml overlay
        ignore_local = os.getenv("QOBUZ_IGNORE_LOCAL_SETTINGS") == "1"
        if not ignore_local and LOCAL_SETTINGS_FILE.exists():
            try:
                local_data = toml.loads(LOCAL_SETTINGS_FILE.read_text(encoding="utf-8")) or {}
                config_dict.update(local_data)
            except toml.TomlDecodeError:
                console.print("[yellow]Warning:[/yellow] ignoring malformed settings.toml")

        # 4) Explicit environment overrides
        env_dl = os.getenv("QOBUZ_DOWNLOAD_PATH")
        env_fmt = os.getenv("QOBUZ_FORMAT_ID")
        if env_dl:
            config_dict["download_path"] = env_dl
        if env_fmt:
            config_dict["format_id"] = env_fmt

        try:
            _settings_instance = QobuzSettings(**config_dict)
        except ValidationError as e:
            console.print(f"[red]Configuration error:[/red]\n{e}")
            raise

    return _settings_instance


def _settings_payload(settings: QobuzSettings) -> dict:
    # Secrets are never written to the plain settings files.
    return {
        "download_path": str(settings.download_path),
        "format_id": settings.format_id,
        "requests_per_second": settings.requests_per_second,
        "http_timeout": settings.http_timeout,
        "metadata": settings.metadata.model_dump(),
    }


def save_settings(new_settings: QobuzSettings) -> None:
    """Persist settings.

    With QOBUZ_SETTINGS_PATH set, the JSON file is the only target (used by
    tests). Otherwise the project-local and user-level TOML files are written.
    """
    global _settings_instance
    data = _settings_payload(new_settings)

    env_settings_path = os.getenv("QOBUZ_SETTINGS_PATH")
    if env_settings_path:
        p = Path(env_settings_path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(data), encoding="utf-8")
    else:
        LOCAL_SETTINGS_FILE.write_text(toml.dumps(data), encoding="utf-8")
        try:
            USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
            USER_SETTINGS_FILE.write_text(toml.dumps(data), encoding="utf-8")
        except OSError as e:
            console.print(f"[yellow]Warning:[/yellow] could not write {USER_SETTINGS_FILE}: {e}")

    _settings_instance = new_settings


def create_default_settings() -> QobuzSettings:
    """Create a default settings instance, useful for resets."""
    return QobuzSettings()


def reset_settings() -> None:
    """Reset in-memory settings (do not delete on-disk settings).

    The Dynaconf loader is re-read too, so changed QOBUZ_* variables apply.
    """
    global _settings_instance
    _settings_instance = None
    settings_loader.reload()
