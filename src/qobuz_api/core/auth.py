"""
Credential storage for the Qobuz client.

Primary store/retrieve is via `keyring` (macOS Keychain, Windows Credential
Locker, Secret Service, ...). Fallbacks, in lookup order after keyring:

- Environment variables (`QOBUZ_APP_ID`, `QOBUZ_APP_SECRET`, `QOBUZ_USER_ID`,
  `QOBUZ_USER_AUTH_TOKEN`)
- `.secrets.toml` (project-local, then user-scoped)

`QOBUZ_DISABLE_KEYRING=1` bypasses keyring completely; stores then go to the
user secrets file. Keyring entries live under the "qobuz-api" service name.
"""

import logging
import os
from pathlib import Path

import keyring
import keyring.errors
import toml

from .config import LOCAL_SECRETS_FILE, USER_SECRETS_FILE

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "qobuz-api"

CREDENTIAL_KEYS = ("app_id", "app_secret", "user_id", "user_auth_token")
SENSITIVE_KEYS = {"app_secret", "user_auth_token"}

_ENV_OVERRIDES = {
    "app_id": "QOBUZ_APP_ID",
    "app_secret": "QOBUZ_APP_SECRET",
    "user_id": "QOBUZ_USER_ID",
    "user_auth_token": "QOBUZ_USER_AUTH_TOKEN",
}


def _keyring_disabled() -> bool:
    return os.getenv("QOBUZ_DISABLE_KEYRING") == "1"


def _load_secrets() -> dict:
    """Load combined secrets from project-local and user-scoped .secrets.toml."""
    data: dict = {}
    for p in (LOCAL_SECRETS_FILE, USER_SECRETS_FILE):
        path = Path(p)
        if not path.exists():
            continue
        try:
            data.update(toml.loads(path.read_text(encoding="utf-8")) or {})
        except (OSError, toml.TomlDecodeError) as e:
            logger.warning("auth.secrets_unreadable", extra={"path": str(path), "error": str(e)})
    return data


def _write_secret_file(key: str, value: str | None) -> None:
    data = _load_secrets()
    if value is None:
        data.pop(key, None)
    else:
        data[key] = value
    USER_SECRETS_FILE.parent.mkdir(parents=True, exist_ok=True)
    USER_SECRETS_FILE.write_text(toml.dumps(data), encoding="utf-8")


def store_credentials(key: str, value: str) -> None:
    """Store a credential, preferring the system keyring.

    Args:
        key: One of `CREDENTIAL_KEYS`.
        value: The value to store.
    """
    if key not in CREDENTIAL_KEYS:
        raise ValueError(f"Unknown credential key: {key}")

    if _keyring_disabled():
        _write_secret_file(key, value)
        return

    try:
        keyring.set_password(KEYRING_SERVICE, key, value)
    except keyring.errors.KeyringError as e:
        _write_secret_file(key, value)
        if key in SENSITIVE_KEYS:
            logger.warning(
                "auth.keyring_store_failed", extra={"key": key, "error": str(e)}
            )


def get_credentials(key: str) -> str | None:
    """Retrieve a stored credential.

    Returns:
        The stored value, or None when no source has it.
    """
    if not _keyring_disabled():
        try:
            v = keyring.get_password(KEYRING_SERVICE, key)
            if v:
                return v
        except keyring.errors.KeyringError as e:
            if key in SENSITIVE_KEYS:
                logger.warning("auth.keyring_unavailable", extra={"key": key, "error": str(e)})

    env = _ENV_OVERRIDES.get(key)
    if env and os.getenv(env):
        return os.getenv(env)

    v = _load_secrets().get(key)
    return str(v) if v else None


def clear_credentials() -> list[str]:
    """Delete every stored credential. Returns the keys that were removed.

    Missing entries are not an error; keyring backends disagree on how they
    report them, so existence is checked first.
    """
    removed: list[str] = []
    for key in CREDENTIAL_KEYS:
        if not _keyring_disabled():
            try:
                if keyring.get_password(KEYRING_SERVICE, key) is not None:
                    keyring.delete_password(KEYRING_SERVICE, key)
                    removed.append(key)
            except keyring.errors.KeyringError as e:
                logger.warning("auth.keyring_delete_failed", extra={"key": key, "error": str(e)})
        if key in _load_secrets():
            _write_secret_file(key, None)
            if key not in removed:
                removed.append(key)
    return removed
