"""
Configuration from the environment, a .env file, and the OS keychain.
"""

import os
import logging

from dotenv import load_dotenv

from bunny_client.session import BunnyClient, ClientOptions, get_bunny_client

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.bunny.net"

KEYRING_SERVICE = "bunny-client"
KEYRING_KEY = "access-key"


def load_env(path: str | None = None) -> bool:
    """Load variables from a .env file (default: ./.env) without overriding the environment."""
    return load_dotenv(path or os.path.join(os.getcwd(), ".env"))


def _keyring_access_key() -> str:
    try:
        import keyring

        return keyring.get_password(KEYRING_SERVICE, KEYRING_KEY) or ""
    except Exception as e:
        logger.warning(f"Keyring lookup failed: {e}")
        return ""


def get_access_key(force: str | None = None) -> str:
    """Look up the bunny.net access key.

    Args:
        force: Restrict the lookup to 'env' or 'keyring' (default: env, then keyring).

    Returns:
        The access key, or "" if none is configured.
    """
    if force == "keyring":
        return _keyring_access_key()

    key = os.environ.get("BUNNY_ACCESS_KEY", "")
    if key or force == "env":
        return key

    key = _keyring_access_key()
    if key:
        logger.debug("Using access key from OS keychain")
    return key


def save_access_key(access_key: str) -> None:
    """Store the access key in the OS keychain."""
    import keyring

    keyring.set_password(KEYRING_SERVICE, KEYRING_KEY, access_key)
    logger.debug("Access key saved to OS keychain")


def _env_number(name: str, cast):
    raw = os.environ.get(name, "").strip()
    return cast(raw) if raw else None


def options_from_env() -> ClientOptions:
    """Read client options from BUNNY_* variables. Unset variables keep the defaults."""
    return ClientOptions(
        request_timeout_ms=_env_number("BUNNY_REQUEST_TIMEOUT", int),
        retry_limit=_env_number("BUNNY_RETRY_LIMIT", int),
        backoff_factor=_env_number("BUNNY_BACKOFF_FACTOR", float),
    )


def client_from_env(base_url: str = DEFAULT_BASE_URL, env_file: str | None = None) -> BunnyClient:
    """Build a client from .env, environment variables and the OS keychain."""
    load_env(env_file)
    return get_bunny_client(get_access_key(), base_url, options_from_env())
