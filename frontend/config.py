# frontend/config.py
# Settings for the EstateFund web client: which API to call, how long to wait

import os
from typing import Literal, Tuple

_VALID_ENVS = ("local", "staging", "production")

_env = os.environ.get("ENV", "production").strip().lower()
ENV: Literal["local", "staging", "production"] = _env if _env in _VALID_ENVS else "production"  # type: ignore

IS_LOCAL = ENV == "local"
IS_STAGING = ENV == "staging"
IS_PROD = ENV == "production"

# Console output ([API], [SUBMIT], ...) only on a developer machine
IS_DEV = IS_LOCAL

LOCAL_API_URL = "http://127.0.0.1:5000/api"

# Checked in this order; the first non-empty one wins
API_URL_ENV_VARS: Tuple[str, ...] = ("BACKEND_URL", "API_BASE_URL")


def validate_api_url(url: str, env: str) -> None:
    """
    Reject API URLs a deployed client must never use.

    Raises:
        ValueError: empty URL, or plain HTTP / loopback outside local
    """
    if not url:
        raise ValueError("API base URL cannot be empty")

    if env == "local":
        return

    if not url.startswith("https://"):
        raise ValueError(f"{env} requires an HTTPS API URL, got: {url}")
    if "localhost" in url or "127.0.0.1" in url:
        raise ValueError(f"{env} cannot point at localhost, got: {url}")


def get_api_base_url() -> str:
    """
    Resolve the platform API base URL (including /api, no trailing slash).

    Env vars in API_URL_ENV_VARS are tried first. Only a local run may fall
    back to LOCAL_API_URL.

    Raises:
        ValueError: a configured URL fails validate_api_url()
        RuntimeError: staging/production with nothing configured
    """
    for var in API_URL_ENV_VARS:
        configured = os.environ.get(var, "").strip().rstrip("/")
        if configured:
            validate_api_url(configured, ENV)
            return configured

    if ENV == "local":
        return LOCAL_API_URL

    raise RuntimeError(
        f"API URL not configured for {ENV}: set one of {', '.join(API_URL_ENV_VARS)} "
        f"to an HTTPS base URL ending in /api."
    )


# Seconds before an API call is abandoned
REQUEST_TIMEOUT = int(os.environ.get("REQUEST_TIMEOUT", "20"))

# Submission timeline keeps at most this many events
MAX_TIMELINE_EVENTS = 100

if IS_DEV:
    print(f"[CONFIG] Environment: {ENV}")
    print(f"[CONFIG] API base URL sources: {', '.join(API_URL_ENV_VARS)} (fallback {LOCAL_API_URL})")
    print(f"[CONFIG] Request timeout: {REQUEST_TIMEOUT}s")
