# backend/config.py
# Environment-aware configuration for the EstateFund decision backend

import os
from typing import Dict, List, Literal

# Environment detection
ENV: Literal["dev", "staging", "prod"] = os.environ.get("ENV", "dev")  # type: ignore
IS_DEV = (ENV == "dev")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "prod")

# Platform transaction fee (percent). Overridable per call, never via env.
DEFAULT_FEE_PERCENTAGE = 2.5

# Subscription status widget: warn when the plan ends within this many days
EXPIRING_SOON_DAYS = int(os.environ.get("EXPIRING_SOON_DAYS", "7"))

# Web client origins. CORS_ORIGINS (comma-separated) replaces the default
# deployed origin in staging/prod; local dev servers are always allowed.
_LOCAL_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
_DEPLOYED_ORIGINS: Dict[str, str] = {
    "staging": "https://staging.estatefund.africa",
    "prod": "https://app.estatefund.africa",
}


def _cors_origins() -> List[str]:
    origins = list(_LOCAL_ORIGINS)
    if ENV in _DEPLOYED_ORIGINS:
        extra = [o.strip() for o in os.environ.get("CORS_ORIGINS", "").split(",") if o.strip()]
        origins.extend(extra or [_DEPLOYED_ORIGINS[ENV]])
    return origins


CORS_ORIGINS = _cors_origins()

print(f"[CONFIG] Environment: {ENV}")
print(f"[CONFIG] Default fee: {DEFAULT_FEE_PERCENTAGE}%")
print(f"[CONFIG] Expiring-soon window: {EXPIRING_SOON_DAYS} days")
print(f"[CONFIG] CORS origins: {len(CORS_ORIGINS)}")
