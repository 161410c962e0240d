# frontend/observability.py
# Submission event timeline: what happened, in order, with secrets redacted

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

try:
    from frontend.config import MAX_TIMELINE_EVENTS
except ModuleNotFoundError:
    from config import MAX_TIMELINE_EVENTS

# Sensitive keys that must be redacted
SENSITIVE_KEYS = {
    "auth_token",
    "token",
    "authorization",
    "password",
    "secret",
    "api_key",
    "cookie",
}


def redact_value(key: str, value: Any) -> Any:
    """
    Redact sensitive values.
    - If key is sensitive: return "[REDACTED]"
    - If key is raw file content: return its size instead
    - Otherwise: return actual value
    """
    key_lower = key.lower()

    if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
        return "[REDACTED]"

    # Never keep uploaded bytes in the timeline
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"

    return value


def now_iso() -> str:
    """Return current timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def track_event(
    events: List[Dict[str, Any]],
    event_name: str,
    details: Optional[Dict[str, Any]] = None,
    level: str = "info",
) -> Dict[str, Any]:
    """
    Append an event to a timeline list (in place).

    Args:
        events: Timeline list owned by the caller
        event_name: Short descriptive name (e.g., "asset_upload_failed")
        details: Optional dict of additional context (will be redacted)
        level: "info", "warning" or "error"

    Returns:
        The appended event
    """
    event: Dict[str, Any] = {
        "ts": now_iso(),
        "name": event_name,
        "level": level,
    }

    if details:
        event["details"] = {k: redact_value(k, v) for k, v in details.items()}

    events.append(event)

    # Keep only the most recent events to prevent memory bloat
    if len(events) > MAX_TIMELINE_EVENTS:
        del events[: len(events) - MAX_TIMELINE_EVENTS]

    return event


def get_recent_events(events: List[Dict[str, Any]], limit: int = 30) -> List[Dict[str, Any]]:
    """Most recent events first."""
    return list(reversed(events[-limit:]))


def events_at_level(events: List[Dict[str, Any]], level: str) -> List[Dict[str, Any]]:
    return [e for e in events if e.get("level") == level]


def export_timeline_json(events: List[Dict[str, Any]]) -> str:
    """Diagnostic dump for support tickets."""
    export = {
        "timestamp": now_iso(),
        "events": events,
    }
    return json.dumps(export, indent=2, default=str)
