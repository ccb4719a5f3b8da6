# artiklo_assistant/utils/log_utils.py
from typing import Any

REDACTED = "***REDACTED***"

SENSITIVE_KEYS = (
    "password", "email", "session", "credentials", "token", "auth", "key",
    "secret", "jwt", "bearer", "authorization", "credit", "payment", "billing",
)


def _is_sensitive(key: str) -> bool:
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def redact(data: Any) -> Any:
    """Returns a copy of ``data`` safe to log: values under sensitive keys are masked."""
    if isinstance(data, dict):
        return {
            key: REDACTED if _is_sensitive(str(key)) else redact(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact(item) for item in data]
    return data
