from __future__ import annotations

import json
import logging
from typing import Any

_MAX_LOG_VALUE_CHARS = 200


def sanitize_log_value(value: Any, *, max_chars: int = _MAX_LOG_VALUE_CHARS) -> Any:
    """Coerce ``value`` into something JSON-safe and bounded in size."""
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, BaseException):
        value = f"{type(value).__name__}: {value}"
    elif isinstance(value, (list, tuple)):
        return [sanitize_log_value(item, max_chars=max_chars) for item in value]
    elif isinstance(value, dict):
        return {
            str(key): sanitize_log_value(item, max_chars=max_chars)
            for key, item in value.items()
        }
    text = value if isinstance(value, str) else str(value)
    text = text.replace("\n", "\\n")
    if len(text) > max_chars:
        return text[: max_chars - 3] + "..."
    return text


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event}
    for key, value in fields.items():
        payload[key] = sanitize_log_value(value)
    try:
        message = json.dumps(payload, sort_keys=False)
    except (TypeError, ValueError):
        message = f"{event} {payload!r}"
    logger.log(level, message)
