"""Structlog processors added to the pipeline outside of tests.

Each public function is a factory returning a callable with the structlog
processor signature ``(logger, method_name, event_dict) -> event_dict``.
"""

from typing import Any, Callable

EventDict = dict[str, Any]
Processor = Callable[[Any, str, EventDict], EventDict]

# Matched as case-insensitive substrings of the key. Message text and
# recipient addresses are user data; the rest are credentials.
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "credential",
        "cookie",
        "webhook_url",
        "email_address",
        "content",
        "body",
    }
)


def _stamp(**fields: str) -> Processor:
    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.update(fields)
        return event_dict

    return processor


def add_app_info(app_name: str, app_version: str = "unknown") -> Processor:
    """Stamp every entry with ``app_name`` and ``app_version`` (the git SHA)."""
    return _stamp(app_name=app_name, app_version=app_version)


def add_environment_info(environment: str) -> Processor:
    return _stamp(environment=environment)


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: frozenset[str] | None = None,
) -> Processor:
    """Replace the value of any key that looks sensitive.

    ``None`` values are left alone so that "field was absent" stays
    visible in the logs.

    Example:
        >>> mask = mask_sensitive_data()
        >>> mask(None, "info", {"event": "message_saved", "content": "hi"})
        {'event': 'message_saved', 'content': '***REDACTED***'}
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def is_sensitive(key: str) -> bool:
        lowered = key.lower()
        return any(pattern in lowered for pattern in patterns)

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        masked = dict(event_dict)
        for key, value in event_dict.items():
            if value is not None and is_sensitive(key):
                masked[key] = mask_value
        return masked

    return processor


def truncate_large_values(max_length: int = 500) -> Processor:
    """Cut string values longer than ``max_length``, noting the full size."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        oversized = [
            key
            for key, value in event_dict.items()
            if isinstance(value, str) and len(value) > max_length
        ]
        for key in oversized:
            value = event_dict[key]
            event_dict[key] = (
                f"{value[:max_length]}...[truncated, {len(value)} chars total]"
            )
        return event_dict

    return processor
