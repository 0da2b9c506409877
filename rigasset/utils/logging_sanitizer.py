"""
Redaction of request payloads before they are logged

Key matching ignores case, underscores and hyphens, so ``apiToken``,
``api_token`` and ``API-TOKEN`` are all treated as the same field.
"""

from typing import Any, Dict

REDACTED = '[REDACTED]'

SENSITIVE_FIELDS = frozenset({
    'password',
    'secret',
    'secretkey',
    'token',
    'apitoken',
    'apikey',
    'authtoken',
    'accesstoken',
    'refreshtoken',
    'authorization',
    'sessionid',
})


def _normalize(key) -> str:
    return str(key).lower().replace('_', '').replace('-', '')


def _sanitize_value(value, redact_text: str):
    if isinstance(value, dict):
        return sanitize_dict(value, redact_text)
    if isinstance(value, list):
        return [_sanitize_value(item, redact_text) for item in value]
    return value


def sanitize_dict(data: Dict[str, Any], redact_text: str = REDACTED) -> Dict[str, Any]:
    """
    Copy of ``data`` with sensitive values replaced by ``redact_text``,
    recursing into nested objects and lists.

    Example:
        >>> sanitize_dict({'transferId': 'TR-001', 'apiToken': 'abc'})
        {'transferId': 'TR-001', 'apiToken': '[REDACTED]'}
    """
    if not data:
        return data

    return {
        key: redact_text if _normalize(key) in SENSITIVE_FIELDS else _sanitize_value(value, redact_text)
        for key, value in data.items()
    }
