"""
Helpers for reading JSON request bodies and query strings

Malformed values raise ValidationError so the error handlers answer 400.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from flask import request
from rigasset.business.core.errors import ValidationError


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def parse_date(data: dict, key: str):
    value = data.get(key)
    if value in (None, ''):
        return None
    if isinstance(value, date):
        return value
    text_value = str(value).strip()
    try:
        if 'T' in text_value:
            # Full timestamps are accepted and reduced to their calendar date
            if text_value.endswith('Z'):
                text_value = text_value[:-1] + '+00:00'
            return datetime.fromisoformat(text_value).date()
        return date.fromisoformat(text_value)
    except ValueError:
        raise ValidationError(f"{key} must be a date (YYYY-MM-DD)") from None


def parse_int(data: dict, key: str):
    value = data.get(key)
    if value in (None, ''):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer") from None


def parse_decimal(data: dict, key: str):
    value = data.get(key)
    if value in (None, ''):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{key} must be a number") from None


def text(data: dict, key: str):
    value = data.get(key)
    if value is None:
        return None
    return str(value)


def query_flag(name: str) -> bool:
    return request.args.get(name, '').lower() in ('true', '1', 'yes')
