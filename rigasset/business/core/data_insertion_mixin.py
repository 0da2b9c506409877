"""
Dictionary conversion for SQLAlchemy models

``from_dict`` builds rows from seed files and API payloads, ``to_dict``
produces the JSON bodies the routes return, and
``find_or_create_from_dict`` makes the build step re-runnable.
"""

from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import inspect
from rigasset import db
from rigasset.logger import get_logger

logger = get_logger("rigasset.domain.core.data_insertion")

AUDIT_FIELDS = frozenset({'created_at', 'updated_at', 'created_by_id', 'updated_by_id'})


def _json_value(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


class DataInsertionMixin:

    @classmethod
    def column_keys(cls):
        return [column.key for column in inspect(cls).columns]

    @classmethod
    def from_dict(cls, data_dict, user_id=None, skip_fields=None):
        """
        Unsaved instance from the keys of ``data_dict`` that are columns.

        Unknown keys are ignored. Null timestamps are left to the column
        defaults. ``user_id`` fills created_by_id/updated_by_id where the
        model has them.
        """
        skip = set(skip_fields or ())
        columns = set(cls.column_keys())
        values = {
            key: value for key, value in data_dict.items()
            if key in columns and key not in skip
            and not (key in ('created_at', 'updated_at') and value is None)
        }
        instance = cls(**values)

        if user_id is not None:
            if 'created_by_id' in columns and not instance.created_by_id:
                instance.created_by_id = user_id
            if 'updated_by_id' in columns:
                instance.updated_by_id = user_id
        return instance

    def to_dict(self, include_audit_fields=True, exclude=None):
        """Column values with dates as ISO strings and numerics as floats"""
        exclude = set(exclude or ())
        if not include_audit_fields:
            exclude |= AUDIT_FIELDS
        return {
            key: _json_value(getattr(self, key))
            for key in self.column_keys()
            if key not in exclude
        }

    @classmethod
    def find_or_create_from_dict(cls, data_dict, user_id=None, lookup_fields=None):
        """
        Existing row matching ``lookup_fields`` (default: the unique columns
        present in ``data_dict``), or a new one added to the session.
        Nothing is committed.

        Returns:
            tuple: (instance, created)
        """
        if lookup_fields is None:
            lookup_fields = [c.key for c in inspect(cls).columns if c.unique and c.key in data_dict]

        lookup = {field: data_dict[field] for field in lookup_fields if field in data_dict}
        if lookup:
            existing = db.session.query(cls).filter_by(**lookup).first()
            if existing is not None:
                logger.debug(f"Found existing {cls.__name__}: {existing}")
                return existing, False

        instance = cls.from_dict(data_dict, user_id)
        db.session.add(instance)
        return instance, True
