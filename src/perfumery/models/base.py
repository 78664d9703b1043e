"""
Declarative base and shared columns for the perfumery tables.

Every table gets an integer primary key, a UUID string for external
references, and UTC creation/modification timestamps.
"""

import uuid as uuid_lib
from datetime import date
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Integer, String, inspect
from sqlalchemy.orm import declarative_base

from perfumery.utils.datetime_utils import utc_now

Base = declarative_base()


def _new_uuid() -> str:
    return str(uuid_lib.uuid4())


class BaseModel(Base):
    """
    Abstract parent of all perfumery tables.

    Attributes:
        id: Integer primary key
        uuid: Stable external identifier (string, for SQLite)
        created_at: UTC time the row was inserted
        updated_at: UTC time the row was last written
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid, index=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Column values keyed by column name; dates and datetimes as ISO strings."""
        return {
            attr.columns[0].name: _json_value(getattr(self, attr.key))
            for attr in inspect(self).mapper.column_attrs
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, uuid='{self.uuid}')"


def _json_value(value: Any) -> Any:
    # datetime is a subclass of date
    if isinstance(value, date):
        return value.isoformat()
    return value
