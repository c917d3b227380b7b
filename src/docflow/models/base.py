"""Base SQLAlchemy declarative base and shared column types for all models"""

from enum import Enum
from typing import Type

from sqlalchemy import TypeDecorator, JSON, Enum as SQLEnum
from sqlalchemy.orm import declarative_base
from sqlalchemy.dialects.postgresql import JSONB


class PortableJSONB(TypeDecorator):
    """JSON type that works with both PostgreSQL (JSONB) and SQLite (JSON).

    Uses JSONB on PostgreSQL for efficient indexing and querying,
    falls back to JSON on SQLite for testing compatibility.
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


def value_enum(enum_cls: Type[Enum], name: str) -> SQLEnum:
    """Enum column type that persists member values rather than member names.

    DocumentStatus members are upper-case names with lower-case values
    ("UPLOADED" -> "uploaded"); the database must hold the values.
    """
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


Base = declarative_base()
