"""SQLAlchemy declarative Base shared by every table."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base; Base.metadata is what alembic and the test database create."""
