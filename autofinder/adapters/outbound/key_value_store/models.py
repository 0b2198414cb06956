"""SQLAlchemy ORM models for persisted key/value slots."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, LargeBinary, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class KeyValueEntryModel(Base):
    """SQLAlchemy model for key_value_entries table."""

    __tablename__ = "key_value_entries"

    key = Column(String, primary_key=True, index=True)
    value = Column(LargeBinary, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
