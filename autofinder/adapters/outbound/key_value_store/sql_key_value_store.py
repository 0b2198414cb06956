"""SQL-backed key/value store adapter."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from autofinder.application.ports.key_value_store import PersistentKeyValueStore
from autofinder.infrastructure.db import get_db_session
from autofinder.infrastructure.logging.logger import logger

from .models import KeyValueEntryModel


class SqlKeyValueStore(PersistentKeyValueStore):
    """Persists one slot as a row of the key_value_entries table."""

    def __init__(self, key: str) -> None:
        """
        Initialize SQL store.

        Args:
            key: Row key of the slot
        """
        self._key = key

    async def load(self) -> Optional[bytes]:
        """
        Load the slot.

        Returns:
            Stored bytes, or None if the row does not exist
        """
        db: Session = get_db_session()
        try:
            model = (
                db.query(KeyValueEntryModel).filter(KeyValueEntryModel.key == self._key).first()
            )
            if model is None:
                return None
            return bytes(model.value)
        except SQLAlchemyError as e:
            logger.error(f"Database error while loading key {self._key}: {str(e)}")
            raise
        finally:
            db.close()

    async def save(self, data: bytes) -> None:
        """
        Insert or update the slot.

        Args:
            data: Bytes to persist
        """
        db: Session = get_db_session()
        try:
            model = (
                db.query(KeyValueEntryModel).filter(KeyValueEntryModel.key == self._key).first()
            )
            now = datetime.now(timezone.utc)

            if model:
                model.value = data
                model.updated_at = now
            else:
                db.add(KeyValueEntryModel(key=self._key, value=data, updated_at=now))

            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error while saving key {self._key}: {str(e)}")
            raise
        finally:
            db.close()
