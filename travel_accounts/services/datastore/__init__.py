"""
Record store backed by a SQL database.

For self-hosted deployments and local development, in place of the hosted
record store. Only the two tables the engine touches are modelled.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, Type

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from ...exceptions import RecordStoreError
from ..interfaces import Filter
from .models import Base, TABLES

logger = logging.getLogger(__name__)


class SQLRecordStore(object):
    """
    :class:`.interfaces.RecordStore` over SQLAlchemy.

    Each call runs in its own transaction on a worker thread, so the event
    loop is not blocked by the database driver.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessionmaker = sessionmaker(bind=engine, autoflush=False)

    @classmethod
    def from_uri(cls, uri: str) -> 'SQLRecordStore':
        connect_args = {'check_same_thread': False} \
            if uri.startswith('sqlite') else {}
        return cls(create_engine(uri, connect_args=connect_args))

    def create_all(self) -> None:
        """Create all tables in the database."""
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        """Drop all tables in the database."""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """Context manager for database transaction."""
        session = self._sessionmaker()
        try:
            yield session
            session.commit()
        except Exception as e:
            logger.error('Commit failed, rolling back: %s', str(e))
            session.rollback()
            raise
        finally:
            session.close()

    async def delete_where(self, table: str, filter: Filter) -> None:
        await asyncio.to_thread(self._delete_where, table, filter)

    async def update(self, table: str, filter: Filter,
                     fields: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._update, table, filter, fields)

    def _delete_where(self, table: str, filter: Filter) -> None:
        model = _model(table, filter)
        try:
            with self.transaction() as session:
                count = session.query(model).filter_by(**filter) \
                    .delete(synchronize_session=False)
        except SQLAlchemyError as e:
            raise RecordStoreError(str(e)) from e
        logger.debug('Deleted %i rows from %s', count, table)

    def _update(self, table: str, filter: Filter,
                fields: Dict[str, Any]) -> None:
        model = _model(table, filter)
        try:
            with self.transaction() as session:
                count = session.query(model).filter_by(**filter) \
                    .update(fields, synchronize_session=False)
        except SQLAlchemyError as e:
            raise RecordStoreError(str(e)) from e
        logger.debug('Updated %i rows in %s', count, table)


def _model(table: str, filter: Filter) -> Type[Any]:
    if not filter:
        raise ValueError('Refusing to touch a table without a filter')
    try:
        return TABLES[table]
    except KeyError:
        raise RecordStoreError(f'relation "{table}" does not exist')
