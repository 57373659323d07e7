"""Durable store handle shared by the ledger components.

The store is built once per process around a SQLAlchemy engine, opened at
startup and closed at shutdown. Each unit of work gets its own ORM session,
so concurrent requests never share connection state.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from washboard.errors import StorageUnavailable

logger = logging.getLogger(__name__)


class Store:
    def __init__(self, engine):
        self.engine = engine
        self._session_factory = None

    @property
    def is_open(self) -> bool:
        return self._session_factory is not None

    def open(self) -> 'Store':
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autoflush=False,
                expire_on_commit=False,
            )
            logger.info(f"[store-open] url={self.engine.url.render_as_string(hide_password=True)}")
        return self

    def close(self) -> None:
        if self._session_factory is None:
            return
        self._session_factory = None
        self.engine.dispose()
        logger.info("[store-close] connection pool disposed")

    @contextmanager
    def transaction(self):
        """Run a unit of work: commit on success, roll back on any error.

        Ledger errors raised inside the block propagate unchanged. Database
        errors are logged and re-raised as ``StorageUnavailable``.
        """
        if self._session_factory is None:
            raise StorageUnavailable('Store is not open')
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception(f"[store-error] transaction rolled back: {exc.__class__.__name__}")
            raise StorageUnavailable() from exc
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> bool:
        with self.transaction() as session:
            return session.execute(text('SELECT 1')).scalar() == 1
