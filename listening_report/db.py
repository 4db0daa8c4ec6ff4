"""Play-event store connection lifecycle"""
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

from listening_report.models.db import Base
from listening_report.config import settings

logger = logging.getLogger(__name__)

class Database:
    """Opens the play-event store once per run and hands out the run's session"""

    def __init__(self):
        self._engine = None
        self._session_factory = None

    @property
    def is_open(self) -> bool:
        return self._session_factory is not None

    def init(self, url: Optional[str] = None) -> None:
        """
        Connect to the store and create the play_events table if missing.

        Args:
            url: SQLAlchemy URL, defaults to settings.DATABASE_URL
        """
        url = url or settings.DATABASE_URL
        try:
            self._engine = create_engine(url)
            Base.metadata.create_all(self._engine)
            self._session_factory = sessionmaker(bind=self._engine)
            logger.info(f"Play-event store ready at {self._engine.url.render_as_string(hide_password=True)}")
        except SQLAlchemyError as e:
            logger.error(f"Could not open play-event store: {e}")
            raise

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Session for one import-and-report run.

        Appends are committed batch by batch by StorageService; anything
        left pending is rolled back if the run fails.
        """
        if not self.is_open:
            raise RuntimeError("Play-event store not opened. Call init() first.")

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Release the engine's connections at the end of the run"""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None

# Global store instance
db = Database()
