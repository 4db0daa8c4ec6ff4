"""Database storage service for play events"""
import logging
from typing import Iterable, List, Optional, Set

from sqlalchemy import func, and_, or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from listening_report.models.db import PlayEvent
from listening_report.models.play_event import PlayEventRecord
from listening_report.models.report import ReportFilter

logger = logging.getLogger(__name__)

class StorageService:
    """Handles all play-event store operations"""

    def __init__(self, session: Session):
        self.session = session

    def append(self, records: Iterable[PlayEventRecord], source_file: str, user_id: str = '') -> int:
        """Append a batch of records stamped with their source file. Returns the number inserted."""
        try:
            rows = [PlayEvent(**record.to_row(source_file, user_id)) for record in records]
            self.session.add_all(rows)
            self.session.commit()
            logger.info(f"Stored {len(rows)} play events from {source_file}")
            return len(rows)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error storing play events from {source_file}: {e}")
            raise

    def imported_files(self) -> Set[str]:
        """Names of batch files already present in the store"""
        try:
            return {name for (name,) in self.session.query(PlayEvent.source_file).distinct()}
        except SQLAlchemyError as e:
            logger.error(f"Database error listing imported files: {e}")
            raise

    def count(self) -> int:
        """Total number of stored play events"""
        return self.session.query(func.count(PlayEvent.id)).scalar() or 0

    def find(self, report_filter: Optional[ReportFilter] = None) -> List[PlayEvent]:
        """
        Return play events matching the filter in insertion order.

        Args:
            report_filter: inclusion predicate; None returns every stored event
        """
        query = self.session.query(PlayEvent)
        if report_filter is not None:
            range_start, range_end = report_filter.naive_range
            conditions = [
                PlayEvent.ms_played >= report_filter.min_ms_played,
                PlayEvent.timestamp >= range_start,
                PlayEvent.timestamp < range_end,
            ]
            if not report_filter.include_incognito:
                conditions.append(PlayEvent.incognito_mode.is_(False))
            if report_filter.excluded_track_uris:
                # NOT IN drops NULL uris in SQL, so keep episodes explicitly
                conditions.append(or_(
                    PlayEvent.track_uri.is_(None),
                    PlayEvent.track_uri.not_in(sorted(report_filter.excluded_track_uris))
                ))
            query = query.filter(and_(*conditions))
        try:
            return query.order_by(PlayEvent.id.asc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Database error querying play events: {e}")
            raise
