"""Leaderboard and summary reports over the filtered play events"""
import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from listening_report.analytics.pipeline import Pipeline, run_pipeline, ms_to_minutes, ms_to_hours
from listening_report.models.report import LeaderboardRow, ReportFilter, Summary
from listening_report.services.storage import StorageService

logger = logging.getLogger(__name__)


def _day(event) -> str:
    # Stored timestamps are naive UTC
    return event.timestamp.strftime('%Y-%m-%d')


TRACK_FIELDS = {
    'track_name': lambda e: e.track_name,
    'artist_name': lambda e: e.album_artist_name,
}

TOP_TRACKS_BY_TIME = Pipeline(
    name='top_tracks_by_time',
    key=lambda e: e.track_uri,
    first_fields={**TRACK_FIELDS, 'album_name': lambda e: e.album_name},
    derive_time=True,
)
TOP_TRACKS_BY_COUNT = Pipeline(
    name='top_tracks_by_count',
    key=lambda e: e.track_uri,
    first_fields=TRACK_FIELDS,
    sort_by='count',
)
TOP_ARTISTS_BY_TIME = Pipeline(
    name='top_artists_by_time',
    key=lambda e: e.album_artist_name,
    derive_time=True,
)
TOP_ARTISTS_BY_COUNT = Pipeline(
    name='top_artists_by_count',
    key=lambda e: e.album_artist_name,
    sort_by='count',
)
TOP_ALBUMS_BY_TIME = Pipeline(
    name='top_albums_by_time',
    key=lambda e: e.album_name,
    first_fields={'artist_name': lambda e: e.album_artist_name},
    derive_time=True,
)
TOP_ALBUMS_BY_COUNT = Pipeline(
    name='top_albums_by_count',
    key=lambda e: e.album_name,
    first_fields={'artist_name': lambda e: e.album_artist_name},
    sort_by='count',
)
TOP_DAYS_BY_TIME = Pipeline(
    name='top_days_by_time',
    key=_day,
    derive_time=True,
)
TOP_DAYS_BY_COUNT = Pipeline(
    name='top_days_by_count',
    key=_day,
    sort_by='count',
)

# Console order
LEADERBOARDS = OrderedDict([
    ('Top Tracks by Time', TOP_TRACKS_BY_TIME),
    ('Top Tracks by Count', TOP_TRACKS_BY_COUNT),
    ('Top Artists by Time', TOP_ARTISTS_BY_TIME),
    ('Top Artists by Count', TOP_ARTISTS_BY_COUNT),
    ('Top Albums by Time', TOP_ALBUMS_BY_TIME),
    ('Top Albums by Count', TOP_ALBUMS_BY_COUNT),
    ('Top Days by Time', TOP_DAYS_BY_TIME),
    ('Top Days by Count', TOP_DAYS_BY_COUNT),
])


class ReportEngine:
    """Computes leaderboards and summary statistics from the play-event store"""

    def __init__(self, storage: StorageService, report_filter: ReportFilter, limit: Optional[int] = 10):
        self.storage = storage
        self.report_filter = report_filter
        self.limit = limit

    def filtered_events(self) -> List:
        """Play events passing the report filter, in store insertion order"""
        events = self.storage.find(self.report_filter)
        logger.debug(f"{len(events)} play events match the report filter")
        return events

    def run(self, pipeline: Pipeline, limit: Optional[int] = None) -> List[LeaderboardRow]:
        """Run a leaderboard pipeline, using the engine's limit unless one is given"""
        if limit is None:
            limit = self.limit
        return run_pipeline(self.filtered_events(), pipeline.with_limit(limit))

    def get_top_tracks_by_time(self) -> List[LeaderboardRow]:
        return self.run(TOP_TRACKS_BY_TIME)

    def get_top_tracks_by_count(self) -> List[LeaderboardRow]:
        return self.run(TOP_TRACKS_BY_COUNT)

    def get_top_artists_by_time(self) -> List[LeaderboardRow]:
        return self.run(TOP_ARTISTS_BY_TIME)

    def get_top_artists_by_count(self) -> List[LeaderboardRow]:
        return self.run(TOP_ARTISTS_BY_COUNT)

    def get_top_albums_by_time(self) -> List[LeaderboardRow]:
        return self.run(TOP_ALBUMS_BY_TIME)

    def get_top_albums_by_count(self) -> List[LeaderboardRow]:
        return self.run(TOP_ALBUMS_BY_COUNT)

    def get_top_days_by_time(self) -> List[LeaderboardRow]:
        return self.run(TOP_DAYS_BY_TIME)

    def get_top_days_by_count(self) -> List[LeaderboardRow]:
        return self.run(TOP_DAYS_BY_COUNT)

    def get_total_mins_played(self) -> Optional[Summary]:
        """Total listening time of the filtered set, or None when nothing matches"""
        events = self.filtered_events()
        if not events:
            return None
        total_ms = sum(event.ms_played for event in events)
        return Summary(
            ms_played=total_ms,
            minutes=ms_to_minutes(total_ms),
            hours=ms_to_hours(total_ms),
            count=len(events)
        )

    def get_total_unique_tracks_played(self) -> Optional[int]:
        """
        Number of distinct track URIs in the filtered set, or None when nothing matches.
        Events without a URI (podcast episodes) count as one distinct value.
        """
        events = self.filtered_events()
        if not events:
            return None
        return len({event.track_uri or None for event in events})

    def get_all_reports(self) -> Dict[str, List[LeaderboardRow]]:
        """Every leaderboard keyed by title, in console order"""
        return OrderedDict((title, self.run(pipeline)) for title, pipeline in LEADERBOARDS.items())
