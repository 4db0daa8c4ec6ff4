"""Domain models for report filtering and leaderboard results"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional

@dataclass(frozen=True)
class ReportFilter:
    """Inclusion predicate applied to every play event before aggregation"""
    range_start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)
    range_end: datetime = datetime(2025, 1, 1, tzinfo=timezone.utc)
    min_ms_played: int = 30000
    excluded_track_uris: FrozenSet[str] = frozenset()
    include_incognito: bool = False

    def __post_init__(self):
        if self.range_end <= self.range_start:
            raise ValueError("range_end must be after range_start")
        # Accept any iterable of URIs but keep the value hashable
        object.__setattr__(self, 'excluded_track_uris', frozenset(self.excluded_track_uris))

    @classmethod
    def from_settings(cls, settings) -> 'ReportFilter':
        """Build the filter from application settings"""
        return cls(
            range_start=settings.RANGE_START,
            range_end=settings.RANGE_END,
            min_ms_played=settings.MIN_MS_PLAYED,
            excluded_track_uris=frozenset(settings.EXCLUDED_TRACK_URIS),
            include_incognito=settings.INCLUDE_INCOGNITO
        )

    @property
    def naive_range(self):
        """The reporting window as naive UTC datetimes, matching stored timestamps"""
        return _naive_utc(self.range_start), _naive_utc(self.range_end)

    def matches(self, event) -> bool:
        """
        Evaluate the predicate against a single event in memory.

        Reports are filtered in SQL by StorageService.find; this is the same
        rule for events that are not in the store, and the reference the
        store query is checked against.
        """
        start, end = self.naive_range
        timestamp = _naive_utc(event.timestamp)
        if event.incognito_mode and not self.include_incognito:
            return False
        if event.ms_played < self.min_ms_played:
            return False
        if event.track_uri is not None and event.track_uri in self.excluded_track_uris:
            return False
        return start <= timestamp < end


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass
class LeaderboardRow:
    """One ranked group in a leaderboard"""
    key: Any
    ms_played: int
    count: int
    minutes: Optional[float] = None
    hours: Optional[float] = None
    fields: Dict[str, Any] = field(default_factory=dict)

    def __getattr__(self, name: str) -> Any:
        # Expose first-in-group fields (track_name, artist_name ...) as attributes
        fields = self.__dict__.get('fields', {})
        if name in fields:
            return fields[name]
        raise AttributeError(name)

@dataclass
class Summary:
    """Total listening time over the filtered set"""
    ms_played: int
    minutes: float
    hours: float
    count: int
