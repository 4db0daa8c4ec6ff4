"""Parametric group/aggregate/sort pipeline used by every leaderboard"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from listening_report.models.report import LeaderboardRow

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60000
MS_PER_HOUR = 3600000

SORT_KEYS = ('ms_played', 'count')


def round_half_up(numerator: int, denominator: int, places: int = 2) -> float:
    """
    Divide two integers and round half away from zero.

    Works on Decimal so the result does not pick up binary float error
    before rounding, e.g. 50000 / 60000 -> 0.83 and 30000 / 3600000 -> 0.01.
    """
    quantum = Decimal(1).scaleb(-places)
    value = (Decimal(numerator) / Decimal(denominator)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(value)


def ms_to_minutes(ms: int) -> float:
    return round_half_up(ms, MS_PER_MINUTE)


def ms_to_hours(ms: int) -> float:
    return round_half_up(ms, MS_PER_HOUR)


@dataclass(frozen=True)
class Pipeline:
    """
    Description of one leaderboard: how events are grouped, which values
    are kept from the first event of each group, how groups are ranked and
    how many are returned.

    Attributes:
        name: Leaderboard name, used in logs
        key: Maps an event to its group key. Missing values (None or '')
            all fall into a single None group, so the groups partition
            the input.
        first_fields: Output name -> accessor, read from the first event
            seen in the group (store insertion order)
        derive_time: Add rounded minutes and hours to each row
        sort_by: 'ms_played' or 'count', always descending
        limit: Maximum rows returned; None means unbounded
    """
    name: str
    key: Callable[[Any], Any]
    first_fields: Mapping[str, Callable[[Any], Any]] = field(default_factory=dict)
    derive_time: bool = False
    sort_by: str = 'ms_played'
    limit: Optional[int] = 10

    def __post_init__(self):
        if self.sort_by not in SORT_KEYS:
            raise ValueError(f"sort_by must be one of {SORT_KEYS}, got {self.sort_by!r}")
        if self.limit is not None and self.limit < 0:
            raise ValueError("limit must be non-negative")

    def with_limit(self, limit: Optional[int]) -> 'Pipeline':
        """Copy of this pipeline with a different row limit"""
        return Pipeline(
            name=self.name,
            key=self.key,
            first_fields=self.first_fields,
            derive_time=self.derive_time,
            sort_by=self.sort_by,
            limit=limit
        )


def run_pipeline(events: Iterable[Any], pipeline: Pipeline) -> List[LeaderboardRow]:
    """
    Group events, aggregate each group, rank and truncate.

    Groups are created in order of first appearance and the sort is stable,
    so ties keep that order.
    """
    groups: Dict[Any, LeaderboardRow] = {}
    for event in events:
        key = pipeline.key(event)
        if key == '':
            key = None
        row = groups.get(key)
        if row is None:
            row = LeaderboardRow(
                key=key,
                ms_played=0,
                count=0,
                fields={name: accessor(event) for name, accessor in pipeline.first_fields.items()}
            )
            groups[key] = row
        row.ms_played += event.ms_played
        row.count += 1

    rows = sorted(groups.values(), key=lambda r: getattr(r, pipeline.sort_by), reverse=True)
    if pipeline.limit is not None:
        rows = rows[:pipeline.limit]

    if pipeline.derive_time:
        for row in rows:
            row.minutes = ms_to_minutes(row.ms_played)
            row.hours = ms_to_hours(row.ms_played)

    logger.debug(f"{pipeline.name}: {len(groups)} groups, returning {len(rows)}")
    return rows
