"""Tests for the parametric leaderboard pipeline and rounding helpers."""

from datetime import datetime
from types import SimpleNamespace

import pytest

from listening_report.analytics.pipeline import (
    Pipeline,
    ms_to_hours,
    ms_to_minutes,
    round_half_up,
    run_pipeline,
)


def event(key, ms, name=None):
    return SimpleNamespace(key=key, ms_played=ms, name=name or key, timestamp=datetime(2024, 1, 1))


BY_TIME = Pipeline(name="by_time", key=lambda e: e.key, first_fields={"name": lambda e: e.name}, derive_time=True)
BY_COUNT = Pipeline(name="by_count", key=lambda e: e.key, sort_by="count")

# ---------- Rounding ----------


class TestRounding:
    def test_minutes(self):
        assert ms_to_minutes(300000) == 5.0
        assert ms_to_minutes(50000) == 0.83

    def test_hours(self):
        assert ms_to_hours(3600000) == 1.0
        assert ms_to_hours(300000) == 0.08

    def test_half_rounds_away_from_zero(self):
        # 0.125 and 0.005 are exact halves
        assert round_half_up(125, 1000) == 0.13
        assert round_half_up(5, 1000) == 0.01
        assert round_half_up(3, 1000) == 0.0

    def test_zero(self):
        assert ms_to_minutes(0) == 0.0


# ---------- Grouping ----------


class TestRunPipeline:
    def test_sums_and_counts_per_group(self):
        rows = run_pipeline([event("a", 200000), event("a", 100000), event("b", 50000)], BY_TIME)
        assert [r.key for r in rows] == ["a", "b"]
        assert rows[0].ms_played == 300000
        assert rows[0].count == 2
        assert rows[0].minutes == 5.0
        assert rows[1].minutes == 0.83

    def test_sort_by_count(self):
        rows = run_pipeline([event("b", 900000), event("a", 1), event("a", 1)], BY_COUNT)
        assert [(r.key, r.count) for r in rows] == [("a", 2), ("b", 1)]

    def test_count_pipeline_has_no_time_fields(self):
        rows = run_pipeline([event("a", 60000)], BY_COUNT)
        assert rows[0].minutes is None
        assert rows[0].hours is None

    def test_first_fields_come_from_first_event(self):
        rows = run_pipeline([event("a", 1, name="first"), event("a", 1000, name="second")], BY_TIME)
        assert rows[0].name == "first"
        assert rows[0].fields == {"name": "first"}

    def test_ties_keep_group_creation_order(self):
        events = [event(k, 1000) for k in ["c", "a", "b"]]
        rows = run_pipeline(events, BY_TIME)
        assert [r.key for r in rows] == ["c", "a", "b"]

    def test_limit(self):
        events = [event(str(i), i * 1000) for i in range(25)]
        rows = run_pipeline(events, BY_TIME)
        assert len(rows) == 10
        assert rows[0].key == "24"
        assert rows[-1].key == "15"

    def test_unbounded(self):
        events = [event(str(i), 1000) for i in range(25)]
        assert len(run_pipeline(events, BY_TIME.with_limit(None))) == 25

    def test_null_and_empty_keys_share_one_group(self):
        rows = run_pipeline([event(None, 1000, name="ep"), event("", 1000), event("a", 1500)], BY_TIME)
        assert [(r.key, r.count, r.ms_played) for r in rows] == [(None, 2, 2000), ("a", 1, 1500)]
        assert rows[0].name == "ep"

    def test_groups_partition_the_input(self):
        events = [event(None, 100000), event("a", 200000), event("b", 30000), event(None, 5)]
        rows = run_pipeline(events, BY_TIME.with_limit(None))
        assert sum(r.ms_played for r in rows) == sum(e.ms_played for e in events)
        assert sum(r.count for r in rows) == len(events)

    def test_empty_input(self):
        assert run_pipeline([], BY_TIME) == []

    def test_unknown_attribute_raises(self):
        row = run_pipeline([event("a", 1000)], BY_TIME)[0]
        with pytest.raises(AttributeError):
            row.album_name


class TestPipelineValidation:
    def test_rejects_unknown_sort_key(self):
        with pytest.raises(ValueError):
            Pipeline(name="bad", key=lambda e: e.key, sort_by="minutes")

    def test_rejects_negative_limit(self):
        with pytest.raises(ValueError):
            Pipeline(name="bad", key=lambda e: e.key, limit=-1)

    def test_with_limit_keeps_other_fields(self):
        copy = BY_COUNT.with_limit(3)
        assert copy.limit == 3
        assert copy.sort_by == "count"
        assert copy.name == "by_count"
