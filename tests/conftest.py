"""Shared fixtures: an in-memory store and export record builders."""

import json

import pytest

from listening_report.db import Database
from listening_report.models.play_event import PlayEventRecord
from listening_report.services.storage import StorageService


@pytest.fixture
def database():
    database = Database()
    database.init("sqlite://")
    yield database
    database.dispose()


@pytest.fixture
def session(database):
    with database.session() as session:
        yield session


@pytest.fixture
def storage(session):
    return StorageService(session)


def make_raw(
    uri="spotify:track:a",
    ms=200000,
    ts="2024-03-01T12:00:00Z",
    track="Track A",
    artist="Artist A",
    album="Album A",
    incognito=False,
    **extra,
):
    """A record shaped like one entry of Streaming_History_Audio_*.json."""
    raw = {
        "ts": ts,
        "platform": "android",
        "ms_played": ms,
        "conn_country": "US",
        "ip_addr": "127.0.0.1",
        "master_metadata_track_name": track,
        "master_metadata_album_artist_name": artist,
        "master_metadata_album_album_name": album,
        "spotify_track_uri": uri,
        "episode_name": None,
        "episode_show_name": None,
        "spotify_episode_uri": None,
        "reason_start": "trackdone",
        "reason_end": "trackdone",
        "shuffle": False,
        "skipped": None,
        "offline": False,
        "offline_timestamp": 1709294400,
        "incognito_mode": incognito,
    }
    raw.update(extra)
    return raw


@pytest.fixture
def add_events(storage):
    """Append raw records to the store as one batch."""

    def _add(*raws, source_file="Streaming_History_Audio_2024_0.json"):
        records = [PlayEventRecord.model_validate(raw) for raw in raws]
        return storage.append(records, source_file=source_file)

    return _add


@pytest.fixture
def write_batch(tmp_path):
    """Write a batch file into a temporary input directory."""

    def _write(name, content):
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write


