"""Validated model of one record in a streaming history export"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class PlayEventRecord(BaseModel):
    """
    A single play event as it appears in an extended streaming history export.

    Field aliases follow the export's own keys (``ts``, ``ms_played``,
    ``master_metadata_track_name`` ...). Unknown keys such as the audiobook
    fields are ignored. Booleans that the export leaves null read as False.
    """
    model_config = ConfigDict(populate_by_name=True, extra='ignore', frozen=True)

    timestamp: datetime = Field(alias='ts')
    platform: Optional[str] = None
    ms_played: int = Field(ge=0)
    conn_country: Optional[str] = None
    ip_address: Optional[str] = Field(None, validation_alias=AliasChoices('ip_addr', 'ip_addr_decrypted', 'ip_address'))

    track_name: Optional[str] = Field(None, alias='master_metadata_track_name')
    album_artist_name: Optional[str] = Field(None, alias='master_metadata_album_artist_name')
    album_name: Optional[str] = Field(None, alias='master_metadata_album_album_name')
    track_uri: Optional[str] = Field(None, alias='spotify_track_uri')

    episode_name: Optional[str] = None
    episode_show_name: Optional[str] = None
    episode_uri: Optional[str] = Field(None, alias='spotify_episode_uri')

    reason_start: Optional[str] = None
    reason_end: Optional[str] = None
    shuffle: bool = False
    skipped: bool = False
    offline: bool = False
    offline_timestamp: Optional[int] = None
    incognito_mode: bool = False

    @field_validator('timestamp')
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_validator('shuffle', 'skipped', 'offline', 'incognito_mode', mode='before')
    @classmethod
    def _null_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    def to_row(self, source_file: str, user_id: str = '') -> Dict[str, Any]:
        """Column values for a PlayEvent row stamped with its source file"""
        row = self.model_dump(by_alias=False)
        # The store keeps naive UTC
        row['timestamp'] = self.timestamp.replace(tzinfo=None)
        row['source_file'] = source_file
        row['user_id'] = user_id
        return row
