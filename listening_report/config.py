"""Application configuration and environment settings"""
from datetime import datetime, timezone
from typing import List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    # Store
    DATABASE_URL: str = Field("sqlite:///listening_history.db", description="SQLAlchemy URL of the play-event store")

    # Import
    INPUT_DIR: str = Field("data", description="Directory containing streaming history exports")
    FILE_SUFFIX: str = Field(".json", description="Accepted export file suffix")
    FILE_MARKER: str = Field("Streaming_History_Audio", description="Case-sensitive marker identifying audio history batches")
    SKIP_IMPORTED_FILES: bool = Field(True, description="Skip batch files already present in the store")

    # Report filter
    RANGE_START: datetime = Field(datetime(2024, 1, 1, tzinfo=timezone.utc), description="Inclusive start of the reporting window (UTC)")
    RANGE_END: datetime = Field(datetime(2025, 1, 1, tzinfo=timezone.utc), description="Exclusive end of the reporting window (UTC)")
    MIN_MS_PLAYED: int = Field(30000, ge=0, description="Plays shorter than this are ignored")
    EXCLUDED_TRACK_URIS: List[str] = Field(default_factory=list, description="Track URIs left out of every report")
    INCLUDE_INCOGNITO: bool = Field(False, description="Count plays made in incognito mode")

    # Output
    LEADERBOARD_LIMIT: int = Field(10, gt=0, description="Rows per leaderboard")
    COLOR_OUTPUT: bool = Field(True, description="Colour the top three ranks")
    LOG_LEVEL: str = Field("INFO", description="Root logging level")

    @field_validator('RANGE_START', 'RANGE_END')
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # Naive values are taken to be UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode='after')
    def _check_range(self) -> 'Settings':
        if self.RANGE_END <= self.RANGE_START:
            raise ValueError("RANGE_END must be after RANGE_START")
        return self

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True
    )

settings = Settings()
