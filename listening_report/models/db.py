"""SQLAlchemy database models for the play-event store"""
from sqlalchemy import Column, Integer, String, DateTime, BigInteger, Boolean
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class PlayEvent(Base):
    """
    One listening event from a streaming history export.
    Rows are append-only; the autoincrement id records insertion order.
    """
    __tablename__ = 'play_events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Naive UTC
    timestamp = Column(DateTime, nullable=False, index=True)
    platform = Column(String, nullable=True)
    ms_played = Column(Integer, nullable=False)
    conn_country = Column(String, nullable=True)
    ip_address = Column(String, nullable=True)

    track_name = Column(String, nullable=True)
    album_artist_name = Column(String, nullable=True)
    album_name = Column(String, nullable=True)
    track_uri = Column(String, nullable=True, index=True)

    episode_name = Column(String, nullable=True)
    episode_show_name = Column(String, nullable=True)
    episode_uri = Column(String, nullable=True)

    reason_start = Column(String, nullable=True)
    reason_end = Column(String, nullable=True)
    shuffle = Column(Boolean, nullable=False, default=False)
    skipped = Column(Boolean, nullable=False, default=False)
    offline = Column(Boolean, nullable=False, default=False)
    # Epoch seconds
    offline_timestamp = Column(BigInteger, nullable=True)
    incognito_mode = Column(Boolean, nullable=False, default=False)

    source_file = Column(String, nullable=False, index=True)
    # Reserved for multi-user stores
    user_id = Column(String, nullable=False, default='')

    def __repr__(self) -> str:
        return f"<PlayEvent {self.id} {self.track_uri or self.episode_uri} {self.ms_played}ms>"
