"""
Curated playlist model.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from grouptherapy.database import Base
from grouptherapy.utils.time import utcnow


class Playlist(Base):
    """Spotify playlist curated by the label."""

    __tablename__ = "playlists"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    cover_url = Column(Text, nullable=True)
    spotify_url = Column(Text, nullable=True)
    spotify_playlist_id = Column(String(64), nullable=True)
    track_count = Column(Integer, nullable=True)
    featured = Column(Boolean, nullable=True)
    published = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
