"""
Release catalogue model.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON
from grouptherapy.database import Base
from grouptherapy.utils.time import utcnow


class Release(Base):
    """Single, EP or album."""

    __tablename__ = "releases"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    artist_name = Column(String(255), nullable=False)
    artist_id = Column(String(36), nullable=True)
    description = Column(Text, nullable=True)
    cover_url = Column(Text, nullable=True)
    type = Column(String(20), nullable=True)  # single, ep, album
    genres = Column(JSON, nullable=True)
    release_date = Column(DateTime(timezone=True), nullable=True)

    # Streaming links
    spotify_url = Column(Text, nullable=True)
    apple_music_url = Column(Text, nullable=True)
    soundcloud_url = Column(Text, nullable=True)

    published = Column(Boolean, nullable=True)
    featured = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
