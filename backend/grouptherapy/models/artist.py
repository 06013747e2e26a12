"""
Roster artist model.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON
from grouptherapy.database import Base
from grouptherapy.utils.time import utcnow


class Artist(Base):
    """Label roster entry."""

    __tablename__ = "artists"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    bio = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    spotify_artist_id = Column(String(64), nullable=True)
    social_links = Column(JSON, nullable=True)  # {"instagram": "...", "soundcloud": "..."}
    featured = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
