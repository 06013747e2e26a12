"""
Music video model.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime
from grouptherapy.database import Base
from grouptherapy.utils.time import utcnow


class Video(Base):
    """YouTube or Vimeo hosted video."""

    __tablename__ = "videos"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(Text, nullable=True)
    video_url = Column(Text, nullable=True)
    youtube_id = Column(String(32), nullable=True)
    vimeo_id = Column(String(32), nullable=True)
    artist_id = Column(String(36), nullable=True)
    artist_name = Column(String(255), nullable=True)
    duration = Column(String(16), nullable=True)  # e.g. "3:45"
    category = Column(String(50), nullable=True)
    featured = Column(Boolean, nullable=True)
    published = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
