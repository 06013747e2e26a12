"""
Write-only analytics models.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from grouptherapy.database import Base
from grouptherapy.utils.time import utcnow


class PageView(Base):
    """Page view beacon from the public site."""

    __tablename__ = "page_views"

    id = Column(Integer, primary_key=True, index=True)
    path = Column(String(512), nullable=False)
    referrer = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    viewed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class PlayCount(Base):
    """One play of a release in the site player."""

    __tablename__ = "play_counts"

    id = Column(Integer, primary_key=True, index=True)
    release_id = Column(String(36), nullable=True, index=True)
    track_title = Column(String(255), nullable=True)
    played_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
