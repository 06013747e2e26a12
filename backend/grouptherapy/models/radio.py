"""
Radio schedule, station settings and listener models.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from grouptherapy.database import Base
from grouptherapy.utils.time import utcnow


class RadioShow(Base):
    """Weekly radio programme slot."""

    __tablename__ = "radio_shows"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)

    host_name = Column(String(255), nullable=False)
    host_bio = Column(Text, nullable=True)
    host_image_url = Column(Text, nullable=True)
    cover_url = Column(Text, nullable=True)
    stream_url = Column(Text, nullable=True)
    recorded_url = Column(Text, nullable=True)

    # Schedule
    day_of_week = Column(Integer, nullable=True)  # 0 = Sunday
    start_time = Column(String(5), nullable=True)  # HH:MM
    end_time = Column(String(5), nullable=True)
    timezone = Column(String(64), nullable=True)

    is_live = Column(Boolean, nullable=True)
    published = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class RadioSettings(Base):
    """Station-wide now-playing state (single row)."""

    __tablename__ = "radio_settings"

    id = Column(Integer, primary_key=True, index=True)
    station_name = Column(String(255), nullable=False)
    stream_url = Column(Text, nullable=True)
    is_live = Column(Boolean, nullable=False, default=False)
    listener_count = Column(Integer, nullable=False, default=0)

    # Now playing
    current_track = Column(String(255), nullable=True)
    current_artist = Column(String(255), nullable=True)
    current_show_name = Column(String(255), nullable=True)
    current_host_name = Column(String(255), nullable=True)
    current_cover_url = Column(Text, nullable=True)

    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class RadioListener(Base):
    """One listening session on the radio stream."""

    __tablename__ = "radio_listeners"

    id = Column(String(36), primary_key=True)
    session_id = Column(String(128), nullable=True)
    ip_address = Column(String(64), nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    duration = Column(Integer, nullable=True)  # seconds
