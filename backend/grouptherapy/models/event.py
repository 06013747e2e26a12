"""
Live event model.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime
from grouptherapy.database import Base
from grouptherapy.utils.time import utcnow


class Event(Base):
    """Club night, showcase or festival date."""

    __tablename__ = "events"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)

    venue = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    country = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    end_date = Column(DateTime(timezone=True), nullable=True)

    image_url = Column(Text, nullable=True)
    ticket_url = Column(Text, nullable=True)
    ticket_price = Column(String(50), nullable=True)

    published = Column(Boolean, nullable=True)
    featured = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
