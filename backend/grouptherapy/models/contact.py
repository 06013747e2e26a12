"""
Contact form submission model.
"""
from sqlalchemy import Column, String, Text, DateTime
from grouptherapy.database import Base
from grouptherapy.utils.time import utcnow


class Contact(Base):
    """Inbound message from the public contact form."""

    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=True)
    category = Column(String(50), nullable=True)  # demo, booking, press, general
    message = Column(Text, nullable=False)
    attachment_url = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="new")  # new, read, replied, archived
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
