"""
News post model.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON
from grouptherapy.database import Base
from grouptherapy.utils.time import utcnow


class Post(Base):
    """News/blog article."""

    __tablename__ = "posts"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    cover_url = Column(Text, nullable=True)
    category = Column(String(50), nullable=True)
    tags = Column(JSON, nullable=True)
    author_name = Column(String(255), nullable=True)
    published = Column(Boolean, nullable=True)
    featured = Column(Boolean, nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
