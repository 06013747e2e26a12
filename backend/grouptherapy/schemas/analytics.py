"""
Analytics recorder and overview schemas.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from grouptherapy.schemas.base import RecordBase


class PageViewCreate(BaseModel):
    path: str = Field(..., min_length=1)
    referrer: Optional[str] = None
    user_agent: Optional[str] = None


class PageView(RecordBase):
    id: int
    path: str
    referrer: Optional[str] = None
    user_agent: Optional[str] = None
    viewed_at: datetime


class PlayCountCreate(BaseModel):
    release_id: Optional[str] = None
    track_title: Optional[str] = None


class PlayCount(RecordBase):
    id: int
    release_id: Optional[str] = None
    track_title: Optional[str] = None
    played_at: datetime


class ReleasePlays(BaseModel):
    release_id: str
    play_count: int


class AnalyticsOverview(BaseModel):
    total_page_views: int
    total_play_counts: int
    total_radio_listeners: int
    recent_page_views: List[PageView]
    top_releases_by_plays: List[ReleasePlays]
