"""
Radio settings and listener schemas.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from grouptherapy.schemas.base import RecordBase


class RadioSettingsUpdate(BaseModel):
    station_name: Optional[str] = Field(None, min_length=1)
    stream_url: Optional[str] = None
    is_live: Optional[bool] = None
    listener_count: Optional[int] = Field(None, ge=0)
    current_track: Optional[str] = None
    current_artist: Optional[str] = None
    current_show_name: Optional[str] = None
    current_host_name: Optional[str] = None
    current_cover_url: Optional[str] = None

    @model_validator(mode="after")
    def _columns_not_null(self):
        required = ("station_name", "is_live", "listener_count")
        nulls = [f for f in required if f in self.model_fields_set and getattr(self, f) is None]
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self


class RadioSettings(RecordBase):
    id: int
    station_name: str
    stream_url: Optional[str] = None
    is_live: bool = False
    listener_count: int = 0
    current_track: Optional[str] = None
    current_artist: Optional[str] = None
    current_show_name: Optional[str] = None
    current_host_name: Optional[str] = None
    current_cover_url: Optional[str] = None
    updated_at: datetime


class RadioListenerCreate(BaseModel):
    session_id: Optional[str] = None
    ip_address: Optional[str] = None


class RadioListener(RecordBase):
    id: str
    session_id: Optional[str] = None
    ip_address: Optional[str] = None
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration: Optional[int] = None
