"""
Content entity schemas.

Each entity has a create schema (request body for POST), a partial update
schema (PATCH) and a stored record carrying the generated id and created_at.
"""
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from grouptherapy.schemas.base import RecordBase, make_partial


# --- Releases ---

class ReleaseCreate(BaseModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    artist_name: str = Field(..., min_length=1)
    artist_id: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    type: Optional[str] = Field(None, description="single, ep or album")
    genres: Optional[List[str]] = None
    release_date: Optional[datetime] = None
    spotify_url: Optional[str] = None
    apple_music_url: Optional[str] = None
    soundcloud_url: Optional[str] = None
    published: Optional[bool] = None
    featured: Optional[bool] = None


ReleaseUpdate = make_partial(ReleaseCreate, "ReleaseUpdate")


class Release(ReleaseCreate, RecordBase):
    id: str
    created_at: datetime


# --- Events ---

class EventCreate(BaseModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: Optional[str] = None
    venue: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    country: Optional[str] = None
    address: Optional[str] = None
    date: datetime
    end_date: Optional[datetime] = None
    image_url: Optional[str] = None
    ticket_url: Optional[str] = None
    ticket_price: Optional[str] = None
    published: Optional[bool] = None
    featured: Optional[bool] = None


EventUpdate = make_partial(EventCreate, "EventUpdate")


class Event(EventCreate, RecordBase):
    id: str
    created_at: datetime


# --- Posts ---

class PostCreate(BaseModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    content: Optional[str] = None
    cover_url: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    author_name: Optional[str] = None
    published: Optional[bool] = None
    featured: Optional[bool] = None
    published_at: Optional[datetime] = None


PostUpdate = make_partial(PostCreate, "PostUpdate")


class Post(PostCreate, RecordBase):
    id: str
    created_at: datetime


# --- Contacts ---

class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    subject: Optional[str] = None
    category: Optional[str] = None
    message: str = Field(..., min_length=1)
    attachment_url: Optional[str] = None


class ContactUpdate(make_partial(ContactCreate, "_ContactFields")):
    status: Optional[str] = Field(None, description="new, read, replied or archived")


class Contact(ContactCreate, RecordBase):
    id: str
    status: str = "new"
    created_at: datetime


# --- Artists ---

class ArtistCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    bio: Optional[str] = None
    image_url: Optional[str] = None
    spotify_artist_id: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    featured: Optional[bool] = None


ArtistUpdate = make_partial(ArtistCreate, "ArtistUpdate")


class Artist(ArtistCreate, RecordBase):
    id: str
    created_at: datetime


# --- Radio shows ---

class RadioShowCreate(BaseModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    host_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    host_bio: Optional[str] = None
    host_image_url: Optional[str] = None
    cover_url: Optional[str] = None
    stream_url: Optional[str] = None
    recorded_url: Optional[str] = None
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    timezone: Optional[str] = None
    is_live: Optional[bool] = None
    published: Optional[bool] = None


RadioShowUpdate = make_partial(RadioShowCreate, "RadioShowUpdate")


class RadioShow(RadioShowCreate, RecordBase):
    id: str
    created_at: datetime


# --- Playlists ---

class PlaylistCreate(BaseModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: Optional[str] = None
    cover_url: Optional[str] = None
    spotify_url: Optional[str] = None
    spotify_playlist_id: Optional[str] = None
    track_count: Optional[int] = None
    featured: Optional[bool] = None
    published: Optional[bool] = None


PlaylistUpdate = make_partial(PlaylistCreate, "PlaylistUpdate")


class Playlist(PlaylistCreate, RecordBase):
    id: str
    created_at: datetime


# --- Videos ---

class VideoCreate(BaseModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None
    youtube_id: Optional[str] = None
    vimeo_id: Optional[str] = None
    artist_id: Optional[str] = None
    artist_name: Optional[str] = None
    duration: Optional[str] = None
    category: Optional[str] = None
    featured: Optional[bool] = None
    published: Optional[bool] = None


VideoUpdate = make_partial(VideoCreate, "VideoUpdate")


class Video(VideoCreate, RecordBase):
    id: str
    created_at: datetime
