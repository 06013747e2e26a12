"""
Database models for the GroupTherapy backend.
"""
from grouptherapy.models.user import AdminUser, LoginAttempt, AdminSession
from grouptherapy.models.release import Release
from grouptherapy.models.event import Event
from grouptherapy.models.post import Post
from grouptherapy.models.contact import Contact
from grouptherapy.models.artist import Artist
from grouptherapy.models.radio import RadioShow, RadioSettings, RadioListener
from grouptherapy.models.playlist import Playlist
from grouptherapy.models.video import Video
from grouptherapy.models.analytics import PageView, PlayCount

__all__ = [
    "AdminUser",
    "LoginAttempt",
    "AdminSession",
    "Release",
    "Event",
    "Post",
    "Contact",
    "Artist",
    "RadioShow",
    "RadioSettings",
    "RadioListener",
    "Playlist",
    "Video",
    "PageView",
    "PlayCount",
]
