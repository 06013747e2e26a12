"""
Analytics API routes: public recorders and the dashboard overview.
"""
from fastapi import APIRouter, Depends, Request

from grouptherapy.api.auth import require_auth
from grouptherapy.api.deps import get_storage
from grouptherapy.constants import ANALYTICS_TOP_RELEASES, DASHBOARD_RADIO_SHOWS, DASHBOARD_TOP_RELEASES
from grouptherapy.schemas.analytics import PageView, PageViewCreate, PlayCount, PlayCountCreate
from grouptherapy.storage.base import StorageBackend

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.post("/page-view", response_model=PageView)
async def record_page_view(
    data: PageViewCreate,
    request: Request,
    storage: StorageBackend = Depends(get_storage),
):
    if not data.user_agent:
        data = data.model_copy(update={"user_agent": request.headers.get("User-Agent")})
    return await storage.record_page_view(data)


@router.post("/play", response_model=PlayCount)
async def record_play(data: PlayCountCreate, storage: StorageBackend = Depends(get_storage)):
    return await storage.record_play_count(data)


@router.get("/overview", dependencies=[Depends(require_auth)])
async def get_overview(storage: StorageBackend = Depends(get_storage)):
    """
    Dashboard summary.

    Streams per release come from the play count ranking; published releases
    without plays show 0 streams. Radio show listener averages are not
    tracked per show yet and are reported as 0.
    """
    analytics = await storage.get_analytics_overview(ANALYTICS_TOP_RELEASES)
    releases = await storage.releases.list_all()
    radio_shows = await storage.radio_shows.list_all()

    plays = {p.release_id: p.play_count for p in analytics.top_releases_by_plays}
    top_releases = sorted(
        (
            {"id": r.id, "title": r.title, "streams": plays.get(r.id, 0)}
            for r in releases
            if r.published
        ),
        key=lambda r: r["streams"],
        reverse=True,
    )[:DASHBOARD_TOP_RELEASES]

    return {
        "total_streams": analytics.total_play_counts,
        "total_listeners": analytics.total_radio_listeners,
        "active_users": analytics.total_page_views,
        "recent_page_views": [v.model_dump(mode="json") for v in analytics.recent_page_views],
        "engagement": {
            "releases": top_releases,
            "radio_shows": [
                {"id": s.id, "title": s.title, "avg_listeners": 0}
                for s in radio_shows[:DASHBOARD_RADIO_SHOWS]
            ],
        },
    }
