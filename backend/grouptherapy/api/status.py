"""
Health and readiness probes.
"""
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from loguru import logger

router = APIRouter(prefix="/api/status", tags=["status"])


@router.get("/health")
async def health_check(request: Request):
    """Combined health check endpoint (no auth required)."""
    return {
        "status": "healthy",
        "version": request.app.state.settings.app_version
    }


@router.get("/live")
async def liveness_check():
    """
    Liveness probe - checks if the process is alive.
    Should return 200 if the app is running, regardless of dependencies.
    """
    return {"status": "alive"}


@router.get("/ready")
async def readiness_check(request: Request):
    """
    Readiness probe - checks that storage answers.
    Used by load balancers to determine if traffic should be routed here.
    """
    checks = {"storage": False}

    try:
        checks["storage"] = await request.app.state.storage.ping()
    except Exception as e:
        logger.warning(f"Readiness check - storage failed: {e}")

    if all(checks.values()):
        return {"status": "ready", "checks": checks}
    return JSONResponse(status_code=503, content={"status": "not_ready", "checks": checks})
