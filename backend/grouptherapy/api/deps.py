"""
Dependencies resolving the per-app storage and auth service.
"""
from fastapi import Request

from grouptherapy.services.auth_service import AuthService
from grouptherapy.storage.base import StorageBackend


def get_storage(request: Request) -> StorageBackend:
    """
    Storage handle created in the lifespan.

    Usage:
        @router.get("/endpoint")
        async def endpoint(storage: StorageBackend = Depends(get_storage)):
            ...
    """
    return request.app.state.storage


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service
