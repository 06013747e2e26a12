"""
Authentication API routes.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from loguru import logger

from grouptherapy.api.deps import get_auth_service
from grouptherapy.services.auth_service import AuthService, INVALID_CREDENTIALS

router = APIRouter(prefix="/api/auth", tags=["authentication"])
security = HTTPBearer(auto_error=False)


def get_client_ip(request: Request) -> Optional[str]:
    """Extract client IP from request, handling proxy headers."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if request.client:
        return request.client.host

    return None


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    sessionId: str
    username: str


async def require_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> str:
    """Resolve the bearer session to a username, or reject with 401."""
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    username = await auth_service.validate_session(credentials.credentials)
    if not username:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.username = username
    return username


@router.post("/login", response_model=LoginResponse)
async def login(
    login_request: LoginRequest,
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Check credentials and open a 24 hour session."""
    if not login_request.username or not login_request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required",
        )

    client_ip = get_client_ip(request)
    result = await auth_service.validate_credentials(
        login_request.username,
        login_request.password,
        client_ip,
    )
    if not result.valid:
        logger.info(f"Failed login for '{login_request.username}' from {client_ip or 'unknown'}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.message or INVALID_CREDENTIALS,
        )

    session_id = await auth_service.create_session(login_request.username)
    return LoginResponse(sessionId=session_id, username=login_request.username)


@router.post("/logout")
async def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
):
    """End the presented session. Succeeds even without a valid one."""
    if credentials and credentials.credentials:
        await auth_service.delete_session(credentials.credentials)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_me(username: str = Depends(require_auth)):
    """Username behind the presented session."""
    return {"username": username}

