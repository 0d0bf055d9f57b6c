from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from app.core.config import settings
from app.core.auth import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    create_access_token,
    get_current_admin,
    verify_admin_credentials,
)
from app.schemas.auth import LoginRequest, TokenResponse
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from app.core.logging_config import log_audit_event, get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
async def login(request: Request, response: Response, credentials: LoginRequest):
    """Exchange the admin credentials for an access token."""
    client_ip = get_client_ip(request)

    if not verify_admin_credentials(credentials.username, credentials.password):
        log_audit_event(
            event_type="auth.login.failure",
            message="Admin login failed",
            level=logging.WARNING,
            username=credentials.username,
            ip_address=client_ip,
            request_method="POST",
            request_path="/api/auth/login",
            event_category="authentication",
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    access_token = create_access_token(data={"sub": credentials.username})

    response.set_cookie(
        key="auth_token",
        value=access_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

    log_audit_event(
        event_type="auth.login.success",
        message="Admin logged in",
        username=credentials.username,
        ip_address=client_ip,
        request_method="POST",
        request_path="/api/auth/login",
        event_category="authentication",
    )
    return TokenResponse(access_token=access_token)


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie("auth_token")
    return {"message": "Logged out"}


@router.get("/me")
async def me(admin: str = Depends(get_current_admin)):
    return {"username": admin}
