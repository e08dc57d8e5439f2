"""
Auth API Endpoints.

A single shared password (APP_PASSWORD) unlocks the dashboard pages. A
successful login sets the `auth_token` cookie that the login gate checks.
"""

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, Response

from api.dependencies import get_settings
from api.models import LoginRequest, LoginResponse
from config import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

SESSION_COOKIE: str = "auth_token"
SESSION_VALUE: str = "authenticated"
SESSION_MAX_AGE: int = 60 * 60 * 24 * 7  # 1 week


@router.post("/login", response_model=LoginResponse, summary="Log In")
def login(request: LoginRequest, response: Response, settings: Settings = Depends(get_settings)):
    """
    Check the shared password and set the session cookie.

    Returns 401 for a wrong password, or when APP_PASSWORD is not configured.
    """
    expected = settings.app_password
    if not expected or not secrets.compare_digest(request.password.encode(), expected.encode()):
        logger.warning("Rejected login attempt")
        raise HTTPException(status_code=401, detail="Senha incorreta")

    response.set_cookie(
        key=SESSION_COOKIE,
        value=SESSION_VALUE,
        max_age=SESSION_MAX_AGE,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="strict",
    )
    return LoginResponse(success=True)


@router.post("/logout", response_model=LoginResponse, summary="Log Out")
def logout(response: Response):
    response.delete_cookie(key=SESSION_COOKIE, path="/")
    return LoginResponse(success=True)
