from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from newsdesk.core.rate_limiter import rate_limit_ip
from newsdesk.services.auth_service import AdminAuthService, InvalidCredentialsError, TokenInvalidError

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


def _get_auth_service(request: Request) -> AdminAuthService:
    svc = getattr(getattr(request.app, "state", None), "auth_service", None)
    if not svc:
        raise RuntimeError("AdminAuthService not configured")
    return svc


def _bearer_token(request: Request) -> str:
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def require_admin(request: Request) -> Optional[dict]:
    """Guard for mutating routes; only enforced when REQUIRE_ADMIN_TOKEN is on."""
    svc = _get_auth_service(request)
    if not svc.settings.require_admin_token:
        return None
    try:
        return svc.verify(_bearer_token(request))
    except TokenInvalidError as exc:
        logger.info("Rejected admin token: %s", exc)
        raise HTTPException(401, "Invalid or missing token")


@router.post("/login")
def login(payload: LoginRequest, request: Request):
    svc = _get_auth_service(request)
    rate_limit_ip(
        request,
        "auth:login",
        limit=svc.settings.login_rate_limit,
        window_seconds=svc.settings.login_rate_window_seconds,
        trust_forwarded_for=svc.settings.trust_forwarded_for,
    )
    try:
        token = svc.login(payload.username, payload.password)
    except InvalidCredentialsError:
        logger.info("Rejected admin login for %r", payload.username)
        raise HTTPException(401, "Invalid credentials")
    return {"token": token}
