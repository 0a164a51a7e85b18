from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import logging
import uuid

from jose import jwt, JWTError

from gem_admin.config import get_settings
from gem_admin.schemas.user import DashboardSession, SessionUser
from gem_admin.utils.api_client import AuthenticationRequired, RequestContext

logger = logging.getLogger(__name__)

http_bearer = HTTPBearer(auto_error=False)

# Claims copied from the login response user onto the session token
USER_CLAIMS = ("email", "name", "phone", "role", "address", "createdAt", "updatedAt")


# ===== Session token helpers =====
def create_session_token(user: dict, access_token: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a dashboard session carrying the admin's identity and the upstream access token."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    user_id = user.get("id") or user.get("_id")
    payload = {
        "sub": str(user_id) if user_id is not None else (user.get("email") or ""),
        "accessToken": access_token,
        "exp": expire,
        "iat": now,
        "nbf": now,
        "jti": uuid.uuid4().hex,
    }
    for claim in USER_CLAIMS:
        if user.get(claim) is not None:
            payload[claim] = user.get(claim)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthenticationRequired("Invalid or expired session")


def is_session_revoked(jti: str) -> bool:
    from gem_admin.models.session import SessionLocal, RevokedSession
    db = SessionLocal()
    try:
        return db.query(RevokedSession).filter(RevokedSession.jti == jti).first() is not None
    finally:
        db.close()


def revoke_session(jti: str) -> None:
    from gem_admin.models.session import SessionLocal, RevokedSession
    db = SessionLocal()
    try:
        if not db.query(RevokedSession).filter(RevokedSession.jti == jti).first():
            db.add(RevokedSession(jti=jti))
            db.commit()
    finally:
        db.close()


def session_from_claims(payload: dict) -> DashboardSession:
    user = SessionUser(id=payload.get("sub") or None, **{c: payload.get(c) for c in USER_CLAIMS})
    return DashboardSession(user=user, accessToken=payload.get("accessToken") or "", jti=payload.get("jti") or "")


def get_current_session(token: HTTPAuthorizationCredentials = Depends(http_bearer)) -> DashboardSession:
    if not token or not token.credentials:
        raise AuthenticationRequired("Not authenticated")
    payload = decode_session_token(token.credentials)
    jti = payload.get("jti")
    if not jti or is_session_revoked(jti):
        raise AuthenticationRequired("Session revoked")
    if not payload.get("accessToken"):
        raise AuthenticationRequired("Invalid session payload")
    return session_from_claims(payload)


def get_request_context(session: DashboardSession = Depends(get_current_session)) -> RequestContext:
    settings = get_settings()
    return RequestContext(
        token=session.accessToken,
        base_url=settings.API_BASE_URL,
        timeout=settings.API_TIMEOUT_SECONDS,
    )
