import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from gem_admin.config import get_settings
from gem_admin.schemas.user import DashboardSession, LoginOut, LoginSchema
from gem_admin.utils.api_client import (
    ApiClient,
    ApiError,
    AuthenticationRequired,
    anonymous_context,
    extract_message,
    get_api_client,
)
from gem_admin.utils.security import (
    create_session_token,
    decode_session_token,
    get_current_session,
    http_bearer,
    revoke_session,
    session_from_claims,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginOut)
def login(credentials: LoginSchema, client: ApiClient = Depends(get_api_client)):
    try:
        body = client.auth.login(anonymous_context(), credentials.email, credentials.password)
    except AuthenticationRequired as e:
        # A 401 here means bad credentials, not an expired session
        raise HTTPException(status_code=401, detail=extract_message(e.payload, "Invalid credentials"))
    except ApiError as e:
        if e.transient:
            raise
        raise HTTPException(status_code=401, detail=e.message or "Invalid credentials")

    if not body.get("success") or not body.get("token"):
        logger.info("Login rejected for %s", credentials.email)
        raise HTTPException(status_code=401, detail=extract_message(body, "Invalid credentials"))

    user = body.get("user") or {}
    settings = get_settings()
    token = create_session_token(user, body["token"])
    session = session_from_claims(decode_session_token(token))
    logger.info("Admin %s signed in", session.user.email)
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in_minutes": settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        "user": session.user,
    }


@router.get("/session")
def read_session(session: DashboardSession = Depends(get_current_session)):
    # The upstream token stays server side
    return {"user": session.user, "authenticated": True}


@router.post("/logout")
def logout(creds: HTTPAuthorizationCredentials = Depends(http_bearer)):
    if not creds or not creds.credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = decode_session_token(creds.credentials)
    except AuthenticationRequired:
        # Expired or forged tokens are already unusable
        return {"message": "Logged out"}
    jti = payload.get("jti")
    if jti:
        revoke_session(jti)
    return {"message": "Logged out"}
