"""HTTP access to the remote store API.

Every call takes an explicit :class:`RequestContext` (bearer token and base
URL) instead of reading ambient session state. Responses use the envelope
``{"success": bool, "data": ..., "message"?: str, "pagination"?: {...}}``;
:meth:`ApiClient.request` unwraps it and turns failures into :class:`ApiError`
subclasses.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from gem_admin.config import get_settings

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong. Please try again."


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def transient(self) -> bool:
        # Network failures carry no status code
        return self.status_code is None or self.status_code >= 500


class AuthenticationRequired(ApiError):
    def __init__(self, message: str = "Authentication required. Please log in again.", payload: Any = None):
        super().__init__(message, status_code=401, payload=payload)


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


def extract_message(payload: Any, fallback: str = GENERIC_ERROR) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return fallback


@dataclass(frozen=True)
class RequestContext:
    token: Optional[str]
    base_url: str
    timeout: float = 10.0

    def headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


def anonymous_context() -> RequestContext:
    settings = get_settings()
    return RequestContext(token=None, base_url=settings.API_BASE_URL, timeout=settings.API_TIMEOUT_SECONDS)


class ApiClient:
    def __init__(self, transport: Optional[httpx.BaseTransport] = None):
        self._http = httpx.Client(transport=transport, headers={"Accept": "application/json"})
        self.auth = AuthAPI(self)
        self.products = ProductAPI(self)
        self.orders = OrderAPI(self)
        self.consultations = ConsultationAPI(self)
        self.videos = VideoAPI(self)
        self.media = MediaAPI(self)
        self.analytics = AnalyticsAPI(self)

    def close(self) -> None:
        self._http.close()

    def send(self, ctx: RequestContext, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Perform a request and return the decoded JSON body without envelope checks."""
        url = ctx.url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self._http.request(method, url, headers=ctx.headers(), timeout=ctx.timeout, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Request %s %s failed: %s", method, url, e)
            raise ApiError("Unable to reach the server. Check your connection and try again.") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        status = response.status_code
        if status == 401:
            raise AuthenticationRequired(payload=body)
        if status == 403:
            raise ForbiddenError(extract_message(body, "You don't have permission to perform this action."), status, body)
        if status == 404:
            raise NotFoundError(extract_message(body, "The requested item was not found."), status, body)
        if status >= 400:
            logger.warning("Upstream %s %s returned %s", method, url, status)
            raise ApiError(extract_message(body), status, body)
        if not isinstance(body, dict):
            raise ApiError("Invalid response format from server", status, body)
        return body

    def request(self, ctx: RequestContext, method: str, path: str, **kwargs) -> Dict[str, Any]:
        body = self.send(ctx, method, path, **kwargs)
        if not body.get("success"):
            raise ApiError(extract_message(body), 502, body)
        return body


class _ResourceAPI:
    def __init__(self, client: ApiClient):
        self.client = client


class AuthAPI(_ResourceAPI):
    def login(self, ctx: RequestContext, email: str, password: str) -> Dict[str, Any]:
        # The login envelope carries token and user next to success, not under data
        return self.client.send(ctx, "POST", "/auth/login", json={"email": email, "password": password})


class ProductAPI(_ResourceAPI):
    def get_all(self, ctx: RequestContext):
        return self.client.request(ctx, "GET", "/products")

    def get_by_id(self, ctx: RequestContext, id: str):
        return self.client.request(ctx, "GET", f"/products/{id}")

    def create(self, ctx: RequestContext, data: dict):
        return self.client.request(ctx, "POST", "/products", json=data)

    def update(self, ctx: RequestContext, id: str, data: dict):
        return self.client.request(ctx, "PUT", f"/products/{id}", json=data)

    def delete(self, ctx: RequestContext, id: str):
        return self.client.request(ctx, "DELETE", f"/products/{id}")


class OrderAPI(_ResourceAPI):
    def get_all(self, ctx: RequestContext, limit: int):
        return self.client.request(ctx, "GET", "/orders", params={"limit": limit})

    def update_status(self, ctx: RequestContext, id: str, status: str):
        return self.client.request(ctx, "PUT", f"/orders/{id}", json={"status": status})


class ConsultationAPI(_ResourceAPI):
    def get_all(self, ctx: RequestContext, page: int = 1, limit: int = 10):
        return self.client.request(ctx, "GET", "/booking-call", params={"page": page, "limit": limit})

    def update_status(self, ctx: RequestContext, id: str, status: str):
        return self.client.request(ctx, "PUT", f"/booking-call/{id}", json={"status": status})

    def delete(self, ctx: RequestContext, id: str):
        return self.client.request(ctx, "DELETE", f"/booking-call/{id}")


class VideoAPI(_ResourceAPI):
    def get_all(self, ctx: RequestContext):
        return self.client.request(ctx, "GET", "/video")

    def create(self, ctx: RequestContext, data: dict):
        return self.client.request(ctx, "POST", "/video", json=data)

    def delete(self, ctx: RequestContext, id: str):
        return self.client.request(ctx, "DELETE", f"/video/{id}")


class MediaAPI(_ResourceAPI):
    def upload(self, ctx: RequestContext, filename: str, content: bytes, content_type: str):
        """POST a file as multipart field ``media``; returns ``data`` with ``url`` and optional
        ``duration``, ``bytes`` and ``format``."""
        body = self.client.request(
            ctx, "POST", "/upload-media", files={"media": (filename, content, content_type)}
        )
        data = body.get("data") or {}
        if not data.get("url"):
            raise ApiError("Upload response was not successful", 502, body)
        return data


class AnalyticsAPI(_ResourceAPI):
    def get_sales_data(self, ctx: RequestContext):
        return self.client.request(ctx, "GET", "/orders/admin/stats")


def get_api_client():
    client = ApiClient()
    try:
        yield client
    finally:
        client.close()
