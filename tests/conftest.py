"""
conftest.py: Shared pytest fixtures for the gem admin test suite.

The store API is never contacted: router tests swap the ``get_api_client``
dependency for an ``ApiClient`` backed by ``httpx.MockTransport`` and a
:class:`FakeUpstream` route table. The local database is a SQLite file in a
temporary directory.

Environment variables are set before any ``gem_admin`` import because the
engine and settings are built at import time.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="gem_admin_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["API_BASE_URL"] = "http://upstream.test/api"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["LOAD_RETRY_DELAY_SECONDS"] = "0"

import httpx
import pytest
from fastapi.testclient import TestClient

UPSTREAM_TOKEN = "upstream-token-123"


class FakeUpstream:
    """Route table standing in for the store API.

    Routes are keyed by ``(METHOD, path)`` with the ``/api`` prefix removed.
    A route is either a ``(status, json)`` pair or a callable taking the
    ``httpx.Request``. Every request is recorded in ``calls``.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, json=None, status=200, handler=None):
        self.routes[(method.upper(), path)] = handler or (status, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        self.calls.append(request)
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"success": False, "message": "Route not found"})
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    def last(self, method, path):
        for request in reversed(self.calls):
            if request.method == method and request.url.path == f"/api{path}":
                return request
        return None


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def api_client(upstream):
    from gem_admin.utils.api_client import ApiClient
    client = ApiClient(transport=httpx.MockTransport(upstream.handler))
    yield client
    client.close()


@pytest.fixture
def ctx():
    from gem_admin.utils.api_client import RequestContext
    return RequestContext(token=UPSTREAM_TOKEN, base_url="http://upstream.test/api")


@pytest.fixture
def client(upstream):
    """TestClient with the store API replaced by ``upstream``."""
    from gem_admin.main import app
    from gem_admin.utils.api_client import ApiClient, get_api_client

    def _fake_api_client():
        api = ApiClient(transport=httpx.MockTransport(upstream.handler))
        try:
            yield api
        finally:
            api.close()

    app.dependency_overrides[get_api_client] = _fake_api_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def session_token():
    from gem_admin.utils.security import create_session_token
    user = {"id": "admin-1", "email": "admin@gemstore.com", "name": "Store Admin", "role": "admin"}
    return create_session_token(user, UPSTREAM_TOKEN)


@pytest.fixture
def auth_headers(session_token):
    return {"Authorization": f"Bearer {session_token}"}


@pytest.fixture
def sample_bookings():
    """Consultation rows as the list view sees them."""
    return [
        {"id": "1", "name": "Sarah Khan", "email": "sarah@example.com", "company": "Delhi", "service": "Career", "status": "pending"},
        {"id": "2", "name": "Ravi Patel", "email": "ravi@example.com", "company": "Mumbai", "service": "Health", "status": "completed"},
        {"id": "3", "name": "Anita Roy", "email": "SARAH.fan@example.com", "company": "Pune", "service": "Marriage", "status": "pending"},
        {"id": "4", "name": "John Doe", "email": "john@example.com", "company": "Sarahpur", "service": "Wealth", "status": "scheduled"},
        {"id": "5", "name": "Meera Iyer", "email": "meera@example.com", "company": "Chennai", "service": "Career", "status": "good"},
    ]
