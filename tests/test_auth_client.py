# Area: Shared Tests
# PRD: docs/prd-phase-sync.md
"""Tests for the login/signup and network-info client."""

import asyncio

import aiohttp
import pytest

from trivia_client._shared.auth_client import CANNOT_CONNECT_MESSAGE, AuthClient, JoinAddress
from trivia_client.errors import AuthError, RequestTimeout


class FakeResponse:
    def __init__(self, status, data):
        self.status = status
        self._data = data

    async def json(self, content_type=None):
        if isinstance(self._data, Exception):
            raise self._data
        return self._data

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeHTTP:
    """Stands in for aiohttp.ClientSession; one canned outcome."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self):
        return self

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def make_client(store, response=None, error=None, timeout=10.0):
    http = FakeHTTP(response, error)
    client = AuthClient("http://localhost:3000/", store, timeout=timeout, session_factory=http)
    return client, http


class TestLogin:
    """Tests for login() and signup()."""

    def test_login_stores_token(self, store):
        client, http = make_client(store, FakeResponse(200, {"token": "tok-1", "userId": 5}))

        identity = asyncio.run(client.login(" ana ", "pw"))

        assert identity.token == "tok-1"
        assert identity.user_id == "5"
        assert store.auth_token == "tok-1"
        assert store.display_name == "ana"
        method, url, kwargs = http.calls[0]
        assert (method, url) == ("POST", "http://localhost:3000/api/auth/login")
        assert kwargs["json"] == {"username": "ana", "password": "pw"}
        assert kwargs["timeout"].total == 10.0

    def test_signup_path(self, store):
        client, http = make_client(store, FakeResponse(201, {"token": "tok-2"}))
        asyncio.run(client.signup("bo", "pw"))
        assert http.calls[0][1] == "http://localhost:3000/api/auth/signup"

    def test_missing_credentials_not_sent(self, store):
        client, http = make_client(store, FakeResponse(200, {"token": "x"}))
        with pytest.raises(AuthError, match="Please enter both username and password"):
            asyncio.run(client.login("ana", ""))
        assert http.calls == []

    def test_rejected_with_server_message(self, store):
        client, _ = make_client(store, FakeResponse(401, {"message": "Invalid credentials"}))
        with pytest.raises(AuthError) as exc_info:
            asyncio.run(client.login("ana", "bad"))
        assert str(exc_info.value) == "Invalid credentials"
        assert exc_info.value.status == 401
        assert store.auth_token is None

    def test_rejected_without_message(self, store):
        client, _ = make_client(store, FakeResponse(500, None))
        with pytest.raises(AuthError, match="Signup failed"):
            asyncio.run(client.signup("ana", "pw"))

    def test_success_without_token(self, store):
        client, _ = make_client(store, FakeResponse(200, {"userId": 1}))
        with pytest.raises(AuthError, match="Login failed"):
            asyncio.run(client.login("ana", "pw"))

    def test_timeout(self, store):
        client, _ = make_client(store, error=asyncio.TimeoutError(), timeout=2.5)
        with pytest.raises(RequestTimeout) as exc_info:
            asyncio.run(client.login("ana", "pw"))
        assert exc_info.value.timeout_seconds == 2.5
        assert exc_info.value.user_message == "Request timed out. Is the server running?"

    def test_cannot_connect(self, store):
        client, _ = make_client(store, error=aiohttp.ClientConnectionError("refused"))
        with pytest.raises(AuthError, match="Cannot connect to server") as exc_info:
            asyncio.run(client.login("ana", "pw"))
        assert str(exc_info.value) == CANNOT_CONNECT_MESSAGE

    def test_non_json_body(self, store):
        client, _ = make_client(store, FakeResponse(200, ValueError("not json")))
        with pytest.raises(AuthError):
            asyncio.run(client.login("ana", "pw"))

    def test_logout_clears_everything(self, store):
        store.set("auth_token", "tok")
        store.save_game("ABCD", "player")
        client, _ = make_client(store)
        client.logout()
        assert store.snapshot() == {}


class TestJoinAddress:
    """Tests for fetch_join_address()."""

    def test_lan_address(self, store):
        client, http = make_client(store, FakeResponse(200, {"ip": "192.168.1.5", "hostname": "studio"}))
        address = asyncio.run(client.fetch_join_address())
        assert address == JoinAddress(url="http://192.168.1.5:3000", alt_url="http://studio.local:3000")
        assert http.calls[0][:2] == ("GET", "http://localhost:3000/api/info")

    def test_localhost_has_no_alt(self, store):
        client, _ = make_client(store, FakeResponse(200, {"ip": "10.0.0.2", "hostname": "localhost"}))
        address = asyncio.run(client.fetch_join_address())
        assert address.alt_url is None

    def test_failure_returns_none(self, store):
        client, _ = make_client(store, error=asyncio.TimeoutError())
        assert asyncio.run(client.fetch_join_address()) is None

    def test_missing_ip_returns_none(self, store):
        client, _ = make_client(store, FakeResponse(200, {"hostname": "studio"}))
        assert asyncio.run(client.fetch_join_address()) is None
