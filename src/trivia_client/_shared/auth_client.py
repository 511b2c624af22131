# Area: Shared
# PRD: docs/prd-phase-sync.md
"""
trivia_client._shared.auth_client — Login/signup and network info
=================================================================

Thin HTTP client for the auxiliary endpoints the game client needs
before it opens the real-time channel:

- POST /api/auth/login and /api/auth/signup return an identity token
- GET /api/info returns the server's LAN address for the join screen

Every request carries a fixed total deadline (10s by default). A
request that runs past it is cancelled and reported as
RequestTimeout, separately from other failures.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlsplit

import aiohttp

from ..errors import AuthError, RequestTimeout
from .session_store import AUTH_TOKEN, DISPLAY_NAME, SessionStore

logger = logging.getLogger("trivia_client.auth")

DEFAULT_TIMEOUT_SECONDS = 10.0
CANNOT_CONNECT_MESSAGE = "Cannot connect to server. Please check if the backend is running."


@dataclass(frozen=True)
class Identity:
    token: str
    username: str
    user_id: Optional[str] = None


@dataclass(frozen=True)
class JoinAddress:
    """Where players can reach the game from their devices."""
    url: str
    alt_url: Optional[str] = None


class AuthClient:
    """
    Auxiliary request/response client.

    A successful login or signup stores the token and display name in
    the session store, where the runner picks them up when it builds
    the connection.
    """

    def __init__(
        self,
        api_url: str,
        session_store: SessionStore,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session_factory: Callable[[], Any] = aiohttp.ClientSession,
    ):
        self.api_url = api_url.rstrip("/")
        self.session_store = session_store
        self.timeout = timeout
        self._session_factory = session_factory

    async def login(self, username: str, password: str) -> Identity:
        """
        Log in and persist the returned token.

        Raises:
            RequestTimeout: The server did not answer within the deadline
            AuthError: Any other failure, with a user-facing message
        """
        return await self._authenticate("/api/auth/login", username, password, "Login failed")

    async def signup(self, username: str, password: str) -> Identity:
        """Create an account; same contract as login()."""
        return await self._authenticate("/api/auth/signup", username, password, "Signup failed")

    def logout(self) -> None:
        self.session_store.clear()
        logger.info("Logged out")

    async def fetch_join_address(self) -> Optional[JoinAddress]:
        """
        Ask the server for its LAN address.

        Returns None on any failure; the caller keeps its own address.
        """
        url = f"{self.api_url}/api/info"
        try:
            status, data = await self._request("GET", url)
        except (RequestTimeout, AuthError) as e:
            logger.warning(f"Failed to fetch network info: {e}")
            return None

        if status >= 400 or not isinstance(data, dict) or not data.get("ip"):
            logger.warning(f"Network info unavailable (status {status})")
            return None

        parts = urlsplit(self.api_url)
        scheme = parts.scheme or "http"
        port = f":{parts.port}" if parts.port else ""
        alt_url = None
        hostname = data.get("hostname")
        if isinstance(hostname, str) and hostname and "localhost" not in hostname:
            host = hostname if hostname.endswith(".local") else f"{hostname}.local"
            alt_url = f"{scheme}://{host}{port}"
        return JoinAddress(url=f"{scheme}://{data['ip']}{port}", alt_url=alt_url)

    # ── Internals ────────────────────────────────────────────

    async def _authenticate(
        self, path: str, username: str, password: str, fallback_message: str
    ) -> Identity:
        username = username.strip()
        if not username or not password:
            raise AuthError("Please enter both username and password")

        url = f"{self.api_url}{path}"
        logger.info(f"Authenticating {username} at {url}")
        status, data = await self._request(
            "POST", url, json={"username": username, "password": password}
        )
        body: Dict[str, Any] = data if isinstance(data, dict) else {}

        if status >= 400:
            raise AuthError(body.get("message") or fallback_message, status=status)
        token = body.get("token")
        if not isinstance(token, str) or not token:
            raise AuthError(fallback_message, status=status)

        user_id = body.get("userId")
        identity = Identity(
            token=token,
            username=username,
            user_id=str(user_id) if user_id is not None else None,
        )
        self.session_store.set(AUTH_TOKEN, identity.token)
        self.session_store.set(DISPLAY_NAME, identity.username)
        logger.info(f"Authenticated as {username}")
        return identity

    async def _request(self, method: str, url: str, **kwargs: Any):
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with self._session_factory() as http:
                async with http.request(method, url, timeout=timeout, **kwargs) as resp:
                    data = await resp.json(content_type=None)
                    return resp.status, data
        except asyncio.TimeoutError as e:
            raise RequestTimeout(url, self.timeout) from e
        except aiohttp.ClientConnectionError as e:
            raise AuthError(CANNOT_CONNECT_MESSAGE) from e
        except (aiohttp.ClientError, ValueError) as e:
            raise AuthError(f"Unexpected response from {url}: {e}") from e
