"""
Async client for the Readsy REST API.

Every request carries the session's access token. When the API answers 401
the client refreshes the token pair once, replays the request with the new
access token and returns that response. Concurrent refreshes for the same
refresh token are coalesced into one call.
"""

import inspect
import logging
from typing import Any, Callable, Dict, Optional

import httpx

from readsy.client.errors import ApiError, SessionExpiredError, error_from_response
from readsy.client.refresh import SingleFlight
from readsy.client.resources import (
    BooksApi,
    ChallengesApi,
    CheckinsApi,
    FavoritesApi,
    GamificationApi,
    GroupsApi,
    LeaderboardApi,
    PublicWishlistApi,
    ShelvesApi,
    UsersApi,
    WishlistApi,
)
from readsy.client.session import AuthSession, TokenPair
from readsy.config import settings

logger = logging.getLogger(__name__)

REFRESH_PATH = "/auth/refresh"


class ReadsyClient:
    """
    Args:
        base_url: API origin, defaults to NEXT_PUBLIC_API_URL.
        session: Auth session to use; a fresh in-memory one when omitted.
        on_session_expired: Called (sync or async) when a refresh fails and
            the session has been cleared, e.g. to send the user to login.
        timeout: Request timeout in seconds.
        transport: Custom httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[AuthSession] = None,
        on_session_expired: Optional[Callable[[], Any]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api_prefix: Optional[str] = None,
    ):
        self.session = session or AuthSession()
        self.on_session_expired = on_session_expired
        self.api_prefix = (api_prefix if api_prefix is not None else settings.API_V1_PREFIX).rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.NEXT_PUBLIC_API_URL,
            timeout=timeout or settings.CLIENT_TIMEOUT,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        self._refresh_flight = SingleFlight()

        self.users = UsersApi(self)
        self.shelves = ShelvesApi(self)
        self.books = BooksApi(self)
        self.favorites = FavoritesApi(self)
        self.wishlist = WishlistApi(self)
        self.public_wishlist = PublicWishlistApi(self)
        self.checkins = CheckinsApi(self)
        self.groups = GroupsApi(self)
        self.challenges = ChallengesApi(self)
        self.gamification = GamificationApi(self)
        self.leaderboard = LeaderboardApi(self)

    async def __aenter__(self) -> "ReadsyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # --- Transport ---

    def _url(self, path: str) -> str:
        return f"{self.api_prefix}{path}"

    async def _send_once(
        self, method: str, path: str, token: Optional[str], **kwargs
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return await self._http.request(method, self._url(path), headers=headers, **kwargs)

    async def send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
        refresh: bool = True,
    ) -> httpx.Response:
        """
        Send a request, refreshing the session once on 401.

        With ``refresh=False`` a 401 is returned as is.

        Raises:
            SessionExpiredError: the 401 could not be recovered by a refresh.
        """
        kwargs: Dict[str, Any] = {"params": params}
        if json is not None:
            kwargs["json"] = json

        token = self.session.access_token if authenticated else None
        response = await self._send_once(method, path, token, **kwargs)
        if response.status_code != 401 or not authenticated or not refresh:
            return response
        if path.startswith(REFRESH_PATH):
            return response

        current = self.session.access_token
        if current is None or current == token:
            await self.refresh()
        # else: a concurrent request already rotated the tokens

        return await self._send_once(method, path, self.session.access_token, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
        refresh: bool = True,
    ) -> Any:
        """Send a request and return the decoded JSON body, raising ApiError on failure."""
        response = await self.send(
            method, path, json=json, params=params, authenticated=authenticated, refresh=refresh
        )
        if response.is_error:
            error = error_from_response(response, path)
            if error.is_expected:
                logger.debug(f"{method} {path} -> {error.status_code} (expected)")
            else:
                logger.warning(f"{method} {path} failed: {error.status_code} {error.message}")
            raise error
        if not response.content:
            return None
        return response.json()

    # --- Token refresh ---

    async def refresh(self) -> TokenPair:
        """Exchange the refresh token for a new pair; concurrent callers share one call."""
        refresh_token = self.session.refresh_token
        if not refresh_token:
            await self._expire("no refresh token")
            raise SessionExpiredError("Not logged in")
        return await self._refresh_flight.do(refresh_token, lambda: self._do_refresh(refresh_token))

    async def _do_refresh(self, refresh_token: str) -> TokenPair:
        try:
            response = await self._send_once(
                "POST", REFRESH_PATH, None, json={"refresh_token": refresh_token}
            )
        except httpx.HTTPError as e:
            await self._expire(f"refresh request failed: {e}")
            raise SessionExpiredError("Could not refresh the session") from e

        if response.status_code != 200:
            error = error_from_response(response, REFRESH_PATH)
            await self._expire(f"refresh rejected with {response.status_code}")
            raise SessionExpiredError(error.message) from error

        try:
            tokens = TokenPair.from_payload(response.json())
        except ValueError as e:
            await self._expire(f"malformed refresh response: {e}")
            raise SessionExpiredError("Malformed refresh response") from e

        self.session.set_tokens(tokens)
        logger.info("Access token refreshed")
        return tokens

    async def _expire(self, reason: str) -> None:
        logger.info(f"Session expired: {reason}")
        # Only the caller that ends a live session notifies
        had_session = self.session.is_authenticated
        self.session.clear()
        if had_session and self.on_session_expired is not None:
            result = self.on_session_expired()
            if inspect.isawaitable(result):
                await result

    # --- Auth flows ---

    async def _start_session(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.session.set_tokens(TokenPair.from_payload(payload))
        user = await self.request("GET", "/users/me")
        self.session.set_user(user)
        return user

    async def signup(
        self, email: str, password: str, display_name: str, username: Optional[str] = None
    ) -> Dict[str, Any]:
        body = {"email": email, "password": password, "display_name": display_name}
        if username:
            body["username"] = username
        payload = await self.request("POST", "/auth/signup", json=body, authenticated=False)
        return await self._start_session(payload)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        payload = await self.request(
            "POST", "/auth/login", json={"email": email, "password": password}, authenticated=False
        )
        return await self._start_session(payload)

    async def logout(self) -> None:
        """Revoke the refresh token server-side; the local session is cleared regardless."""
        try:
            if self.session.is_authenticated:
                await self.request("POST", "/auth/logout", refresh=False)
        except (ApiError, SessionExpiredError, httpx.HTTPError) as e:
            logger.warning(f"Logout request failed: {e}")
        finally:
            self.session.clear()
