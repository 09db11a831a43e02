"""
Tests for the client's 401 handling: single-flight refresh and replay
"""
import asyncio
import json
import logging

import httpx
import pytest

from readsy.client import (
    ApiError,
    AuthSession,
    MemoryTokenStore,
    ReadsyClient,
    SessionExpiredError,
)

REFRESH_URL = "/api/v1/auth/refresh"
SLOW_URL = "/api/v1/slow"


class FakeApi:
    """
    MockTransport handler: accepts one access token, answers 401 to anything
    else and rotates the pair on refresh. SLOW_URL answers after slow_delay.
    """

    def __init__(self, refresh_status=200, refresh_delay=0.05, accept_refreshed=True, slow_delay=0.2):
        self.slow_delay = slow_delay
        self.refresh_status = refresh_status
        self.refresh_delay = refresh_delay
        self.accept_refreshed = accept_refreshed
        self.refresh_calls = 0
        self.refresh_bodies = []
        self.requests = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == REFRESH_URL:
            self.refresh_calls += 1
            self.refresh_bodies.append(json.loads(request.content))
            await asyncio.sleep(self.refresh_delay)
            if self.refresh_status != 200:
                return httpx.Response(self.refresh_status, json={"detail": "Access denied"})
            return httpx.Response(
                200,
                json={"access_token": "access-2", "refresh_token": "refresh-2", "token_type": "bearer"},
            )

        auth = request.headers.get("Authorization")
        self.requests.append((request.url.path, auth))
        if request.url.path == SLOW_URL:
            await asyncio.sleep(self.slow_delay)
        if self.accept_refreshed and auth == "Bearer access-2":
            return httpx.Response(200, json={"path": request.url.path})
        return httpx.Response(401, json={"detail": "Could not validate credentials"})


def make_client(api, tokens=True, on_session_expired=None):
    state = {"access_token": "access-1", "refresh_token": "refresh-1"} if tokens else None
    store = MemoryTokenStore(state)
    client = ReadsyClient(
        base_url="http://test",
        session=AuthSession(store),
        on_session_expired=on_session_expired,
        transport=httpx.MockTransport(api),
    )
    return client, store


@pytest.mark.unit
class TestSingleFlightRefresh:
    @pytest.mark.asyncio
    async def test_concurrent_401s_trigger_one_refresh(self):
        api = FakeApi()
        client, store = make_client(api)

        async with client:
            results = await asyncio.gather(*(client.request("GET", f"/shelves/{i}") for i in range(5)))

        assert [r["path"] for r in results] == [f"/api/v1/shelves/{i}" for i in range(5)]
        assert api.refresh_calls == 1
        assert api.refresh_bodies == [{"refresh_token": "refresh-1"}]
        assert client.session.access_token == "access-2"
        assert store.state["refresh_token"] == "refresh-2"

    @pytest.mark.asyncio
    async def test_request_replayed_once_with_new_token(self):
        api = FakeApi()
        client, _ = make_client(api)

        async with client:
            await client.shelves.list()

        assert api.requests == [
            ("/api/v1/shelves", "Bearer access-1"),
            ("/api/v1/shelves", "Bearer access-2"),
        ]

    @pytest.mark.asyncio
    async def test_second_401_is_returned_to_caller(self):
        api = FakeApi(accept_refreshed=False)
        client, _ = make_client(api)

        async with client:
            with pytest.raises(ApiError) as exc:
                await client.request("GET", "/shelves")

        assert exc.value.status_code == 401
        assert api.refresh_calls == 1
        assert len(api.requests) == 2

    @pytest.mark.asyncio
    async def test_refresh_after_rotation_is_not_repeated(self):
        api = FakeApi()
        client, _ = make_client(api)

        async with client:
            await client.request("GET", "/shelves")
            await client.request("GET", "/groups")

        assert api.refresh_calls == 1
        assert api.requests[-1] == ("/api/v1/groups", "Bearer access-2")

    @pytest.mark.asyncio
    async def test_late_401_replays_with_rotated_token(self):
        api = FakeApi()
        client, _ = make_client(api)

        async with client:
            shelves, slow = await asyncio.gather(
                client.request("GET", "/shelves"), client.request("GET", "/slow")
            )

        assert slow == {"path": SLOW_URL}
        assert api.refresh_calls == 1
        assert [auth for path, auth in api.requests if path == SLOW_URL] == [
            "Bearer access-1",
            "Bearer access-2",
        ]


@pytest.mark.unit
class TestRefreshFailure:
    @pytest.mark.asyncio
    async def test_rejected_refresh_fails_every_waiter(self):
        api = FakeApi(refresh_status=403)
        expired = []
        client, store = make_client(api, on_session_expired=lambda: expired.append(True))

        async with client:
            results = await asyncio.gather(
                *(client.request("GET", "/favorites") for _ in range(4)), return_exceptions=True
            )

        assert all(isinstance(r, SessionExpiredError) for r in results)
        assert api.refresh_calls == 1
        assert expired == [True]
        assert not client.session.is_authenticated
        assert store.state is None

    @pytest.mark.asyncio
    async def test_late_401_after_failed_refresh_notifies_once(self):
        api = FakeApi(refresh_status=403)
        expired = []
        client, _ = make_client(api, on_session_expired=lambda: expired.append(True))

        async with client:
            results = await asyncio.gather(
                client.request("GET", "/favorites"),
                client.request("GET", "/slow"),
                return_exceptions=True,
            )

        assert all(isinstance(r, SessionExpiredError) for r in results)
        assert api.refresh_calls == 1
        assert expired == [True]

    @pytest.mark.asyncio
    async def test_async_expiry_hook(self):
        api = FakeApi(refresh_status=401)
        calls = []

        async def on_expired():
            calls.append("expired")

        client, _ = make_client(api, on_session_expired=on_expired)
        async with client:
            with pytest.raises(SessionExpiredError):
                await client.gamification.status()

        assert calls == ["expired"]

    @pytest.mark.asyncio
    async def test_network_error_during_refresh(self):
        def handler(request):
            if request.url.path == REFRESH_URL:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(401, json={"detail": "Could not validate credentials"})

        client, store = make_client(handler)
        async with client:
            with pytest.raises(SessionExpiredError):
                await client.request("GET", "/shelves")

        assert store.state is None

    @pytest.mark.asyncio
    async def test_malformed_refresh_response(self):
        def handler(request):
            if request.url.path == REFRESH_URL:
                return httpx.Response(200, json={"unexpected": True})
            return httpx.Response(401)

        client, _ = make_client(handler)
        async with client:
            with pytest.raises(SessionExpiredError):
                await client.request("GET", "/shelves")
        assert not client.session.is_authenticated

    @pytest.mark.asyncio
    async def test_no_refresh_token(self):
        api = FakeApi()
        expired = []
        client, _ = make_client(api, tokens=False, on_session_expired=lambda: expired.append(True))

        async with client:
            with pytest.raises(SessionExpiredError, match="Not logged in"):
                await client.request("GET", "/shelves")

        assert api.refresh_calls == 0
        assert api.requests == [("/api/v1/shelves", None)]
        # nothing to expire
        assert expired == []


@pytest.mark.unit
class TestRequests:
    @pytest.mark.asyncio
    async def test_unauthenticated_request_is_not_refreshed(self):
        api = FakeApi()
        client, _ = make_client(api)

        async with client:
            with pytest.raises(ApiError) as exc:
                await client.leaderboard.global_ranking()

        assert exc.value.status_code == 401
        assert api.refresh_calls == 0
        assert api.requests == [("/api/v1/leaderboard", None)]

    @pytest.mark.asyncio
    async def test_expected_errors_are_logged_quietly(self, caplog):
        def handler(request):
            return httpx.Response(404, json={"detail": "Shelf not found"})

        client, _ = make_client(handler)
        caplog.set_level(logging.DEBUG, logger="readsy.client.api")
        async with client:
            with pytest.raises(ApiError) as exc:
                await client.shelves.get("missing")

        assert exc.value.message == "Shelf not found"
        assert exc.value.is_expected
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    @pytest.mark.asyncio
    async def test_unexpected_errors_are_reported(self, caplog):
        def handler(request):
            return httpx.Response(500, json={"detail": "Internal Server Error"})

        client, _ = make_client(handler)
        caplog.set_level(logging.DEBUG, logger="readsy.client.api")
        async with client:
            with pytest.raises(ApiError):
                await client.groups.list()

        assert any(r.levelno == logging.WARNING for r in caplog.records)

    @pytest.mark.asyncio
    async def test_query_params_and_body(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(200, json=[])

        client, _ = make_client(handler)
        async with client:
            await client.books.search("dune")
            assert seen["url"] == "http://test/api/v1/books/search?q=dune"
            await client.checkins.create("b1", pages_read=10, minutes_spent=20)

        assert json.loads(seen["body"]) == {"book_id": "b1", "pages_read": 10, "minutes_spent": 20}

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self):
        client, _ = make_client(lambda request: httpx.Response(204))
        async with client:
            assert await client.favorites.remove("b1") is None


@pytest.mark.unit
class TestAuthFlows:
    @pytest.mark.asyncio
    async def test_login_starts_session(self):
        def handler(request):
            if request.url.path == "/api/v1/auth/login":
                assert json.loads(request.content) == {"email": "a@example.com", "password": "pw"}
                return httpx.Response(200, json={"access_token": "access-2", "refresh_token": "refresh-2"})
            if request.url.path == "/api/v1/users/me":
                assert request.headers["Authorization"] == "Bearer access-2"
                return httpx.Response(200, json={"id": "u1", "email": "a@example.com"})
            return httpx.Response(404)

        client, store = make_client(handler, tokens=False)
        async with client:
            user = await client.login("a@example.com", "pw")

        assert user["id"] == "u1"
        assert client.session.user == user
        assert store.state["access_token"] == "access-2"

    @pytest.mark.asyncio
    async def test_logout_clears_session_even_on_error(self):
        def handler(request):
            return httpx.Response(500, json={"detail": "Internal Server Error"})

        client, store = make_client(handler)
        async with client:
            await client.logout()

        assert not client.session.is_authenticated
        assert store.state is None

    @pytest.mark.asyncio
    async def test_logout_with_expired_token_does_not_refresh(self):
        api = FakeApi(refresh_status=403)
        expired = []
        client, store = make_client(api, on_session_expired=lambda: expired.append(True))

        async with client:
            await client.logout()

        assert api.refresh_calls == 0
        assert api.requests == [("/api/v1/auth/logout", "Bearer access-1")]
        assert expired == []
        assert store.state is None
