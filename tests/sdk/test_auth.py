################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Tests for ``envase.sdk._base._auth``.

Test boundary: [AuthManager] -> [ApiClient] -> [real HTTP] -> [FakeApi server]
"""
import asyncio
from unittest.mock import Mock

import pytest

from envase.sdk import exceptions
from envase.sdk._base._auth import API_ACTIONS, AuthManager, AuthState
from envase.sdk._base._http import ApiClient, Credentials
from envase.sdk._base._retry import RetryPolicy

REFRESH = API_ACTIONS["refresh"]
VERIFY = API_ACTIONS["verify"]

NEW_TOKENS = {"success": True, "data": {"token": "new", "refreshToken": "new-r"}}


def _api(url, token="old", refresh_token="r") -> ApiClient:
    return ApiClient(
        url,
        Credentials(token=token, refresh_token=refresh_token),
        retry_policy=RetryPolicy(max_retries=0),
    )


class TestState:
    @staticmethod
    def test_unauthenticated():
        auth = AuthManager(ApiClient("http://localhost", Credentials()))

        assert auth.state == AuthState.UNAUTHENTICATED

    @staticmethod
    def test_authenticated():
        auth = AuthManager(ApiClient("http://localhost", Credentials(token="t")))

        assert auth.state == AuthState.AUTHENTICATED

    @staticmethod
    def test_set_token():
        api = ApiClient("http://localhost")
        auth = AuthManager(api)

        auth.set_token("t")
        auth.set_refresh_token("r")

        assert auth.get_token() == "t"
        assert api.credentials.token == "t"
        assert api.credentials.refresh_token == "r"

        auth.set_token(None)

        assert auth.state == AuthState.UNAUTHENTICATED

    @staticmethod
    def test_refreshing(fake_api):
        fake_api.add("POST", REFRESH, (200, NEW_TOKENS), delay=0.2)

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    auth = AuthManager(api)
                    refresh = asyncio.ensure_future(auth.refresh_token())
                    await asyncio.sleep(0.05)
                    during = auth.state
                    await refresh
                    return during, auth.state

        during, after = asyncio.run(_main())

        assert during == AuthState.REFRESHING
        assert after == AuthState.AUTHENTICATED


class TestRefreshToken:
    @staticmethod
    def test_success(fake_api):
        # Given
        fake_api.add("POST", REFRESH, (200, NEW_TOKENS))
        on_refresh = Mock()

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    auth = AuthManager(api, on_token_refresh=on_refresh)
                    return await auth.refresh_token(), api.credentials

        # When
        token, credentials = asyncio.run(_main())

        # Then
        assert token == "new"
        assert credentials.token == "new"
        assert credentials.refresh_token == "new-r"
        on_refresh.assert_called_once_with("new")

        request = fake_api.requests[0]
        assert request.body == {"refreshToken": "r"}
        # The expired token isn't sent to the refresh endpoint.
        assert "Authorization" not in request.headers

    @staticmethod
    def test_keeps_refresh_token_if_not_rotated(fake_api):
        fake_api.add("POST", REFRESH, (200, {"data": {"token": "new"}}))

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    await AuthManager(api).refresh_token()
                    return api.credentials

        credentials = asyncio.run(_main())

        assert credentials.token == "new"
        assert credentials.refresh_token == "r"

    @staticmethod
    def test_no_refresh_token(fake_api):
        async def _main():
            async with fake_api.serve() as url:
                async with _api(url, refresh_token=None) as api:
                    await AuthManager(api).refresh_token()

        with pytest.raises(exceptions.AuthenticationError) as exc_info:
            asyncio.run(_main())

        assert exc_info.value.message == "No refresh token available"
        assert fake_api.requests == []

    @staticmethod
    @pytest.mark.parametrize(
        "reply",
        [
            (401, {"error": "Refresh token revoked"}),
            (500, {"error": "boom"}),
            (200, {"data": {"token": ""}}),
            (200, {"data": None}),
            (200, b"not json"),
        ],
    )
    def test_failure(fake_api, reply):
        fake_api.add("POST", REFRESH, reply)

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    await AuthManager(api).refresh_token()

        with pytest.raises(exceptions.AuthenticationError) as exc_info:
            asyncio.run(_main())

        assert exc_info.value.message == "Failed to refresh token"

    @staticmethod
    def test_unsendable_request(fake_api):
        fake_api.add("POST", REFRESH, (200, NEW_TOKENS))
        credentials = Credentials(token="old", refresh_token="r", organization="o\r\n")

        async def _main():
            async with fake_api.serve() as url:
                api = ApiClient(
                    url, credentials, retry_policy=RetryPolicy(max_retries=0)
                )
                async with api:
                    await AuthManager(api).refresh_token()

        with pytest.raises(exceptions.AuthenticationError) as exc_info:
            asyncio.run(_main())

        assert exc_info.value.message == "Failed to refresh token"
        assert exc_info.value.__cause__.code == "INVALID_REQUEST"
        assert credentials.token == "old"

    @staticmethod
    def test_failure_leaves_session_untouched(fake_api):
        fake_api.add("POST", REFRESH, (500, {"error": "boom"}))
        credentials = Credentials(token="old", refresh_token="r")

        async def _main():
            async with fake_api.serve() as url:
                api = ApiClient(
                    url, credentials, retry_policy=RetryPolicy(max_retries=0)
                )
                async with api:
                    with pytest.raises(exceptions.AuthenticationError):
                        await AuthManager(api).refresh_token()

        asyncio.run(_main())

        assert credentials.token == "old"
        assert credentials.refresh_token == "r"

    @staticmethod
    def test_callback_failure(fake_api):
        fake_api.add("POST", REFRESH, (200, NEW_TOKENS))
        on_refresh = Mock(side_effect=OSError("disk full"))

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    await AuthManager(api, on_token_refresh=on_refresh).refresh_token()

        with pytest.raises(exceptions.AuthenticationError) as exc_info:
            asyncio.run(_main())

        assert isinstance(exc_info.value.__cause__, OSError)

    @staticmethod
    def test_concurrent_callers_share_one_call(fake_api):
        fake_api.add("POST", REFRESH, (200, NEW_TOKENS), delay=0.1)

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    auth = AuthManager(api)
                    return await asyncio.gather(
                        auth.refresh_token(),
                        auth.refresh_token(),
                        auth.refresh_token(),
                    )

        tokens = asyncio.run(_main())

        assert tokens == ["new", "new", "new"]
        assert len(fake_api.requests_to("POST", REFRESH)) == 1

    @staticmethod
    def test_concurrent_callers_share_failure(fake_api):
        fake_api.add("POST", REFRESH, (401, {"error": "revoked"}), delay=0.1)

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    auth = AuthManager(api)
                    return await asyncio.gather(
                        auth.refresh_token(),
                        auth.refresh_token(),
                        return_exceptions=True,
                    )

        results = asyncio.run(_main())

        assert all(isinstance(r, exceptions.AuthenticationError) for r in results)
        assert len(fake_api.requests_to("POST", REFRESH)) == 1

    @staticmethod
    def test_sequential_refreshes_make_separate_calls(fake_api):
        fake_api.add("POST", REFRESH, (200, NEW_TOKENS))

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    auth = AuthManager(api)
                    await auth.refresh_token()
                    await auth.refresh_token()

        asyncio.run(_main())

        assert len(fake_api.requests_to("POST", REFRESH)) == 2


class TestRefreshAndReplay:
    """
    The auth manager plugged into the pipeline as its unauthorized handler.
    """

    @staticmethod
    def test_single_request(fake_api):
        fake_api.add("GET", "/api/projects", (401, {"error": "expired"}), (200, {}))
        fake_api.add("POST", REFRESH, (200, NEW_TOKENS))

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    api.set_unauthorized_handler(AuthManager(api).refresh_token)
                    await api.get("/api/projects")

        asyncio.run(_main())

        calls = fake_api.requests_to("GET", "/api/projects")
        assert [r.headers["Authorization"] for r in calls] == [
            "Bearer old",
            "Bearer new",
        ]

    @staticmethod
    def test_concurrent_failures_trigger_one_refresh(fake_api):
        # Given
        fake_api.add(
            "GET",
            "/api/projects",
            (401, {"error": "expired"}),
            (401, {"error": "expired"}),
            (200, {"data": []}),
        )
        fake_api.add("POST", REFRESH, (200, NEW_TOKENS), delay=0.2)

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    api.set_unauthorized_handler(AuthManager(api).refresh_token)
                    # When
                    return await asyncio.gather(
                        api.get("/api/projects"), api.get("/api/projects")
                    )

        results = asyncio.run(_main())

        # Then
        assert results == [{"data": []}, {"data": []}]
        assert len(fake_api.requests_to("POST", REFRESH)) == 1
        replays = fake_api.requests_to("GET", "/api/projects")[2:]
        assert [r.headers["Authorization"] for r in replays] == [
            "Bearer new",
            "Bearer new",
        ]


class TestVerifyToken:
    @staticmethod
    @pytest.mark.parametrize(
        "reply, expected",
        [
            ((200, {"success": True, "data": {"valid": True}}), True),
            ((200, {"success": True, "data": {"valid": False}}), False),
            ((200, {"success": True}), False),
            ((200, {"data": {"unexpected": 1}}), False),
            ((401, {"error": "expired"}), False),
            ((500, {"error": "boom"}), False),
        ],
    )
    def test_replies(fake_api, reply, expected):
        fake_api.add("GET", VERIFY, reply)

        async def _main():
            async with fake_api.serve() as url:
                async with _api(url) as api:
                    return await AuthManager(api).verify_token()

        assert asyncio.run(_main()) is expected

    @staticmethod
    def test_network_failure(fake_api):
        async def _main():
            async with fake_api.serve() as url:
                pass
            async with _api(url) as api:
                return await AuthManager(api).verify_token()

        assert asyncio.run(_main()) is False
