################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Token lifecycle: verification and single-flight refresh.
"""
import asyncio
import enum
import logging
import typing as t

import pydantic

from .. import exceptions
from ..schema.configs import TokenRefreshCallback
from ..schema.responses import ApiResponse, TokenPair, TokenVerification
from ._http import ApiClient, RequestDescriptor

logger = logging.getLogger(__name__)

API_ACTIONS = {
    "refresh": "/api/auth/refresh",
    "verify": "/api/auth/verify",
}


class AuthState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    REFRESHING = "refreshing"


class AuthManager:
    """Owns the bearer and refresh tokens of one client.

    The tokens live in the ``Credentials`` object held by ``api``, so every token
    committed here is used by the next request attempt.

    Args:
        api: pipeline used for the verify and refresh calls.
        on_token_refresh: called with the new access token after every successful
            refresh.
    """

    def __init__(
        self,
        api: ApiClient,
        on_token_refresh: t.Optional[TokenRefreshCallback] = None,
    ):
        self._api = api
        self._credentials = api.credentials
        self._on_token_refresh = on_token_refresh
        self._inflight: t.Optional["asyncio.Future[str]"] = None

    @property
    def state(self) -> AuthState:
        if self._inflight is not None and not self._inflight.done():
            return AuthState.REFRESHING
        if self._credentials.token:
            return AuthState.AUTHENTICATED
        return AuthState.UNAUTHENTICATED

    def get_token(self) -> t.Optional[str]:
        return self._credentials.token

    def set_token(self, token: t.Optional[str]):
        self._credentials.token = token

    def get_refresh_token(self) -> t.Optional[str]:
        return self._credentials.refresh_token

    def set_refresh_token(self, refresh_token: t.Optional[str]):
        self._credentials.refresh_token = refresh_token

    def set_on_token_refresh(self, callback: t.Optional[TokenRefreshCallback]):
        self._on_token_refresh = callback

    async def verify_token(self) -> bool:
        """Asks the API whether the current token is still valid.

        Any failure, including network errors, counts as "not valid".
        """
        try:
            body = await self._api.get(API_ACTIONS["verify"])
            response = ApiResponse[TokenVerification].model_validate(body)
        except (exceptions.EnvaseError, pydantic.ValidationError) as e:
            logger.debug("Token verification failed: %r", e)
            return False

        return response.data is not None and response.data.valid

    async def refresh_token(self) -> str:
        """Exchanges the refresh token for a new access token.

        Concurrent callers share a single refresh call and all observe its outcome.
        Suitable as the pipeline's unauthorized handler.

        Returns:
            the new access token.

        Raises:
            envase.sdk.exceptions.AuthenticationError: if there's no refresh token,
                or the refresh failed for any reason.
        """
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._refresh())
            self._inflight.add_done_callback(self._clear_inflight)

        # Cancelling one waiter mustn't cancel the refresh for everybody else.
        return await asyncio.shield(self._inflight)

    def _clear_inflight(self, future: "asyncio.Future[str]"):
        if self._inflight is future:
            self._inflight = None
        if not future.cancelled():
            # Marks the exception as retrieved even if every waiter went away.
            future.exception()

    async def _refresh(self) -> str:
        refresh_token = self._credentials.refresh_token
        if not refresh_token:
            raise exceptions.AuthenticationError("No refresh token available")

        logger.debug("Refreshing access token")
        try:
            body = await self._api.send(
                RequestDescriptor(
                    method="POST",
                    path=API_ACTIONS["refresh"],
                    body={"refreshToken": refresh_token},
                    authenticate=False,
                )
            )
            pair = ApiResponse[TokenPair].model_validate(body).data
        except (exceptions.EnvaseError, pydantic.ValidationError) as e:
            raise exceptions.AuthenticationError("Failed to refresh token") from e

        if pair is None:
            raise exceptions.AuthenticationError("Failed to refresh token")

        # Last write wins if the token was set manually while refreshing.
        self._credentials.token = pair.token
        if pair.refreshToken:
            self._credentials.refresh_token = pair.refreshToken

        if self._on_token_refresh is not None:
            try:
                self._on_token_refresh(pair.token)
            except Exception as e:
                raise exceptions.AuthenticationError("Failed to refresh token") from e

        return pair.token
