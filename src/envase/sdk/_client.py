################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
The user-facing entry point of the SDK.
"""
import logging
import os
import typing as t

import filelock
import pydantic

from . import exceptions
from ._base import _env
from ._base._auth import AuthManager
from ._base._config import ConfigStore
from ._base._crypto import EncryptionService
from ._base._http import ApiClient, Credentials
from ._base._resources import (
    EnvironmentsResource,
    ProjectsResource,
    SecretsResource,
    TeamsResource,
)
from ._base._retry import RetryPolicy
from .schema.configs import (
    ClientOptions,
    ProfileName,
    TokenRefreshCallback,
    UnauthorizedHandler,
)

_logger = logging.getLogger(__name__)


def _format_option_errors(e: pydantic.ValidationError) -> str:
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in e.errors()
    ]
    return "Invalid client options: " + "; ".join(problems)


class EnvaseClient:
    """Client for the Envase secrets-management API.

    Usage::

        async with EnvaseClient(
            api_url="https://api.envase.example.com",
            token="...",
            encryption_key=EncryptionService.generate_key(),
        ) as client:
            project = await client.projects.get("proj-1")
            await client.secrets.set(project.id, "DB_PASSWORD", "hunter2")

    Args:
        api_url: base URL of the API.
        token: bearer token.
        organization: sent with every request in the ``X-Envase-Organization``
            header.
        timeout: seconds before a single attempt is aborted.
        retries: how many times transient failures are retried.
        retry_delay: seconds before the first retry. Doubles with each retry.
        refresh_token: used to obtain a new token when the current one is rejected.
        auto_refresh: if ``True``, an HTTP 401 triggers a token refresh and the
            request is replayed once.
        on_token_refresh: called with the new token after each refresh.
        unauthorized_handler: custom coroutine function called on HTTP 401 instead
            of the built-in refresh.
        encryption_key: 64 hex characters. Enables client-side encryption of
            secret values.
        enable_encryption: requires ``encryption_key`` to be set.
        logger: receives the debug trace of every request.

    Raises:
        envase.sdk.exceptions.ConfigurationError: if the options are invalid.
        envase.sdk.exceptions.EncryptionError: if ``encryption_key`` is malformed.
    """

    def __init__(
        self,
        api_url: str,
        *,
        token: t.Optional[str] = None,
        organization: t.Optional[str] = None,
        timeout: float = 30.0,
        retries: int = 3,
        retry_delay: float = 1.0,
        refresh_token: t.Optional[str] = None,
        auto_refresh: bool = False,
        on_token_refresh: t.Optional[TokenRefreshCallback] = None,
        unauthorized_handler: t.Optional[UnauthorizedHandler] = None,
        encryption_key: t.Optional[str] = None,
        enable_encryption: bool = False,
        logger: t.Optional[logging.Logger] = None,
    ):
        try:
            options = ClientOptions(
                api_url=api_url,
                token=token,
                organization=organization,
                timeout=timeout,
                retries=retries,
                retry_delay=retry_delay,
                refresh_token=refresh_token,
                auto_refresh=auto_refresh,
                on_token_refresh=on_token_refresh,
                unauthorized_handler=unauthorized_handler,
                encryption_key=encryption_key,
                enable_encryption=enable_encryption,
                logger=logger,
            )
        except pydantic.ValidationError as e:
            raise exceptions.ConfigurationError(_format_option_errors(e)) from e

        if options.enable_encryption and not options.encryption_key:
            raise exceptions.ConfigurationError(
                "Encryption is enabled but no encryption key was provided"
            )
        self._encryption: t.Optional[EncryptionService] = (
            EncryptionService(options.encryption_key)
            if options.encryption_key
            else None
        )

        self._options = options
        self._api = ApiClient(
            options.api_url,
            Credentials(
                token=options.token,
                refresh_token=options.refresh_token,
                organization=options.organization,
            ),
            timeout=options.timeout,
            retry_policy=RetryPolicy(
                max_retries=options.retries, base_delay=options.retry_delay
            ),
            logger=options.logger,
        )
        self.auth = AuthManager(self._api, on_token_refresh=options.on_token_refresh)

        if options.unauthorized_handler is not None:
            self._api.set_unauthorized_handler(options.unauthorized_handler)
        elif options.auto_refresh:
            self._api.set_unauthorized_handler(self.auth.refresh_token)

        self.projects = ProjectsResource(self._api)
        self.environments = EnvironmentsResource(self._api)
        self.secrets = SecretsResource(self._api, self._encryption)
        self.teams = TeamsResource(self._api)

    @classmethod
    def from_env(cls, **overrides) -> "EnvaseClient":
        """Builds a client from the ``ENVASE_*`` environment variables.

        Keyword arguments take precedence over the environment.

        Raises:
            envase.sdk.exceptions.ConfigurationError: if ``ENVASE_API_URL`` isn't
                set.
        """
        from_env = {
            "api_url": os.getenv(_env.API_URL_ENV),
            "token": os.getenv(_env.TOKEN_ENV),
            "refresh_token": os.getenv(_env.REFRESH_TOKEN_ENV),
            "organization": os.getenv(_env.ORGANIZATION_ENV),
            "encryption_key": os.getenv(_env.ENCRYPTION_KEY_ENV),
        }
        kwargs = {k: v for k, v in from_env.items() if v is not None}
        kwargs.update(overrides)

        if not kwargs.get("api_url"):
            raise exceptions.ConfigurationError(f"{_env.API_URL_ENV} is not set")

        return cls(**kwargs)

    @classmethod
    def from_profile(
        cls,
        name: t.Optional[ProfileName] = None,
        store: t.Optional[ConfigStore] = None,
        **overrides,
    ) -> "EnvaseClient":
        """Builds a client from a profile saved with ``envase login``.

        Tokens obtained by refreshing are written back to the profile. The write
        happens synchronously under the config file lock, from inside the refresh.
        If it fails, a warning is logged and the refresh still succeeds.

        Args:
            name: profile to use. Defaults to the saved default profile.
            store: where profiles are read from. Defaults to the config file.
            overrides: any other ``EnvaseClient`` option.

        Raises:
            envase.sdk.exceptions.ConfigFileNotFoundError: when no config file
                exists.
            envase.sdk.exceptions.ProfileNotFoundError: when there's no such profile.
        """
        store = store or ConfigStore()
        resolved_name = name or store.default_profile_name()
        profile = store.read_profile(resolved_name)
        assert resolved_name is not None

        client: "EnvaseClient"
        user_callback = overrides.pop("on_token_refresh", None)

        def _persist_tokens(token: str):
            # The session already holds the new token at this point.
            try:
                store.update_tokens(
                    resolved_name, token, client.auth.get_refresh_token()
                )
            except (filelock.Timeout, OSError, exceptions.EnvaseError) as e:
                _logger.warning(
                    "Couldn't save refreshed tokens to profile %r: %s",
                    resolved_name,
                    e,
                )
            if user_callback is not None:
                user_callback(token)

        kwargs: t.Dict[str, t.Any] = {
            "token": profile.token,
            "refresh_token": profile.refresh_token,
            "organization": profile.organization,
            "auto_refresh": profile.refresh_token is not None,
        }
        kwargs.update(overrides)
        client = cls(profile.api_url, on_token_refresh=_persist_tokens, **kwargs)
        return client

    @property
    def options(self) -> ClientOptions:
        """Snapshot of the options the client currently uses."""
        return self._options.model_copy()

    @property
    def api(self) -> ApiClient:
        return self._api

    @property
    def encryption(self) -> t.Optional[EncryptionService]:
        return self._encryption

    def set_token(self, token: t.Optional[str], refresh_token: t.Optional[str] = None):
        self.auth.set_token(token)
        updates: t.Dict[str, t.Any] = {"token": token}
        if refresh_token is not None:
            self.auth.set_refresh_token(refresh_token)
            updates["refresh_token"] = refresh_token
        self._options = self._options.model_copy(update=updates)

    def set_organization(self, organization: t.Optional[str]):
        self._api.set_organization(organization)
        self._options = self._options.model_copy(
            update={"organization": organization}
        )

    async def close(self):
        await self._api.close()

    async def __aenter__(self) -> "EnvaseClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
