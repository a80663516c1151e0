################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Repositories that encapsulate data access used by envase commands.

The SDK is async. Each repo method runs one coroutine to completion with
``asyncio.run()``, using a client that lives only for that call.
"""
import asyncio
import typing as t

from ... import exceptions
from ..._client import EnvaseClient
from ...schema.configs import Profile, ProfileName
from ...schema.environments import Environment
from ...schema.projects import Project, ProjectId
from ...schema.secrets import Secret
from .._auth import AuthManager
from .._config import ConfigStore
from .._http import ApiClient, Credentials

ResultT = t.TypeVar("ResultT")


class _ClientRepo:
    def __init__(self, store: t.Optional[ConfigStore] = None):
        self._store = store

    def _run(
        self,
        profile: t.Optional[ProfileName],
        fn: t.Callable[[EnvaseClient], t.Awaitable[ResultT]],
        encryption_key: t.Optional[str] = None,
    ) -> ResultT:
        async def _with_client() -> ResultT:
            client = EnvaseClient.from_profile(
                profile,
                store=self._store or ConfigStore(),
                encryption_key=encryption_key,
            )
            async with client:
                return await fn(client)

        return asyncio.run(_with_client())


class ProfileRepo:
    def __init__(self, store: t.Optional[ConfigStore] = None):
        self._store = store

    def verify_token(
        self, api_url: str, token: str, organization: t.Optional[str] = None
    ) -> bool:
        async def _verify() -> bool:
            async with ApiClient(
                api_url, Credentials(token=token, organization=organization)
            ) as api:
                return await AuthManager(api).verify_token()

        return asyncio.run(_verify())

    def save_profile(self, name: ProfileName, profile: Profile, make_default: bool):
        (self._store or ConfigStore()).save_profile(
            name, profile, make_default=make_default
        )


class ProjectRepo(_ClientRepo):
    def list_projects(self, profile: t.Optional[ProfileName]) -> t.List[Project]:
        return self._run(profile, lambda client: client.projects.list())


class EnvironmentRepo(_ClientRepo):
    def list_environments(
        self, profile: t.Optional[ProfileName], project_id: ProjectId
    ) -> t.List[Environment]:
        return self._run(profile, lambda client: client.environments.list(project_id))


class SecretRepo(_ClientRepo):
    def list_secrets(
        self,
        profile: t.Optional[ProfileName],
        project_id: ProjectId,
        environment_id: t.Optional[str],
        encryption_key: t.Optional[str],
    ) -> t.List[Secret]:
        return self._run(
            profile,
            lambda client: client.secrets.list(project_id, environment_id),
            encryption_key,
        )

    def get_secret(
        self,
        profile: t.Optional[ProfileName],
        project_id: ProjectId,
        key: str,
        environment_id: t.Optional[str],
        encryption_key: t.Optional[str],
    ) -> Secret:
        return self._run(
            profile,
            lambda client: client.secrets.get(project_id, key, environment_id),
            encryption_key,
        )

    def set_secret(
        self,
        profile: t.Optional[ProfileName],
        project_id: ProjectId,
        key: str,
        value: str,
        environment_id: t.Optional[str],
        encryption_key: t.Optional[str],
        encrypt: bool,
    ) -> Secret:
        """
        Raises:
            envase.sdk.exceptions.ConfigurationError: if ``encrypt`` is set but
                there's no encryption key.
        """
        if encrypt and not encryption_key:
            raise exceptions.ConfigurationError(
                "No encryption key. Pass one with --encryption-key, or use "
                "--no-encrypt to store the value as-is."
            )

        return self._run(
            profile,
            lambda client: client.secrets.set(
                project_id,
                key,
                value,
                environment_id=environment_id,
                encrypt=encrypt,
            ),
            encryption_key if encrypt else None,
        )

    def delete_secret(
        self,
        profile: t.Optional[ProfileName],
        project_id: ProjectId,
        key: str,
        environment_id: t.Optional[str],
    ):
        self._run(
            profile,
            lambda client: client.secrets.delete(project_id, key, environment_id),
        )
