################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Secrets are addressed by key within a project, and optionally an environment.

When the client has an encryption key, values are encrypted before they leave the
process and decrypted when they come back, so the API only ever sees ciphertext.
"""
import typing as t

from ...schema.environments import EnvironmentId
from ...schema.projects import ProjectId
from ...schema.responses import ApiResponse
from ...schema.secrets import (
    CreateSecret,
    FolderId,
    Secret,
    SecretId,
    SecretKey,
    SecretScope,
    UpdateSecret,
)
from .._crypto import EncryptionService
from .._http import ApiClient
from ._common import (
    dump_payload,
    parse_response,
    path_segment,
    require_data,
    validate_payload,
)

SECRETS_PATH = "/api/secrets"


class SecretsResource:
    def __init__(
        self, api: ApiClient, encryption: t.Optional[EncryptionService] = None
    ):
        self._api = api
        self._encryption = encryption

    @property
    def encrypted(self) -> bool:
        return self._encryption is not None

    def _encrypt_value(self, value: str) -> str:
        if self._encryption is None:
            return value
        return self._encryption.encrypt(value)

    def _decrypt_secret(self, secret: Secret) -> Secret:
        if self._encryption is None or not secret.value:
            return secret
        return secret.model_copy(
            update={"value": self._encryption.decrypt(secret.value)}
        )

    async def list(
        self,
        project_id: ProjectId,
        environment_id: t.Optional[EnvironmentId] = None,
        page: t.Optional[int] = None,
        limit: t.Optional[int] = None,
        search: t.Optional[str] = None,
        scope: t.Optional[SecretScope] = None,
        folder_id: t.Optional[FolderId] = None,
    ) -> t.List[Secret]:
        body = await self._api.get(
            SECRETS_PATH,
            query={
                "projectId": project_id,
                "environmentId": environment_id,
                "page": page,
                "limit": limit,
                "search": search,
                "scope": scope,
                "folderId": folder_id,
            },
        )
        secrets = parse_response(ApiResponse[t.List[Secret]], body).data or []
        return [self._decrypt_secret(secret) for secret in secrets]

    async def get(
        self,
        project_id: ProjectId,
        key: SecretKey,
        environment_id: t.Optional[EnvironmentId] = None,
    ) -> Secret:
        """Fetches a single secret, with its value decrypted.

        Raises:
            envase.sdk.exceptions.EncryptionError: if the stored value can't be
                decrypted with the client's key.
        """
        body = await self._api.get(
            f"{SECRETS_PATH}/{path_segment(key)}",
            query={"projectId": project_id, "environmentId": environment_id},
        )
        secret = require_data(
            parse_response(ApiResponse[Secret], body).data,
            f"Secret {key} not found",
            "SECRET_NOT_FOUND",
        )
        return self._decrypt_secret(secret)

    async def set(
        self,
        project_id: ProjectId,
        key: SecretKey,
        value: str,
        *,
        environment_id: t.Optional[EnvironmentId] = None,
        description: t.Optional[str] = None,
        scope: t.Optional[SecretScope] = None,
        folder_id: t.Optional[FolderId] = None,
        encrypt: bool = True,
    ) -> Secret:
        """Creates a secret.

        Args:
            scope: defaults to ``"environment"`` when ``environment_id`` is passed,
                ``"project"`` otherwise.
            encrypt: set to ``False`` to store the value as-is even if the client
                has an encryption key.
        """
        payload = validate_payload(
            CreateSecret,
            {
                "key": key,
                "value": value,
                "description": description,
                "scope": scope or ("environment" if environment_id else "project"),
                "environmentId": environment_id,
                "folderId": folder_id,
            },
        )
        if encrypt:
            payload = payload.model_copy(
                update={"value": self._encrypt_value(payload.value)}
            )

        body = await self._api.post(
            SECRETS_PATH, dump_payload(payload), query={"projectId": project_id}
        )
        secret = require_data(
            parse_response(ApiResponse[Secret], body).data,
            "Failed to create secret",
            "SECRET_CREATE_FAILED",
        )
        return self._decrypt_secret(secret) if encrypt else secret

    async def update(
        self,
        secret_id: SecretId,
        data: t.Union[UpdateSecret, t.Mapping[str, t.Any]],
        encrypt: bool = True,
    ) -> Secret:
        payload = validate_payload(UpdateSecret, data)
        if encrypt and payload.value is not None:
            payload = payload.model_copy(
                update={"value": self._encrypt_value(payload.value)}
            )

        body = await self._api.put(
            f"{SECRETS_PATH}/{path_segment(secret_id)}", dump_payload(payload)
        )
        secret = require_data(
            parse_response(ApiResponse[Secret], body).data,
            "Failed to update secret",
            "SECRET_UPDATE_FAILED",
        )
        return self._decrypt_secret(secret) if encrypt else secret

    async def delete(
        self,
        project_id: ProjectId,
        key: SecretKey,
        environment_id: t.Optional[EnvironmentId] = None,
    ):
        await self._api.delete(
            f"{SECRETS_PATH}/{path_segment(key)}",
            query={"projectId": project_id, "environmentId": environment_id},
        )
