################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
import typing as t

from ...schema.environments import (
    CreateEnvironment,
    Environment,
    EnvironmentId,
    UpdateEnvironment,
)
from ...schema.projects import ProjectId
from ...schema.responses import ApiResponse
from .._http import ApiClient
from ._common import (
    dump_payload,
    parse_response,
    path_segment,
    require_data,
    validate_payload,
)

ENVIRONMENTS_PATH = "/api/environments"


class EnvironmentsResource:
    """Environments belong to a project, like "staging" or "production"."""

    def __init__(self, api: ApiClient):
        self._api = api

    async def list(
        self,
        project_id: ProjectId,
        page: t.Optional[int] = None,
        limit: t.Optional[int] = None,
        search: t.Optional[str] = None,
        protected: t.Optional[bool] = None,
    ) -> t.List[Environment]:
        body = await self._api.get(
            ENVIRONMENTS_PATH,
            query={
                "projectId": project_id,
                "page": page,
                "limit": limit,
                "search": search,
                "protected": protected,
            },
        )
        return parse_response(ApiResponse[t.List[Environment]], body).data or []

    async def get(self, environment_id: EnvironmentId) -> Environment:
        body = await self._api.get(
            f"{ENVIRONMENTS_PATH}/{path_segment(environment_id)}"
        )
        return require_data(
            parse_response(ApiResponse[Environment], body).data,
            f"Environment {environment_id} not found",
            "ENVIRONMENT_NOT_FOUND",
        )

    async def create(
        self,
        project_id: ProjectId,
        data: t.Union[CreateEnvironment, t.Mapping[str, t.Any]],
    ) -> Environment:
        payload = validate_payload(CreateEnvironment, data)
        body = await self._api.post(
            ENVIRONMENTS_PATH,
            dump_payload(payload),
            query={"projectId": project_id},
        )
        return require_data(
            parse_response(ApiResponse[Environment], body).data,
            "Failed to create environment",
            "ENVIRONMENT_CREATE_FAILED",
        )

    async def update(
        self,
        environment_id: EnvironmentId,
        data: t.Union[UpdateEnvironment, t.Mapping[str, t.Any]],
    ) -> Environment:
        payload = validate_payload(UpdateEnvironment, data)
        body = await self._api.put(
            f"{ENVIRONMENTS_PATH}/{path_segment(environment_id)}",
            dump_payload(payload),
        )
        return require_data(
            parse_response(ApiResponse[Environment], body).data,
            "Failed to update environment",
            "ENVIRONMENT_UPDATE_FAILED",
        )

    async def delete(self, environment_id: EnvironmentId):
        await self._api.delete(f"{ENVIRONMENTS_PATH}/{path_segment(environment_id)}")
