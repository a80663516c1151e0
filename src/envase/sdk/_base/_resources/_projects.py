################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
import typing as t

from ...schema.projects import CreateProject, Project, ProjectId, UpdateProject
from ...schema.responses import ApiResponse
from .._http import ApiClient
from ._common import (
    dump_payload,
    parse_response,
    path_segment,
    require_data,
    validate_payload,
)

PROJECTS_PATH = "/api/projects"


class ProjectsResource:
    def __init__(self, api: ApiClient):
        self._api = api

    async def list(
        self,
        page: t.Optional[int] = None,
        limit: t.Optional[int] = None,
        search: t.Optional[str] = None,
        organization: t.Optional[str] = None,
        archived: t.Optional[bool] = None,
    ) -> t.List[Project]:
        body = await self._api.get(
            PROJECTS_PATH,
            query={
                "page": page,
                "limit": limit,
                "search": search,
                "organization": organization,
                "archived": archived,
            },
        )
        return parse_response(ApiResponse[t.List[Project]], body).data or []

    async def get(self, project_id: ProjectId) -> Project:
        body = await self._api.get(f"{PROJECTS_PATH}/{path_segment(project_id)}")
        return require_data(
            parse_response(ApiResponse[Project], body).data,
            f"Project {project_id} not found",
            "PROJECT_NOT_FOUND",
        )

    async def create(
        self, data: t.Union[CreateProject, t.Mapping[str, t.Any]]
    ) -> Project:
        payload = validate_payload(CreateProject, data)
        body = await self._api.post(PROJECTS_PATH, dump_payload(payload))
        return require_data(
            parse_response(ApiResponse[Project], body).data,
            "Failed to create project",
            "PROJECT_CREATE_FAILED",
        )

    async def update(
        self,
        project_id: ProjectId,
        data: t.Union[UpdateProject, t.Mapping[str, t.Any]],
    ) -> Project:
        payload = validate_payload(UpdateProject, data)
        body = await self._api.put(
            f"{PROJECTS_PATH}/{path_segment(project_id)}", dump_payload(payload)
        )
        return require_data(
            parse_response(ApiResponse[Project], body).data,
            "Failed to update project",
            "PROJECT_UPDATE_FAILED",
        )

    async def delete(self, project_id: ProjectId):
        await self._api.delete(f"{PROJECTS_PATH}/{path_segment(project_id)}")
